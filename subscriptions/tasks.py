from celery import shared_task
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)

# Sender recorded for sweeps started by the scheduler rather than a user
SWEEP_SENDER = 'reap-sweep'


@shared_task
def reap_expired_subscriptions():
    """Sweep expired entries out of every ledger (run hourly)."""
    from contracts import dispatch
    from contracts.errors import ContractError
    from contracts.models import Contract
    from contracts.types import Env, MessageInfo

    env = Env(time=int(timezone.now().timestamp()))
    removed = 0
    for contract in Contract.objects.filter(subscribers__expiry__lt=env.time).distinct():
        try:
            response = dispatch.execute(contract, env, MessageInfo(sender=SWEEP_SENDER), {'reap': {}})
        except ContractError as e:
            logger.error(f"Reap sweep failed for contract {contract.id}: {e.detail}")
            continue
        removed += int(dict(response.attributes)['removed'])

    logger.info(f"Reaped {removed} expired subscriptions")
    return f"Reaped {removed} expired subscriptions"
