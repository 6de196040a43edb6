"""
Subscription ledger operations.

An entry moves Absent -> Active on a paid join and back to Absent on a
cancel made no later than its expiry. Once the block time passes the expiry
the entry is Expired: it can no longer be cancelled or refunded, only
removed by the reap sweep.
"""
import logging
from typing import Any, Dict, Mapping

from contracts.conf import get_setting
from contracts.errors import AlreadyExpired, AlreadySubscribed, InvalidAmount, NotSubscribed
from contracts.models import Contract, OutboundMessage
from contracts.registry import validate_address
from contracts.types import ContractResponse, Env, MessageInfo, bank_send, coins
from .models import Subscriber, SubscriberState

logger = logging.getLogger(__name__)


def entry_price():
    return coins(get_setting('ENTRY_PRICE'), get_setting('DENOM'))


def refund_amount():
    amount = get_setting('REFUND_AMOUNT')
    if not amount:
        return []
    return coins(amount, get_setting('DENOM'))


def expiry_for(now: int) -> int:
    duration = get_setting('SUBSCRIPTION_DURATION')
    if get_setting('RELATIVE_EXPIRY'):
        return now + duration
    return duration


def seed(contract: Contract, entries: Mapping[str, int], creator: str) -> None:
    """Populate a new ledger from the instantiate message plus the creator's bootstrap entry."""
    ledger = {validate_address(addr): expiry for addr, expiry in entries.items()}
    ledger.setdefault(validate_address(creator), get_setting('BOOTSTRAP_EXPIRY'))
    Subscriber.objects.bulk_create([
        Subscriber(contract=contract, address=addr, expiry=expiry)
        for addr, expiry in sorted(ledger.items())
    ])
    logger.info(f"Seeded contract {contract.id} ledger with {len(ledger)} entries")


def join(contract: Contract, env: Env, info: MessageInfo) -> ContractResponse:
    """Subscribe the caller for the exact entry price."""
    if list(info.funds) != entry_price():
        logger.warning(f"Join by {info.sender} on contract {contract.id} rejected: funds {list(info.funds)}")
        raise InvalidAmount()

    if contract.subscribers.filter(address=info.sender).exists():
        raise AlreadySubscribed()

    address = validate_address(info.sender)
    subscriber = Subscriber.objects.create(contract=contract, address=address, expiry=expiry_for(env.time))
    logger.info(f"{address} joined contract {contract.id}, expiry {subscriber.expiry}")

    return (
        ContractResponse()
        .add_attribute('action', 'join')
        .add_attribute('subscriber', address)
    )


def cancel(contract: Contract, env: Env, info: MessageInfo) -> ContractResponse:
    """Unsubscribe the caller and refund part of the fee, as long as the entry has not expired."""
    subscriber = contract.subscribers.filter(address=info.sender).first()
    if subscriber is None:
        raise NotSubscribed()

    if subscriber.state_at(env.time) == SubscriberState.EXPIRED:
        logger.warning(f"Cancel by {info.sender} on contract {contract.id} rejected: expired at {subscriber.expiry}")
        raise AlreadyExpired()

    deleted, _ = subscriber.delete()
    if not deleted:
        # Removed by a concurrent reap after it was read
        raise NotSubscribed()

    response = ContractResponse()
    response.add_attribute('action', 'refund')
    response.add_attribute('to', info.sender)
    amount = refund_amount()
    if amount:
        response.add_message(OutboundMessage.Kind.BANK, bank_send(info.sender, amount))
    logger.info(f"{info.sender} cancelled on contract {contract.id}, refund {amount}")
    return response


def reap(contract: Contract, env: Env, info: MessageInfo = None) -> ContractResponse:
    """Remove every expired entry. Open to any caller; no refunds are issued."""
    removed, _ = contract.subscribers.filter(expiry__lt=env.time).delete()
    if removed:
        logger.info(f"Reaped {removed} expired entries from contract {contract.id}")
    return (
        ContractResponse()
        .add_attribute('action', 'reap')
        .add_attribute('removed', removed)
    )


def snapshot(contract: Contract) -> Dict[str, int]:
    return dict(contract.subscribers.order_by('address').values_list('address', 'expiry'))


def status(contract: Contract, address: str, now: int) -> Dict[str, Any]:
    subscriber = contract.subscribers.filter(address=address).first()
    if subscriber is None:
        return {'address': address, 'expiry': None, 'state': SubscriberState.ABSENT.value}
    return {
        'address': address,
        'expiry': subscriber.expiry,
        'state': subscriber.state_at(now).value,
    }
