from celery import shared_task
import logging

logger = logging.getLogger(__name__)


def _undelivered(contract_id):
    from .models import OutboundMessage

    return OutboundMessage.objects.filter(
        contract_id=contract_id,
    ).exclude(
        status=OutboundMessage.Status.DELIVERED,
    ).order_by('created_at', 'sequence')


def _claim(message):
    """
    Atomically move a message to SENDING. Returns False when another worker
    already holds it or has delivered it since the message was read.
    """
    from .models import OutboundMessage

    claimed = OutboundMessage.objects.filter(
        pk=message.pk,
        status__in=[OutboundMessage.Status.PENDING, OutboundMessage.Status.FAILED],
    ).update(status=OutboundMessage.Status.SENDING)
    return claimed == 1


def _deliver_in_order(messages):
    """Deliver messages one by one, stopping at the first failure so order is kept."""
    from .backends import get_backend

    backend = get_backend()
    delivered = 0
    for message in messages:
        if not _claim(message):
            # Owned by another pass; later messages must wait behind it
            logger.info(f"Message {message.id} already claimed, stopping this pass")
            break
        try:
            backend.deliver(message)
        except Exception as e:
            logger.error(f"Delivery of message {message.id} failed: {str(e)}")
            message.record_failure(str(e))
            raise
        message.mark_as_delivered()
        delivered += 1
    return delivered


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def deliver_outbound_messages(self, contract_id):
    """Hand a contract's undelivered messages to the host backend."""
    try:
        delivered = _deliver_in_order(_undelivered(contract_id))
    except Exception as e:
        if self.request.retries < self.max_retries:
            countdown = 2 ** self.request.retries * 60  # 1min, 2min, 4min
            raise self.retry(countdown=countdown, exc=e)
        raise

    logger.info(f"Delivered {delivered} message(s) for contract {contract_id}")
    return f"Delivered {delivered} message(s) for contract {contract_id}"


@shared_task
def retry_failed_deliveries():
    """Retry contracts holding failed messages with fewer than 5 attempts (run every 15 minutes)."""
    from .models import OutboundMessage

    contract_ids = list(
        OutboundMessage.objects.filter(
            status=OutboundMessage.Status.FAILED,
            delivery_attempts__lt=5,
        ).order_by('contract_id').values_list('contract_id', flat=True).distinct()[:10]
    )

    success_count = 0
    for contract_id in contract_ids:
        try:
            _deliver_in_order(_undelivered(contract_id))
            success_count += 1
        except Exception as e:
            logger.error(f"Retry failed for contract {contract_id}: {str(e)}")

    return f"Retried {len(contract_ids)} contracts, {success_count} succeeded"
