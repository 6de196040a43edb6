import logging
from django.utils.module_loading import import_string

from .conf import get_setting

logger = logging.getLogger(__name__)


class LoggingBackend:
    """
    Default host backend. Records each instruction in the log; deployments
    that move real value point HOST_BACKEND at their own delivery class.
    """

    def deliver(self, message):
        logger.info(
            f"Delivering {message.kind} message {message.batch}#{message.sequence} "
            f"for contract {message.contract_id}: {message.payload}"
        )


def get_backend():
    return import_string(get_setting('HOST_BACKEND'))()
