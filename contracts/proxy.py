import logging
from typing import Any, Dict, List

from .errors import Unauthorized
from .models import Contract, OutboundMessage
from .registry import can_execute
from .types import ContractResponse, Env, MessageInfo

logger = logging.getLogger(__name__)


def relay(contract: Contract, env: Env, info: MessageInfo, msgs: List[Dict[str, Any]]) -> ContractResponse:
    """
    Forward a batch of opaque actions to the host on behalf of an admin.

    The actions are neither inspected nor reordered. Freezing the contract
    does not affect who may relay.
    """
    if not can_execute(contract, info.sender):
        logger.warning(f"Relay rejected for {info.sender} on contract {contract.id}")
        raise Unauthorized()

    response = ContractResponse()
    response.add_messages(OutboundMessage.Kind.RELAY, msgs)
    response.add_attribute('action', 'execute')
    logger.info(f"Contract {contract.id} relaying {len(msgs)} action(s) for {info.sender}")
    return response
