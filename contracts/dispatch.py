"""
Entry points of the registry: instantiate, execute and query.

Each call validates the message envelope, routes it to exactly one handler
and runs that handler inside a single database transaction. A ContractError
raised by a handler rolls back every write of the call, including the
outbox rows for its messages.
"""
import uuid
import logging
from typing import Any, Dict, Tuple
from django.db import DatabaseError, transaction

from subscriptions import ledger
from . import proxy, registry
from .conf import CONTRACT_NAME, CONTRACT_VERSION
from .errors import StateAccessFailure
from .models import Contract, OutboundMessage
from .serializers import ExecuteMsgSerializer, InstantiateMsgSerializer, QueryMsgSerializer
from .types import ContractResponse, Env, MessageInfo

logger = logging.getLogger(__name__)

EXECUTE_HANDLERS = {
    'execute': proxy.relay,
    'freeze': registry.freeze,
    'update_admins': registry.update_admins,
    'join': ledger.join,
    'cancel': ledger.cancel,
    'reap': ledger.reap,
}


def _query_admin_list(contract, env):
    return {'admins': list(contract.admins), 'mutable': contract.mutable}


def _query_can_execute(contract, env, sender, msg):
    return {'can_execute': registry.can_execute(contract, sender)}


def _query_subscribers(contract, env):
    return {'subscribers': ledger.snapshot(contract)}


def _query_subscription(contract, env, address):
    return ledger.status(contract, address, env.time)


def _query_contract_info(contract, env):
    return {'contract': contract.contract_name, 'version': contract.contract_version}


QUERY_HANDLERS = {
    'admin_list': _query_admin_list,
    'can_execute': _query_can_execute,
    'subscribers': _query_subscribers,
    'subscription': _query_subscription,
    'contract_info': _query_contract_info,
}


def _parse(serializer_class, msg) -> Tuple[str, Dict[str, Any]]:
    serializer = serializer_class(data=msg)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data['tag'], serializer.validated_data['payload']


def _record_messages(contract: Contract, response: ContractResponse):
    if not response.messages:
        return
    batch = uuid.uuid4()
    OutboundMessage.objects.bulk_create([
        OutboundMessage(contract=contract, batch=batch, sequence=index, kind=kind, payload=payload)
        for index, (kind, payload) in enumerate(response.messages)
    ])
    transaction.on_commit(lambda: _schedule_delivery(contract.pk))


def _schedule_delivery(contract_id):
    from .tasks import deliver_outbound_messages
    deliver_outbound_messages.delay(str(contract_id))


def instantiate(env: Env, info: MessageInfo, msg: Dict[str, Any]) -> Tuple[Contract, ContractResponse]:
    """Create a registry: admin roster, seeded ledger and the creator's bootstrap entry."""
    serializer = InstantiateMsgSerializer(data=msg)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        with transaction.atomic():
            contract = Contract.objects.create(
                creator=registry.validate_address(info.sender),
                admins=registry.map_validate(data['admins']),
                mutable=data['mutable'],
                contract_name=CONTRACT_NAME,
                contract_version=CONTRACT_VERSION,
            )
            ledger.seed(contract, data['seed'], info.sender)
    except DatabaseError as e:
        logger.error(f"Instantiate by {info.sender} failed on storage: {str(e)}")
        raise StateAccessFailure() from e

    logger.info(f"Contract {contract.id} instantiated by {info.sender}")
    return contract, ContractResponse()


def execute(contract: Contract, env: Env, info: MessageInfo, msg: Dict[str, Any]) -> ContractResponse:
    """Route a mutating message to its handler and commit its effects atomically."""
    tag, payload = _parse(ExecuteMsgSerializer, msg)
    handler = EXECUTE_HANDLERS[tag]

    try:
        with transaction.atomic():
            # Calls against one contract serialize on its row
            locked = Contract.objects.select_for_update().get(pk=contract.pk)
            response = handler(locked, env, info, **payload)
            _record_messages(locked, response)
    except DatabaseError as e:
        logger.error(f"{tag} on contract {contract.id} failed on storage: {str(e)}")
        raise StateAccessFailure() from e

    contract.refresh_from_db()
    return response


def query(contract: Contract, env: Env, msg: Dict[str, Any]) -> Dict[str, Any]:
    """Answer a read-only message. Never writes."""
    tag, payload = _parse(QueryMsgSerializer, msg)
    try:
        return QUERY_HANDLERS[tag](contract, env, **payload)
    except DatabaseError as e:
        logger.error(f"Query {tag} on contract {contract.id} failed on storage: {str(e)}")
        raise StateAccessFailure() from e
