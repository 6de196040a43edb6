import logging
from typing import Iterable, List
from django.core.exceptions import ValidationError

from .errors import InvalidAddress, Unauthorized
from .models import Contract
from .types import ContractResponse, Env, MessageInfo
from .validators import address_validator

logger = logging.getLogger(__name__)


def validate_address(addr: str) -> str:
    """Host-side address format check. Returns the address unchanged."""
    try:
        address_validator(addr)
    except ValidationError:
        raise InvalidAddress(f"Invalid address: {addr!r}")
    return addr


def map_validate(addrs: Iterable[str]) -> List[str]:
    """Validate every address, keeping first-seen order and dropping repeats."""
    validated = []
    for addr in addrs:
        addr = validate_address(addr)
        if addr not in validated:
            validated.append(addr)
    return validated


def can_execute(contract: Contract, sender: str) -> bool:
    return contract.is_admin(sender)


def freeze(contract: Contract, env: Env, info: MessageInfo) -> ContractResponse:
    """Permanently clear the mutability flag. Only reachable while still mutable."""
    if not contract.can_modify(info.sender):
        logger.warning(f"Freeze rejected for {info.sender} on contract {contract.id}")
        raise Unauthorized()

    contract.mutable = False
    contract.save(update_fields=['mutable', 'updated_at'])
    logger.info(f"Contract {contract.id} frozen by {info.sender}")
    return ContractResponse().add_attribute('action', 'freeze')


def update_admins(contract: Contract, env: Env, info: MessageInfo, admins: List[str]) -> ContractResponse:
    """Replace the admin roster. Requires an admin caller on a mutable contract."""
    if not contract.can_modify(info.sender):
        logger.warning(f"Admin update rejected for {info.sender} on contract {contract.id}")
        raise Unauthorized()

    contract.admins = map_validate(admins)
    contract.save(update_fields=['admins', 'updated_at'])
    logger.info(f"Contract {contract.id} admins set to {contract.admins} by {info.sender}")
    return ContractResponse().add_attribute('action', 'update_admins')
