import pytest

from contracts import registry
from contracts.errors import InvalidAddress, Unauthorized
from contracts.models import Contract
from contracts.types import Env, MessageInfo

NOW = Env(time=1_000)


def test_is_admin():
    config = Contract(admins=['bob', 'paul', 'john'], mutable=False)

    assert config.is_admin('bob')
    assert config.is_admin('john')
    assert not config.is_admin('other')


def test_can_modify():
    config = Contract(admins=['bob'], mutable=True)
    assert not config.can_modify('alice')
    assert config.can_modify('bob')

    # no one can modify an immutable contract
    config = Contract(admins=['alice'], mutable=False)
    assert not config.can_modify('alice')
    assert not config.can_modify('bob')


@pytest.mark.parametrize('addr', ['joe', 'alice', 'terra1x9k.contract_2-b'])
def test_validate_address_accepts_well_formed(addr):
    assert registry.validate_address(addr) == addr


@pytest.mark.parametrize('addr', ['', 'jo', 'Alice', ' alice', 'some contract', 'a' * 91])
def test_validate_address_rejects_malformed(addr):
    with pytest.raises(InvalidAddress):
        registry.validate_address(addr)


def test_map_validate_keeps_order_and_collapses_repeats():
    assert registry.map_validate(['carl', 'alice', 'carl', 'bob']) == ['carl', 'alice', 'bob']


def test_map_validate_fails_on_any_bad_element():
    with pytest.raises(InvalidAddress):
        registry.map_validate(['alice', 'BOB'])


def test_update_admins_by_admin(contract):
    response = registry.update_admins(contract, NOW, MessageInfo('alice'), ['alice', 'bob'])

    contract.refresh_from_db()
    assert contract.admins == ['alice', 'bob']
    assert contract.mutable
    assert response.attributes == [('action', 'update_admins')]


def test_update_admins_by_outsider_is_unauthorized(contract):
    with pytest.raises(Unauthorized):
        registry.update_admins(contract, NOW, MessageInfo('anyone'), ['anyone'])

    contract.refresh_from_db()
    assert contract.admins == ['alice', 'bob', 'carl']


def test_freeze_blocks_every_later_change(contract):
    response = registry.freeze(contract, NOW, MessageInfo('bob'))
    assert response.attributes == [('action', 'freeze')]

    contract.refresh_from_db()
    assert contract.mutable is False

    for caller in ['alice', 'bob', 'carl', 'anyone']:
        with pytest.raises(Unauthorized):
            registry.update_admins(contract, NOW, MessageInfo(caller), ['alice'])
        with pytest.raises(Unauthorized):
            registry.freeze(contract, NOW, MessageInfo(caller))

    contract.refresh_from_db()
    assert contract.admins == ['alice', 'bob', 'carl']
    assert contract.mutable is False


def test_freeze_twice_keeps_first_effect(contract):
    registry.freeze(contract, NOW, MessageInfo('alice'))
    with pytest.raises(Unauthorized):
        registry.freeze(contract, NOW, MessageInfo('alice'))

    contract.refresh_from_db()
    assert contract.mutable is False


def test_removed_admin_cannot_freeze(contract):
    registry.update_admins(contract, NOW, MessageInfo('alice'), ['alice', 'bob'])

    with pytest.raises(Unauthorized):
        registry.freeze(contract, NOW, MessageInfo('carl'))


def test_can_execute_ignores_mutability(instantiate):
    contract = instantiate(['alice', 'bob'], mutable=False)

    assert registry.can_execute(contract, 'alice')
    assert registry.can_execute(contract, 'bob')
    assert not registry.can_execute(contract, 'anyone')
