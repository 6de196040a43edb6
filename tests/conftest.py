import pytest

from contracts import dispatch
from contracts.types import Env, MessageInfo, coins


@pytest.fixture
def scheduled_deliveries(monkeypatch):
    """Capture post-commit delivery scheduling instead of talking to a broker."""
    from contracts import tasks

    calls = []
    monkeypatch.setattr(tasks.deliver_outbound_messages, 'delay', lambda *args: calls.append(args))
    return calls


@pytest.fixture
def instantiate(db):
    def _instantiate(admins, mutable=True, seed=None, creator='anyone'):
        msg = {'admins': admins, 'mutable': mutable}
        if seed is not None:
            msg['seed'] = seed
        contract, _ = dispatch.instantiate(Env(time=0), MessageInfo(sender=creator), msg)
        return contract
    return _instantiate


@pytest.fixture
def contract(instantiate):
    return instantiate(['alice', 'bob', 'carl'], mutable=True)


@pytest.fixture
def fee():
    return tuple(coins(100, 'UST'))
