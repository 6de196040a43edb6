from typing import Any, Dict, List, NamedTuple, Tuple


class Coin(NamedTuple):
    denom: str
    amount: int


class MessageInfo(NamedTuple):
    """Who is calling and what they attached to the call."""
    sender: str
    funds: Tuple[Coin, ...] = ()


class Env(NamedTuple):
    """Block time of the call, in seconds."""
    time: int


def coins(amount: int, denom: str) -> List[Coin]:
    return [Coin(denom=denom, amount=amount)]


def bank_send(to_address: str, amount: List[Coin]) -> Dict[str, Any]:
    """Build a value transfer instruction for the host."""
    return {
        'bank': {
            'send': {
                'to_address': to_address,
                'amount': [{'denom': c.denom, 'amount': c.amount} for c in amount],
            }
        }
    }


class ContractResponse:
    """
    Result of a successful call: audit attributes plus the host-bound
    messages, in emission order.
    """

    def __init__(self):
        self.attributes: List[Tuple[str, str]] = []
        self.messages: List[Tuple[str, Dict[str, Any]]] = []

    def add_attribute(self, key: str, value) -> 'ContractResponse':
        self.attributes.append((key, str(value)))
        return self

    def add_message(self, kind: str, payload: Dict[str, Any]) -> 'ContractResponse':
        self.messages.append((kind, payload))
        return self

    def add_messages(self, kind: str, payloads) -> 'ContractResponse':
        for payload in payloads:
            self.add_message(kind, payload)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            'attributes': [{'key': k, 'value': v} for k, v in self.attributes],
            'messages': [{'kind': kind, 'payload': payload} for kind, payload in self.messages],
        }

    def __repr__(self):
        return f"ContractResponse(attributes={self.attributes!r}, messages={len(self.messages)})"
