from rest_framework import serializers
from .models import Contract
from .types import Coin

# Largest expiry a Subscriber row can store
MAX_EXPIRY = 2 ** 63 - 1


class CoinSerializer(serializers.Serializer):
    denom = serializers.CharField(max_length=64)
    amount = serializers.IntegerField(min_value=0)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return Coin(denom=value['denom'], amount=value['amount'])


class AddressField(serializers.CharField):
    """Raw address string; format checks happen in the contract so they surface as InvalidAddress."""

    def __init__(self, **kwargs):
        kwargs.setdefault('trim_whitespace', False)
        kwargs.setdefault('allow_blank', True)
        super().__init__(**kwargs)


class InstantiateMsgSerializer(serializers.Serializer):
    admins = serializers.ListField(child=AddressField())
    mutable = serializers.BooleanField()
    seed = serializers.DictField(
        child=serializers.IntegerField(min_value=0, max_value=MAX_EXPIRY), required=False, default=dict,
    )


class EmptyPayloadSerializer(serializers.Serializer):
    pass


class RelayPayloadSerializer(serializers.Serializer):
    msgs = serializers.ListField(child=serializers.JSONField())


class UpdateAdminsPayloadSerializer(serializers.Serializer):
    admins = serializers.ListField(child=AddressField())


class CanExecutePayloadSerializer(serializers.Serializer):
    sender = serializers.CharField(trim_whitespace=False)
    msg = serializers.JSONField(required=False, default=dict)


class SubscriptionPayloadSerializer(serializers.Serializer):
    address = serializers.CharField(trim_whitespace=False)


class TaggedMessageSerializer(serializers.Serializer):
    """
    A message is an object with exactly one key naming the operation; its
    value is that operation's payload. Validated data is {'tag', 'payload'}.
    """
    payload_serializers = {}

    def to_internal_value(self, data):
        if not isinstance(data, dict) or len(data) != 1:
            raise serializers.ValidationError({
                'non_field_errors': ['Message must be an object with exactly one tag.']
            })

        tag, payload = next(iter(data.items()))
        serializer_class = self.payload_serializers.get(tag)
        if serializer_class is None:
            raise serializers.ValidationError({tag: ['Unknown message tag.']})

        payload_serializer = serializer_class(data={} if payload is None else payload)
        if not payload_serializer.is_valid():
            raise serializers.ValidationError({tag: payload_serializer.errors})

        return {'tag': tag, 'payload': dict(payload_serializer.validated_data)}


class ExecuteMsgSerializer(TaggedMessageSerializer):
    payload_serializers = {
        'execute': RelayPayloadSerializer,
        'freeze': EmptyPayloadSerializer,
        'update_admins': UpdateAdminsPayloadSerializer,
        'join': EmptyPayloadSerializer,
        'cancel': EmptyPayloadSerializer,
        'reap': EmptyPayloadSerializer,
    }


class QueryMsgSerializer(TaggedMessageSerializer):
    payload_serializers = {
        'admin_list': EmptyPayloadSerializer,
        'can_execute': CanExecutePayloadSerializer,
        'subscribers': EmptyPayloadSerializer,
        'subscription': SubscriptionPayloadSerializer,
        'contract_info': EmptyPayloadSerializer,
    }


class ExecuteRequestSerializer(serializers.Serializer):
    msg = serializers.JSONField()
    funds = CoinSerializer(many=True, required=False, default=list)


class QueryRequestSerializer(serializers.Serializer):
    msg = serializers.JSONField()


class ContractSerializer(serializers.ModelSerializer):
    class Meta:
        model = Contract
        fields = ['id', 'creator', 'admins', 'mutable', 'contract_name', 'contract_version', 'created_at']
        read_only_fields = fields

