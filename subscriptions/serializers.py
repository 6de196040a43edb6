from rest_framework import serializers
from .models import Subscriber

class SubscriberSerializer(serializers.ModelSerializer):
    """
    Read-only view of a ledger entry, with its state at the request's block time.
    """
    state = serializers.SerializerMethodField()

    class Meta:
        model = Subscriber
        fields = ['id', 'address', 'expiry', 'state', 'created_at']
        read_only_fields = fields

    def get_state(self, obj):
        now = self.context.get('now')
        if now is None:
            return None
        return obj.state_at(now).value
