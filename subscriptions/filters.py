import django_filters
from .models import Subscriber

class SubscriberFilter(django_filters.FilterSet):
    """Filter set for ledger entries"""

    address = django_filters.CharFilter(
        field_name='address',
        lookup_expr='icontains'
    )

    expires_before = django_filters.NumberFilter(
        field_name='expiry',
        lookup_expr='lt'
    )

    expires_after = django_filters.NumberFilter(
        field_name='expiry',
        lookup_expr='gte'
    )

    class Meta:
        model = Subscriber
        fields = ['address']
