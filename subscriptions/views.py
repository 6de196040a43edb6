from django.shortcuts import get_object_or_404
from rest_framework import viewsets, permissions
from contracts.models import Contract
from contracts.views import current_env
from .filters import SubscriberFilter
from .models import Subscriber
from .pagination import SubscriberPagination
from .serializers import SubscriberSerializer

class SubscriberViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Staff-only listing of one contract's ledger.
    Contract callers use the subscribers/subscription queries instead.
    """
    serializer_class = SubscriberSerializer
    permission_classes = [permissions.IsAdminUser]
    pagination_class = SubscriberPagination
    filterset_class = SubscriberFilter

    def get_queryset(self):
        contract = get_object_or_404(Contract, id=self.kwargs['contract_id'])
        return Subscriber.objects.filter(contract=contract)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['now'] = current_env().time
        return context
