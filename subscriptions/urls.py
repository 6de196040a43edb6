from django.urls import path
from .views import SubscriberViewSet

urlpatterns = [
    path('', SubscriberViewSet.as_view({'get': 'list'}), name='subscriber_list'),
    path('<uuid:pk>/', SubscriberViewSet.as_view({'get': 'retrieve'}), name='subscriber_detail'),
]
