from django.urls import include, path
from . import views

urlpatterns = [
    path('', views.instantiate_contract, name='instantiate_contract'),
    path('<uuid:contract_id>/execute/', views.execute_contract, name='execute_contract'),
    path('<uuid:contract_id>/query/', views.query_contract, name='query_contract'),

    # Ledger listing for staff
    path('<uuid:contract_id>/subscribers/', include('subscriptions.urls')),
]
