import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from contracts.models import Contract

pytestmark = pytest.mark.django_db

FEE = [{'denom': 'UST', 'amount': 100}]


@pytest.fixture
def client_for(django_user_model):
    def _client_for(username, is_staff=False):
        user = django_user_model.objects.create_user(username=username, password='secret-pass', is_staff=is_staff)
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client_for


@pytest.fixture
def deployed(client_for):
    response = client_for('anyone').post(
        reverse('instantiate_contract'),
        {'admins': ['alice', 'bob', 'carl'], 'mutable': True},
        format='json',
    )
    assert response.status_code == 201
    return Contract.objects.get(pk=response.data['data']['address'])


def execute(client, contract, msg, funds=None):
    body = {'msg': msg}
    if funds is not None:
        body['funds'] = funds
    return client.post(reverse('execute_contract', args=[contract.pk]), body, format='json')


def query(client, contract, msg):
    return client.post(reverse('query_contract', args=[contract.pk]), {'msg': msg}, format='json')


def test_instantiate_requires_authentication():
    response = APIClient().post(reverse('instantiate_contract'), {'admins': [], 'mutable': True}, format='json')

    assert response.status_code == 401


def test_instantiate_returns_contract(client_for):
    response = client_for('jack').post(
        reverse('instantiate_contract'),
        {'admins': ['jack', 'john'], 'mutable': False, 'seed': {'joe': 100}},
        format='json',
    )

    assert response.status_code == 201
    data = response.data['data']
    assert data['contract']['admins'] == ['jack', 'john']
    assert data['contract']['mutable'] is False
    assert data['messages'] == []
    contract = Contract.objects.get(pk=data['address'])
    assert contract.creator == 'jack'
    assert sorted(contract.subscribers.values_list('address', flat=True)) == ['jack', 'joe']


def test_instantiate_with_bad_admin(client_for):
    response = client_for('jack').post(
        reverse('instantiate_contract'),
        {'admins': ['Not An Address'], 'mutable': True},
        format='json',
    )

    assert response.status_code == 400
    assert response.data['code'] == 'invalid_address'
    assert not Contract.objects.exists()


def test_admin_relays_and_outsider_is_forbidden(client_for, deployed):
    actions = [{'bank': {'send': {'to_address': 'bob', 'amount': [{'denom': 'DAI', 'amount': 1}]}}}]

    response = execute(client_for('carl'), deployed, {'execute': {'msgs': actions}})
    assert response.status_code == 200
    assert response.data['data']['messages'] == [{'kind': 'relay', 'payload': actions[0]}]
    assert response.data['data']['attributes'] == [{'key': 'action', 'value': 'execute'}]

    response = execute(client_for('mallory'), deployed, {'execute': {'msgs': actions}})
    assert response.status_code == 403
    assert response.data['code'] == 'unauthorized'


def test_join_then_cancel_with_relative_expiry(settings, client_for, deployed):
    settings.WHITELIST = {'RELATIVE_EXPIRY': True}
    dave = client_for('dave')

    response = execute(dave, deployed, {'join': {}}, funds=FEE)
    assert response.status_code == 200

    response = execute(dave, deployed, {'join': {}}, funds=FEE)
    assert response.status_code == 409
    assert response.data['code'] == 'already_subscribed'

    response = execute(dave, deployed, {'cancel': {}})
    assert response.status_code == 200
    assert response.data['data']['messages'] == [{
        'kind': 'bank',
        'payload': {'bank': {'send': {'to_address': 'dave', 'amount': [{'denom': 'UST', 'amount': 95}]}}},
    }]


def test_join_with_wrong_amount(client_for, deployed):
    response = execute(client_for('dave'), deployed, {'join': {}}, funds=[{'denom': 'UST', 'amount': 99}])

    assert response.status_code == 400
    assert response.data['code'] == 'invalid_amount'


def test_raw_expiry_join_cannot_be_cancelled(client_for, deployed):
    dave = client_for('dave')
    execute(dave, deployed, {'join': {}}, funds=FEE)

    response = execute(dave, deployed, {'cancel': {}})

    assert response.status_code == 400
    assert response.data['code'] == 'already_expired'


def test_unknown_tag_is_bad_request(client_for, deployed):
    response = execute(client_for('alice'), deployed, {'self_destruct': {}})

    assert response.status_code == 400
    assert response.data['message'] == 'Execution failed'
    assert 'self_destruct' in response.data['errors']


def test_missing_contract_is_not_found(client_for):
    response = execute(client_for('alice'), Contract(), {'freeze': {}})

    assert response.status_code == 404


def test_queries_are_public(deployed):
    client = APIClient()

    response = query(client, deployed, {'admin_list': {}})
    assert response.status_code == 200
    assert response.data['data'] == {'admins': ['alice', 'bob', 'carl'], 'mutable': True}

    response = query(client, deployed, {'can_execute': {'sender': 'mallory', 'msg': {}}})
    assert response.data['data'] == {'can_execute': False}

    response = query(client, deployed, {'subscribers': {}})
    assert response.data['data'] == {'subscribers': {'anyone': 100}}


def test_subscriber_listing_is_staff_only(client_for, deployed):
    url = reverse('subscriber_list', args=[deployed.pk])

    assert client_for('alice').get(url).status_code == 403

    response = client_for('ops', is_staff=True).get(url, {'expires_before': 1000})
    assert response.status_code == 200
    listed = response.data['data']['subscribers']
    assert [entry['address'] for entry in listed] == ['anyone']
    assert listed[0]['state'] == 'expired'
    assert response.data['data']['pagination']['total_items'] == 1


def test_unknown_query_tag_keeps_response_shape(deployed):
    response = query(APIClient(), deployed, {'admins': {}})

    assert response.status_code == 400
    assert response.data['message'] == 'Query failed'
    assert 'admins' in response.data['errors']


def test_instantiate_with_unstorable_seed(client_for):
    response = client_for('jack').post(
        reverse('instantiate_contract'),
        {'admins': ['jack'], 'mutable': True, 'seed': {'joe': 2 ** 63}},
        format='json',
    )

    assert response.status_code == 400
    assert response.data['message'] == 'Instantiation failed'
    assert 'seed' in response.data['errors']
    assert not Contract.objects.exists()


def test_cancel_without_entry_is_not_found(client_for, deployed):
    response = execute(client_for('dave'), deployed, {'cancel': {}})

    assert response.status_code == 404
    assert response.data['code'] == 'not_subscribed'


def test_username_that_is_not_an_address_cannot_join(client_for, deployed):
    response = execute(client_for('Dave'), deployed, {'join': {}}, funds=FEE)

    assert response.status_code == 400
    assert response.data['code'] == 'invalid_address'
    assert not deployed.subscribers.filter(address__iexact='dave').exists()
