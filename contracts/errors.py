from rest_framework import status
from rest_framework.exceptions import APIException


class ContractError(APIException):
    """
    Base class for every typed failure of a contract call.

    Raising one inside a call aborts it: the surrounding transaction is
    rolled back, so none of the call's writes or outbound messages survive.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Contract call failed.'
    default_code = 'contract_error'


class Unauthorized(ContractError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Unauthorized.'
    default_code = 'unauthorized'


class InvalidAmount(ContractError):
    default_detail = 'Funds must match the entry price exactly.'
    default_code = 'invalid_amount'


class AlreadySubscribed(ContractError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Address is already subscribed.'
    default_code = 'already_subscribed'


class NotSubscribed(ContractError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Address is not subscribed.'
    default_code = 'not_subscribed'


class AlreadyExpired(ContractError):
    default_detail = 'Subscription has already expired.'
    default_code = 'already_expired'


class InvalidAddress(ContractError):
    default_detail = 'Invalid address.'
    default_code = 'invalid_address'


class StateAccessFailure(ContractError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Contract state could not be read or written.'
    default_code = 'state_access_failure'
