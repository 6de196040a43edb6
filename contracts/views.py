import logging
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from . import dispatch
from .errors import ContractError
from .models import Contract
from .serializers import ContractSerializer, ExecuteRequestSerializer, QueryRequestSerializer
from .types import Env, MessageInfo

logger = logging.getLogger(__name__)


def current_env():
    """Block time for this request, in whole seconds."""
    return Env(time=int(timezone.now().timestamp()))


def validation_response(message, error: serializers.ValidationError):
    return Response({
        'message': message,
        'errors': error.detail,
    }, status=status.HTTP_400_BAD_REQUEST)


def caller_address(request):
    """
    The calling user's address is their username, taken as is. Usernames must
    already be valid addresses (lowercase, see contracts.validators); other
    accounts are refused with InvalidAddress on instantiate and join.
    """
    return request.user.get_username()


def error_response(message, error: ContractError):
    return Response({
        'message': message,
        'error': str(error.detail),
        'code': error.default_code,
    }, status=error.status_code)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def instantiate_contract(request):
    """Create a new registry owned by the calling user"""
    info = MessageInfo(sender=caller_address(request))
    try:
        contract, response = dispatch.instantiate(current_env(), info, request.data)
    except ContractError as e:
        logger.warning(f"Instantiate by {info.sender} failed: {e.detail}")
        return error_response('Instantiation failed', e)
    except serializers.ValidationError as e:
        return validation_response('Instantiation failed', e)

    return Response({
        'message': 'Contract instantiated successfully',
        'data': {
            'address': str(contract.id),
            'contract': ContractSerializer(contract).data,
            **response.to_dict(),
        },
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def execute_contract(request, contract_id):
    """Run a mutating message against a contract as the calling user"""
    contract = get_object_or_404(Contract, id=contract_id)

    serializer = ExecuteRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'message': 'Execution failed',
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    info = MessageInfo(
        sender=caller_address(request),
        funds=tuple(serializer.validated_data['funds']),
    )
    try:
        response = dispatch.execute(contract, current_env(), info, serializer.validated_data['msg'])
    except ContractError as e:
        logger.warning(f"Execute on contract {contract_id} by {info.sender} failed: {e.detail}")
        return error_response('Execution failed', e)
    except serializers.ValidationError as e:
        return validation_response('Execution failed', e)

    return Response({
        'message': 'Execution succeeded',
        'data': response.to_dict(),
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
def query_contract(request, contract_id):
    """Answer a read-only message; anyone may query"""
    contract = get_object_or_404(Contract, id=contract_id)

    serializer = QueryRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'message': 'Query failed',
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = dispatch.query(contract, current_env(), serializer.validated_data['msg'])
    except ContractError as e:
        return error_response('Query failed', e)
    except serializers.ValidationError as e:
        return validation_response('Query failed', e)

    return Response({
        'message': 'Query succeeded',
        'data': result,
    }, status=status.HTTP_200_OK)
