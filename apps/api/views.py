"""
API views for the status display and credential configuration.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.credentials import CredentialStore

from .feed import read_status
from .serializers import CredentialSerializer

logger = logging.getLogger(__name__)


class StatusView(APIView):
    """
    GET /api/v1/status/

    Latest snapshot published by the monitor process.
    """

    def get(self, request):
        data = read_status()
        if data is None:
            return Response(
                {'error': 'No data yet', 'code': status.HTTP_503_SERVICE_UNAVAILABLE},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response(data)


class CredentialView(APIView):
    """
    GET  /api/v1/credential/  whether a key is configured
    POST /api/v1/credential/  {"api_key": "..."}; blank clears it

    The monitor reads the key at startup.
    """

    def get(self, request):
        return Response({'configured': CredentialStore().is_configured()})

    def post(self, request):
        serializer = CredentialSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        store = CredentialStore()
        store.set(serializer.validated_data['api_key'])

        return Response({'configured': store.is_configured()}, status=status.HTTP_200_OK)
