"""Operational endpoints."""

from typing import Any

from rest_framework.response import Response
from rest_framework.views import APIView


class HealthView(APIView):
    permission_classes: list[Any] = []
    authentication_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        return Response({"status": "ok", "message": "Server is running"})
