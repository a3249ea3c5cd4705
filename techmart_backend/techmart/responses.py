# techmart/responses.py
"""
API ERROR NORMALIZATION

Every handled failure leaves the API in one shape:
    {"success": false, "error": <message>, "code": <KIND>, ...details}
"""

from __future__ import annotations

from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int, **details):
    return Response(
        {"success": False, "error": message, "code": code, **details},
        status=http_status,
    )
