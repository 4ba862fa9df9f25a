"""
Punchman HTTP endpoints.

Every response is a {data, error, code} envelope: data is null and error a
message string on failure.

    POST scan/                  {qrPayload, token?, loyaltyProgramId?}
    POST auth/google/           {googleCode}
    POST merchant-users/login/  {merchantSlug, login, password}
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from punchman.exceptions import PunchmanError
from punchman.services import auth
from punchman.services.scan import scan

logger = logging.getLogger("punchman.views")

ERROR_STATUS = {
    "INVALID_QR_PAYLOAD": 400,
    "INVALID_USER_ID": 400,
    "PROGRAM_REQUIRED": 400,
    "UNAUTHENTICATED": 401,
    "TOKEN_INVALID": 401,
    "TOKEN_EXPIRED": 401,
    "GOOGLE_AUTH_FAILED": 401,
    "INVALID_CREDENTIALS": 401,
    "FORBIDDEN": 403,
    "PROGRAM_NOT_FOUND": 404,
    "PUNCH_CARD_NOT_FOUND": 404,
    "REWARD_ALREADY_READY": 409,
    "REWARD_NOT_READY": 409,
    "STORAGE_UNAVAILABLE": 503,
    "SERVICE_ERROR": 503,
}


def envelope(data=None, error: PunchmanError | None = None) -> JsonResponse:
    """Wrap a result or a PunchmanError in the response envelope."""
    if error is None:
        return JsonResponse({"data": data, "error": None, "code": None})
    return JsonResponse(
        {"data": None, "error": error.message, "code": error.code},
        status=ERROR_STATUS.get(error.code, 400),
    )


class JsonView(View):
    """Parses the JSON body and converts PunchmanError into envelopes."""

    def post(self, request):
        try:
            body = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, ValueError):
            body = None
        if not isinstance(body, dict):
            return JsonResponse(
                {"data": None, "error": "Invalid JSON", "code": "INVALID_REQUEST"},
                status=400,
            )

        try:
            return envelope(self.handle(request, body))
        except PunchmanError as exc:
            logger.info("%s rejected: %s", request.path, exc.code)
            return envelope(error=exc)
        except Exception:
            logger.exception("%s failed", request.path)
            return envelope(error=PunchmanError("SERVICE_ERROR"))

    def handle(self, request, body: dict):
        raise NotImplementedError


@method_decorator(csrf_exempt, name="dispatch")
class ScanView(JsonView):
    """Punch or redeem from a scanned QR payload."""

    def handle(self, request, body):
        token = body.get("token") or _bearer_token(request)
        result = scan(
            body.get("qrPayload", ""),
            token,
            loyalty_program_id=body.get("loyaltyProgramId"),
        )
        return result.as_dict()


@method_decorator(csrf_exempt, name="dispatch")
class GoogleAuthView(JsonView):
    """Customer login with a Google authorization code."""

    def handle(self, request, body):
        return auth.issue_for_customer(body.get("googleCode", "")).as_dict()


@method_decorator(csrf_exempt, name="dispatch")
class MerchantUserLoginView(JsonView):
    """Merchant staff/admin login."""

    def handle(self, request, body):
        issued = auth.issue_for_merchant_user(
            body.get("merchantSlug", ""),
            body.get("login", ""),
            body.get("password", ""),
        )
        return issued.as_dict()


def _bearer_token(request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[7:]
    return None
