"""Google OAuth adapter for the IdentityProvider protocol."""

from __future__ import annotations

import logging

import requests

from punchman.conf import punchman_settings
from punchman.exceptions import PunchmanError
from punchman.protocols.identity import ExternalIdentity

logger = logging.getLogger(__name__)


class GoogleOAuthProvider:
    """
    Exchanges a Google authorization code for a verified identity.

    Flow:
        1. POST the code to the token endpoint -> id_token
        2. Validate id_token through tokeninfo (audience must be our client)

    Settings (PUNCHMAN dict):
        GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REDIRECT_URI, GOOGLE_TIMEOUT
    """

    TOKEN_URL = "https://oauth2.googleapis.com/token"
    TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        timeout: int | None = None,
    ):
        self.client_id = client_id or punchman_settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or punchman_settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or punchman_settings.GOOGLE_REDIRECT_URI
        self.timeout = timeout or punchman_settings.GOOGLE_TIMEOUT

    def exchange_code(self, code: str) -> ExternalIdentity:
        if not code:
            raise PunchmanError("GOOGLE_AUTH_FAILED", reason="empty code")

        tokens = self._request(
            "POST",
            self.TOKEN_URL,
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        id_token = tokens.get("id_token")
        if not id_token:
            raise PunchmanError("GOOGLE_AUTH_FAILED", reason="no id_token")

        info = self._request("GET", self.TOKENINFO_URL, params={"id_token": id_token})
        if info.get("aud") != self.client_id:
            raise PunchmanError("GOOGLE_AUTH_FAILED", reason="audience mismatch")
        subject = info.get("sub")
        if not subject:
            raise PunchmanError("GOOGLE_AUTH_FAILED", reason="no subject")

        return ExternalIdentity(subject=subject, email=info.get("email"))

    def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = requests.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Google %s %s failed: %s", method, url, type(exc).__name__)
            raise PunchmanError("GOOGLE_AUTH_FAILED", reason="provider error") from exc
