"""HTTP client for the AyuVeda API.

The bearer token is never read from ambient storage here; it comes from the
``SessionContext`` handed to the client, and is attached to every request.
"""

import logging
from urllib.parse import quote

import httpx

from ayu.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AyuApiClient:
    def __init__(
        self,
        session=None,
        base_url: str | None = None,
        http: httpx.Client | None = None,
        prefix: str | None = None,
        timeout: float = 15.0,
    ):
        self.session = session
        self.prefix = settings.API_PREFIX if prefix is None else prefix
        self._http = http or httpx.Client(base_url=base_url or settings.API_BASE_URL, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def _headers(self) -> dict:
        token = self.session.token if self.session is not None else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, json: dict | None = None):
        url = f"{self.prefix}{path}"
        try:
            response = self._http.request(method, url, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError("Network error. Please try again.") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            message = payload.get("message") or payload.get("detail") or response.reason_phrase
            raise ApiError(str(message), response.status_code)
        return payload.get("data")

    def signup(self, name: str, email: str, password: str, confirm_password: str):
        return self._request("POST", "/signup", {
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": confirm_password,
        })

    def verify_otp(self, email: str, otp: str):
        return self._request("POST", "/verifyotp", {"email": email, "otp": otp})

    def resend_otp(self, email: str):
        return self._request("POST", "/resendotp", {"email": email})

    def signin(self, email: str, password: str) -> dict:
        return self._request("POST", "/signin", {"email": email, "password": password})

    def forgot_password(self, email: str):
        return self._request("POST", "/forgotpassword", {"email": email})

    def reset_password(self, email: str, otp: str, new_password: str, confirm_password: str):
        return self._request("POST", "/resetpassword", {
            "email": email,
            "otp": otp,
            "newPassword": new_password,
            "confirmPassword": confirm_password,
        })

    def update_profile(self, user_id: int, **fields) -> dict:
        return self._request("PUT", f"/updateprofile/{user_id}", fields)

    def get_user(self, email: str) -> dict:
        return self._request("GET", f"/user/{quote(email, safe='@')}")

    def me(self) -> dict:
        return self._request("GET", "/profile/me")

    def chat(self, message: str, history: list[dict] | None = None) -> str:
        data = self._request("POST", "/chat", {"message": message, "history": history or []})
        return data["reply"]
