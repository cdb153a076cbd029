"""Identity verifier backed by the identity service's user endpoint."""

import httpx

from checkout.identity.port import (
    IdentityServiceUnavailable,
    IdentityVerifier,
    InvalidCredential,
    Principal,
    bearer_token,
)


class HttpIdentityVerifier(IdentityVerifier):
    def __init__(self, base_url: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _fetch_user(self, authorization: str) -> dict:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.get("/auth/me", headers={"Authorization": authorization})
            except httpx.HTTPError as exc:
                raise IdentityServiceUnavailable(f"Identity service unreachable: {exc}") from exc

        if response.status_code in (401, 403):
            raise InvalidCredential("Invalid auth token")
        if response.status_code != 200:
            raise IdentityServiceUnavailable(f"Identity service answered {response.status_code}")

        try:
            user = response.json()
        except ValueError as exc:
            raise IdentityServiceUnavailable(f"Malformed user profile: {exc}") from exc
        if not isinstance(user, dict):
            raise IdentityServiceUnavailable("Malformed user profile: expected a JSON object")
        return user

    def verify(self, authorization: str | None) -> Principal:
        bearer_token(authorization)
        user = self._fetch_user(authorization)
        subject_id = user.get("id")
        if not subject_id:
            raise InvalidCredential("Invalid user profile")
        return Principal(subject_id=str(subject_id), authorization=authorization)
