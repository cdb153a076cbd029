"""Identity verification port.

The checkout core never issues or validates credentials. An IdentityVerifier
turns the caller's credential into a Principal, and the core only ever reads
``Principal.subject_id``. The raw authorization context travels inside the
Principal so that it can be forwarded unchanged to services that need it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class Unauthenticated(Exception):
    """No usable credential was presented."""


class InvalidCredential(Exception):
    """A credential was presented but the identity service rejected it."""


class IdentityServiceUnavailable(Exception):
    """The identity service could not be reached or answered with an error."""


@dataclass(frozen=True)
class Principal:
    """The authenticated subject a checkout runs under."""

    subject_id: str
    authorization: str | None = field(default=None, repr=False, compare=False)


class IdentityVerifier(ABC):
    """Abstract identity verification interface."""

    @abstractmethod
    def verify(self, authorization: str | None) -> Principal:
        """Resolve an ``Authorization`` header value into a Principal."""
        ...


def bearer_token(authorization: str | None) -> str:
    """Extract the token from a ``Bearer <token>`` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated("Missing auth token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthenticated("Missing auth token")
    return token
