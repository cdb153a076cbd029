"""Identity verifier factory.

Provides get_verifier() / set_verifier() to swap implementations:
- HttpIdentityVerifier when IDENTITY_SERVICE_URL is configured
- FakeIdentityVerifier otherwise (development and testing)
"""

from checkout.identity.fake_adapter import FakeIdentityVerifier
from checkout.identity.http_adapter import HttpIdentityVerifier
from checkout.identity.port import IdentityVerifier
from checkout.settings import settings

_current_verifier: IdentityVerifier | None = None


def get_verifier() -> IdentityVerifier:
    """Return the current identity verifier."""
    global _current_verifier
    if _current_verifier is None:
        if settings.identity_service_url:
            _current_verifier = HttpIdentityVerifier(
                settings.identity_service_url,
                timeout=settings.upstream_timeout_seconds,
            )
        else:
            _current_verifier = FakeIdentityVerifier()
    return _current_verifier


def set_verifier(verifier: IdentityVerifier) -> None:
    """Override the active identity verifier (useful for tests)."""
    global _current_verifier
    _current_verifier = verifier


def reset_verifier() -> None:
    """Reset to the configured default."""
    global _current_verifier
    _current_verifier = None
