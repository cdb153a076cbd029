"""In-memory identity verifier for development and testing."""

from checkout.identity.port import IdentityVerifier, InvalidCredential, Principal, bearer_token


class FakeIdentityVerifier(IdentityVerifier):
    """Maps known bearer tokens to subject ids."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self.tokens: dict[str, str] = dict(tokens or {})

    def register(self, token: str, subject_id: str) -> None:
        self.tokens[token] = subject_id

    def verify(self, authorization: str | None) -> Principal:
        token = bearer_token(authorization)
        subject_id = self.tokens.get(token)
        if subject_id is None:
            raise InvalidCredential("Invalid auth token")
        return Principal(subject_id=subject_id, authorization=authorization)
