from typing import Protocol

# passlib handles hashing and verification; pbkdf2_sha256 needs no native backend
from passlib.context import CryptContext

from .principal import Principal, Role
from .tokens import AuthFailed

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# username -> (password, role). Identity is the username.
DEFAULT_CREDENTIALS = {
    "admin": ("admin123", Role.ADMIN),
    "user": ("user123", Role.USER),
}


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> Principal:
        """Return the caller's principal or raise AuthFailed."""
        ...


class StaticCredentialVerifier:
    """Fixed allowlist of accounts; there is no user store behind it."""

    def __init__(self, credentials: dict[str, tuple[str, Role]] | None = None):
        credentials = DEFAULT_CREDENTIALS if credentials is None else credentials
        # Plain passwords are hashed once and dropped
        self._accounts = {
            username: (password_context.hash(password), role)
            for username, (password, role) in credentials.items()
        }

    def verify(self, username: str, password: str) -> Principal:
        account = self._accounts.get(username)
        if account is None:
            raise AuthFailed("Invalid credentials")
        hashed, role = account
        if not password_context.verify(password, hashed):
            raise AuthFailed("Invalid credentials")
        return Principal(identity=username, role=role)
