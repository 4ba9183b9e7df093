import logging
from datetime import datetime, timedelta, timezone

# JWTError covers any bad token (tampered, malformed); ExpiredSignatureError is the expired case
from jose import jwt, JWTError, ExpiredSignatureError

from .config import JwtSettings
from .principal import Principal, Role


class AuthFailed(Exception):
    """Bad credentials, or a token that is missing, invalid or expired."""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)
        self.message = message


class TokenIssuer:
    """Mints and verifies the signed role-claim tokens shared by both services."""

    def __init__(self, settings: JwtSettings, logger: logging.Logger | None = None):
        self.settings = settings
        self.logger = logger or logging.getLogger("auth.tokens")

    def issue(self, principal: Principal, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        expire = now + timedelta(hours=self.settings.expires_in_hours)
        to_encode = {
            "sub": principal.identity,
            "role": principal.role.value,
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.settings.secret_key, algorithm=self.settings.algorithm)

    def decode(self, token: str) -> Principal:
        try:
            payload = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
            )
        except ExpiredSignatureError:
            self.logger.info("token rejected", extra={"reason": "expired"})
            raise AuthFailed("Token expired")
        except JWTError as e:
            self.logger.info("token rejected", extra={"reason": str(e)})
            raise AuthFailed("Invalid token")

        sub = payload.get("sub")
        if not sub:
            raise AuthFailed("Invalid token")
        try:
            role = Role(payload.get("role"))
        except ValueError:
            self.logger.info("token rejected", extra={"reason": "unknown role"})
            raise AuthFailed("Invalid token")
        return Principal(identity=sub, role=role)
