import os
import hashlib
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Always the .env next to this service, not the one at the repo root
ENV_PATH = Path(__file__).resolve().parent / ".env"


@dataclass(frozen=True)
class JwtSettings:
    secret_key: str = "changeme"
    algorithm: str = "HS256"
    issuer: str = "orders-api"
    audience: str = "orders-api-clients"
    expires_in_hours: int = 1

    @classmethod
    def from_env(cls) -> "JwtSettings":
        # Values from the environment win over the dataclass defaults
        secret_key = os.getenv("SECRET_KEY", cls.secret_key)
        if not secret_key:
            raise RuntimeError("SECRET_KEY is empty in .env or the environment")
        return cls(
            secret_key=secret_key,
            algorithm=os.getenv("ALGORITHM", cls.algorithm),
            issuer=os.getenv("JWT_ISSUER", cls.issuer),
            audience=os.getenv("JWT_AUDIENCE", cls.audience),
            expires_in_hours=int(os.getenv("JWT_EXPIRES_IN_HOURS", cls.expires_in_hours)),
        )

    def fingerprint(self) -> str:
        # Short digest of the key so two services can be compared without printing it
        return hashlib.sha256(self.secret_key.encode()).hexdigest()[:12]


@dataclass(frozen=True)
class AuthSettings:
    jwt: JwtSettings
    log_level: str = "INFO"
    log_file: str | None = None


def load_settings(env_path: Path = ENV_PATH) -> AuthSettings:
    load_dotenv(dotenv_path=env_path, override=True)
    return AuthSettings(
        jwt=JwtSettings.from_env(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
    )
