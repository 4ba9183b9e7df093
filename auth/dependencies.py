from fastapi import Depends, Request
# Reads the Authorization header; auto_error is off so a missing header is our 401, not FastAPI's
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .principal import Principal
from .tokens import AuthFailed, TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False, bearerFormat="JWT")


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Principal:
    if credentials is None:
        raise AuthFailed("Not authenticated")
    if credentials.scheme.lower() != "bearer":
        raise AuthFailed("Invalid auth scheme")
    # credentials.credentials is the bare JWT, without the "Bearer" word
    return issuer.decode(credentials.credentials)
