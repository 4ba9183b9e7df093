# FastAPI builds the app and routes; Depends reuses auth logic across endpoints
from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse

from gateway.logging_config import configure_logging
from gateway.middleware import install_request_middleware
from .config import AuthSettings, load_settings
from .credentials import CredentialVerifier, StaticCredentialVerifier
from .dependencies import get_current_principal
from .principal import Principal
from .schemas import LoginIn, TokenOut, WhoAmIOut
from .tokens import AuthFailed, TokenIssuer


# ---------- App factory ----------
def create_app(settings: AuthSettings | None = None, verifier: CredentialVerifier | None = None) -> FastAPI:
    settings = settings or load_settings()
    logger = configure_logging("auth", settings.log_level, settings.log_file)
    # Fingerprint only, never the key
    logger.info(
        "auth service starting",
        extra={"key_fingerprint": settings.jwt.fingerprint(), "algorithm": settings.jwt.algorithm},
    )

    app = FastAPI(title="Auth Service", version="v1")
    app.state.settings = settings
    app.state.verifier = verifier or StaticCredentialVerifier()
    app.state.token_issuer = TokenIssuer(settings.jwt, logger.getChild("tokens"))
    install_request_middleware(app, logger)

    @app.exception_handler(AuthFailed)
    async def auth_failed_handler(request: Request, exc: AuthFailed):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    # ---------- Endpoints ----------
    @app.get("/health")
    def health():
        return {"ok": True}

    @app.post("/auth/login", response_model=TokenOut)
    def login(body: LoginIn, request: Request):
        try:
            principal = request.app.state.verifier.verify(body.username, body.password)
        except AuthFailed:
            logger.info("login failed", extra={"username": body.username})
            raise
        token = request.app.state.token_issuer.issue(principal)
        logger.info("login succeeded", extra={"identity": principal.identity, "role": principal.role.value})
        return TokenOut(token=token)

    @app.get("/auth/me", response_model=WhoAmIOut)
    # Data of the caller behind the bearer token
    def read_me(principal: Principal = Depends(get_current_principal)):
        return WhoAmIOut(identity=principal.identity, role=principal.role.value)

    return app
