from contextlib import asynccontextmanager
from decimal import Decimal
from typing import List
from uuid import UUID

from fastapi import APIRouter, FastAPI, Depends, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from auth.dependencies import get_current_principal
from auth.principal import Principal
from auth.schemas import WhoAmIOut
from auth.tokens import AuthFailed, TokenIssuer
from gateway.logging_config import configure_logging
from gateway.middleware import install_request_middleware
from .config import Settings, load_settings
from .db import init_db, make_engine, make_session_factory
from .errors import OrderError
from .events import EventBus, log_status_change
from .policy import Action, ensure_allowed
from .repository import OrderRepository
from .schemas import CreateOrderIn, OrderOut, UpdateOrderIn, order_to_out
from .service import NewProduct, OrderService


# ---------- Dependencies ----------
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        # hands the session to the endpoint that needs it
        yield db
    finally:
        db.close()


def get_order_service(request: Request, db: Session = Depends(get_db)) -> OrderService:
    state = request.app.state
    return OrderService(OrderRepository(db), state.events, state.logger.getChild("service"))


# ---------- Endpoints ----------
router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/whoami", response_model=WhoAmIOut)
def whoami(principal: Principal = Depends(get_current_principal)):
    return WhoAmIOut(identity=principal.identity, role=principal.role.value)


@router.post("/orders", status_code=201, response_model=OrderOut, tags=["orders"])
def create_order(
    payload: CreateOrderIn,
    response: Response,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
):
    ensure_allowed(Action.CREATE, principal)
    order = service.create_order(
        payload.customer_name,
        [NewProduct(name=p.name, price=p.price, quantity=p.quantity) for p in payload.products],
    )
    response.headers["Location"] = f"/orders/{order.id}"
    return order_to_out(order)


@router.get("/orders", response_model=List[OrderOut], tags=["orders"])
def list_orders(
    status: str | None = None,
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
):
    ensure_allowed(Action.LIST, principal)
    return [order_to_out(o) for o in service.list_orders(status, min_price, max_price)]


@router.get("/orders/{order_id}", response_model=OrderOut, tags=["orders"])
def get_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
):
    # Load first: an unknown id is 404 even for a caller who could not see it
    order = service.get_order(order_id)
    ensure_allowed(Action.READ, principal, order)
    return order_to_out(order)


@router.put("/orders/{order_id}", status_code=204, tags=["orders"])
def update_order(
    order_id: UUID,
    payload: UpdateOrderIn,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
):
    order = service.get_order(order_id)
    ensure_allowed(Action.UPDATE_STATUS, principal, order)
    service.update_status(order_id, payload.status)
    return Response(status_code=204)


@router.delete("/orders/{order_id}", status_code=204, tags=["orders"])
def delete_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
):
    ensure_allowed(Action.DELETE, principal)
    service.delete_order(order_id)
    return Response(status_code=204)


# ---------- Error mapping ----------
def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI, logger) -> None:
    @app.exception_handler(OrderError)
    async def order_error_handler(request: Request, exc: OrderError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(AuthFailed)
    async def auth_failed_handler(request: Request, exc: AuthFailed):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error", extra={"path": request.url.path, "method": request.method})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ---------- Seeds ----------
def seed_demo_orders(session_factory, events: EventBus, logger) -> None:
    # Only on an empty store
    with session_factory() as db:
        repo = OrderRepository(db)
        if repo.query():
            return
        OrderService(repo, events, logger).create_order(
            "Test User",
            [
                NewProduct(name="Ski", price=Decimal("50"), quantity=1),
                NewProduct(name="Boots", price=Decimal("55"), quantity=1),
            ],
        )


# ---------- App factory ----------
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    logger = configure_logging("orders", settings.log_level, settings.log_file)
    logger.info(
        "orders service starting",
        extra={"key_fingerprint": settings.jwt.fingerprint(), "algorithm": settings.jwt.algorithm},
    )

    engine = make_engine(settings.database_url)
    init_db(engine)
    session_factory = make_session_factory(engine)

    events = EventBus(logger.getChild("events"), max_workers=settings.event_workers)
    events.subscribe(log_status_change(logger.getChild("events")))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # let pending deliveries finish before the process goes away
        events.shutdown(wait=True)
        engine.dispose()

    app = FastAPI(title="Orders API", version="v1", lifespan=lifespan)
    app.state.settings = settings
    app.state.logger = logger
    app.state.token_issuer = TokenIssuer(settings.jwt, logger.getChild("tokens"))
    app.state.session_factory = session_factory
    app.state.events = events

    if settings.seed_demo_data:
        seed_demo_orders(session_factory, events, logger.getChild("seed"))

    install_request_middleware(app, logger)
    register_error_handlers(app, logger)
    app.include_router(router)
    return app
