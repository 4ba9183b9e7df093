import logging

import pytest
from fastapi.testclient import TestClient

from auth.config import JwtSettings
from auth.principal import Principal, Role
from auth.tokens import TokenIssuer
from orders.config import Settings
from orders.db import init_db, make_engine, make_session_factory
from orders.events import EventBus
from orders.repository import OrderRepository
from orders.service import OrderService

TEST_JWT = JwtSettings(secret_key="test-secret", expires_in_hours=1)


@pytest.fixture
def settings(tmp_path):
    # A throwaway file database, the same kind of store the service uses by default
    database_url = f"sqlite:///{(tmp_path / 'orders.db').as_posix()}"
    return Settings(jwt=TEST_JWT, database_url=database_url, seed_demo_data=False)


@pytest.fixture
def issuer():
    return TokenIssuer(TEST_JWT)


# ---------- Service level ----------
@pytest.fixture
def db():
    engine = make_engine("sqlite://")
    init_db(engine)
    session = make_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def events():
    bus = EventBus(logging.getLogger("tests.events"))
    yield bus
    bus.shutdown(wait=True)


@pytest.fixture
def received(events):
    """Every status-change fact delivered to a subscriber, in arrival order."""
    seen = []
    events.subscribe(seen.append)
    return seen


@pytest.fixture
def service(db, events):
    return OrderService(OrderRepository(db), events, logging.getLogger("tests.service"))


# ---------- HTTP level ----------
@pytest.fixture
def app(settings):
    from orders.app import create_app

    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def bearer(issuer):
    def make(identity="admin", role=Role.ADMIN):
        return {"Authorization": f"Bearer {issuer.issue(Principal(identity=identity, role=role))}"}

    return make


@pytest.fixture
def admin_headers(bearer):
    return bearer("admin", Role.ADMIN)


@pytest.fixture
def user_headers(bearer):
    # A User whose identity matches the customer name used throughout the tests
    return bearer("Test User", Role.USER)


@pytest.fixture
def jwt_settings():
    return TEST_JWT
