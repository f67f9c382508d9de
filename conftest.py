"""
Root conftest for the pytest test suite.

Key Fixtures:
- `anyio_backend`: Specifies the asyncio backend.
- `db`: Creates a fresh in-memory Tortoise database with an admin and an
  operator account, and tears it down afterwards.
- `admin_token` / `operator_token`: Bearer tokens for the seeded users.
- `credential_store`: An in-memory credential store, injected into the app.
- `reporting_service`: A fake of the external reporting service, served
  through `httpx.MockTransport`. It records every request it receives.
- `client`: An `httpx.AsyncClient` talking to the app over ASGI, with the
  store and the reporting service substituted.
"""

from typing import Any, AsyncGenerator, Callable, Dict, List, Tuple, Union

import httpx
import pytest
import pytest_asyncio
from tortoise import Tortoise

from app.core.config import TORTOISE_MODELS
from app.features.auth.models import ROLE_ADMIN, ROLE_OPERATOR, User
from app.features.auth.security import create_access_token, get_password_hash
from app.features.credentials.store import InMemoryCredentialStore, get_credential_store
from app.features.reports.client import ReportsClient, get_reports_client
from app.main import app as actual_app

ADMIN_USERNAME = "adminfixture"
ADMIN_PASSWORD = "adminpassword123"
OPERATOR_USERNAME = "operatorfixture"
OPERATOR_PASSWORD = "operatorpassword123"


async def add_admin_user() -> User:
    return await User.create(
        username=ADMIN_USERNAME,
        email="adminfixture@example.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role=ROLE_ADMIN,
    )


async def add_operator_user() -> User:
    return await User.create(
        username=OPERATOR_USERNAME,
        email="operatorfixture@example.com",
        hashed_password=get_password_hash(OPERATOR_PASSWORD),
        role=ROLE_OPERATOR,
    )


class FakeReportingService:
    """Stands in for the external reporting service."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Union[Tuple[int, Any], Exception]] = {}

    def respond(self, method: str, path: str, status_code: int = 200, json: Any = None) -> None:
        self._routes[(method, path)] = (status_code, json)

    def fail(self, method: str, path: str, error: Exception) -> None:
        self._routes[(method, path)] = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._routes.get((request.method, request.url.path), (200, {"status": "ok"}))
        if isinstance(outcome, Exception):
            raise outcome
        status_code, body = outcome
        return httpx.Response(status_code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest_asyncio.fixture(scope="function")
async def db() -> AsyncGenerator[None, None]:
    """
    Initializes a fresh in-memory database for one test and tears it down afterwards.
    """
    await Tortoise.init(
        config={
            "connections": {"default": "sqlite://:memory:"},
            "apps": {
                "models": {
                    "models": TORTOISE_MODELS,
                    "default_connection": "default",
                }
            },
        }
    )
    await Tortoise.generate_schemas()
    await add_admin_user()
    await add_operator_user()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def admin_token(db) -> str:
    return create_access_token(data={"sub": ADMIN_USERNAME})


@pytest_asyncio.fixture
async def operator_token(db) -> str:
    return create_access_token(data={"sub": OPERATOR_USERNAME})


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def reporting_service() -> FakeReportingService:
    return FakeReportingService()


@pytest.fixture
def reports_client_factory(
    reporting_service: FakeReportingService,
) -> Callable[[InMemoryCredentialStore], ReportsClient]:
    def _factory(store: InMemoryCredentialStore) -> ReportsClient:
        return ReportsClient(store, transport=reporting_service.transport)

    return _factory


@pytest_asyncio.fixture(scope="function")
async def client(
    db,
    credential_store: InMemoryCredentialStore,
    reports_client_factory,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Provides a non-authenticated client over ASGI. The lifespan is not run;
    the `db` fixture owns the database connection.
    """
    actual_app.dependency_overrides[get_credential_store] = lambda: credential_store
    actual_app.dependency_overrides[get_reports_client] = lambda: reports_client_factory(credential_store)

    transport = httpx.ASGITransport(app=actual_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    actual_app.dependency_overrides.clear()
