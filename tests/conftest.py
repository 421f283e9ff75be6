from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from weather_relay import create_app  # noqa: E402
from weather_relay.core.config import Settings  # noqa: E402
from weather_relay.db.session import build_engine, init_db  # noqa: E402
from weather_relay.services.provider import ProviderReport  # noqa: E402


class FakeGateway:
    """Records every city it is asked about and answers with ``report``."""

    def __init__(self, report: ProviderReport | None = None) -> None:
        self.calls: list[str] = []
        self.report = report or ProviderReport(
            status_code=200, temp_min=274.0, temp_max=278.0, labels=["Clear"]
        )

    def fetch_current(self, city_name: str) -> ProviderReport:
        self.calls.append(city_name)
        return self.report


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as db:
        yield db


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture()
def client(engine, gateway):
    settings = Settings(database_url="sqlite://", openweather_api_key="test-key")
    app = create_app(settings=settings, engine=engine, gateway=gateway)
    return TestClient(app)
