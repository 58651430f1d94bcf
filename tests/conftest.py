from datetime import datetime, timedelta

import pytest

from jobhub.app import create_app
from jobhub.db import init_db, make_engine, make_session_factory
from jobhub.storage import JobStore, NewJob

DAY_ZERO = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def make_job():
    def _make(external_id: str, days: float = 0, **overrides) -> NewJob:
        fields = dict(
            external_id=external_id,
            title=f"Job {external_id}",
            company="Acme",
            url=f"https://example.org/jobs/{external_id}",
            source="arbeitnow",
            posted_at=DAY_ZERO + timedelta(days=days),
            location="Berlin, Germany",
            description="A role.",
        )
        fields.update(overrides)
        return NewJob(**fields)

    return _make


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'jobs.db'}"


@pytest.fixture
def store(db_url):
    engine = make_engine(db_url)
    init_db(engine)
    yield JobStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def sources():
    return []


@pytest.fixture
def app(db_url, sources):
    app = create_app({"DB_URL": db_url, "SYNC_SOURCES": sources, "SYNC_INTERVAL_MINUTES": 0})
    app.config["TESTING"] = True
    return app


@pytest.fixture
def app_store(app) -> JobStore:
    return app.extensions["jobhub.store"]


@pytest.fixture
def client(app):
    return app.test_client()
