"""
Shared fixtures: a throwaway SQLite database per test, factories for users and
apps, a TestClient wired to that database and a live uvicorn server.
"""
import os

# Must be set before any app module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", "")

import socket
import threading
import time
from collections.abc import Generator
from datetime import datetime, timedelta
from itertools import count

import httpx
import pytest
import uvicorn
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.database import build_engine, get_db, init_db
from app.main import app as fastapi_app
from app.models.app import App
from app.models.user import User
from app.routers.auth import create_access_token

_sequence = count(1)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine(tmp_path):
    db_engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make(username: str | None = None, is_guest: bool = False) -> User:
        n = next(_sequence)
        username = username or f"user{n}"
        user = User(
            full_name=username.title(),
            email=f"{username}@example.com",
            username=username,
            password_hash="",
            is_guest=is_guest,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_app(db):
    base_time = datetime(2024, 1, 1, 12, 0, 0)

    def _make(user: User, title: str = "App", minutes: int = 0) -> App:
        # Explicit timestamps keep "most recently updated" ordering deterministic
        stamp = base_time + timedelta(minutes=minutes)
        record = App(user_id=user.id, title=title, created_at=stamp, updated_at=stamp)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def api(session_factory):
    """The FastAPI app with get_db pointed at the test database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(api) -> TestClient:
    return TestClient(api)


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def live_server(api) -> Generator[str, None, None]:
    """
    Run the app in a background uvicorn server.

    Returns:
        Base URL of the server
    """
    host = "127.0.0.1"
    port = _free_port()
    config = uvicorn.Config(api, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    def run_server() -> None:
        import asyncio
        asyncio.run(server.serve())

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    base_url = f"http://{host}:{port}"
    for _ in range(50):
        try:
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except httpx.HTTPError:
            time.sleep(0.1)
    else:
        raise RuntimeError("Failed to start test server")

    yield base_url

    server.should_exit = True
    thread.join(timeout=5)
