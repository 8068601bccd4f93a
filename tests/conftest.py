"""
Shared fixtures: in-memory database, scripted AI gateway, fake speech service.
"""
import pytest
from fastapi.testclient import TestClient

from app.core.security import hash_password, create_access_token
from app.db.models.user import User
from app.db.session import Database
from app.llm.runner import LLMRunner
from app.main import create_app
from app.services.interview_engine import InterviewEngine
from app.services.interview_fallbacks import load_fallback_bank
from tests.fakes import ScriptedProvider, FakeSpeech


@pytest.fixture
def database():
    """Fresh in-memory database per test."""
    db = Database("sqlite:///:memory:").connect()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def speech():
    return FakeSpeech()


@pytest.fixture
def fallbacks():
    return load_fallback_bank()


@pytest.fixture
def engine(provider, fallbacks, speech):
    return InterviewEngine(LLMRunner(provider), fallbacks, speech=speech)


def _make_user(db, email: str, full_name: str) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password("testpass123"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return _make_user(db, "candidate@example.com", "Casey Candidate")


@pytest.fixture
def other_user(db):
    return _make_user(db, "other@example.com", "Other Person")


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_user):
    token = create_access_token({"sub": other_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(database, engine):
    app = create_app(database=database, interview_engine=engine, configure_logging=False)
    with TestClient(app) as test_client:
        yield test_client
