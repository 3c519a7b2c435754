import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipe_discovery.app.api.deps import get_app_settings, get_db_session
from recipe_discovery.app.core.config import Settings, get_settings
from recipe_discovery.app.db import models  # noqa: F401
from recipe_discovery.app.db.base import Base
from recipe_discovery.app.main import create_app
from recipe_discovery.app.schemas.recipe import RecipeFormData


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        future=True,
    )
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        OPENAI_API_KEY=None,
        AUTH_BASE_URL="http://identity.test",
        AUTH_API_KEY="anon-key",
    )


@pytest.fixture
def app(db_session, test_settings):
    app = create_app()

    def override_db():
        yield db_session

    app.dependency_overrides[get_db_session] = override_db
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_settings():
    return get_settings()


def make_token(user_id: str, email: str, settings) -> str:
    payload = {"sub": user_id, "email": email, "aud": "authenticated"}
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


@pytest.fixture
def user_token(auth_settings):
    return make_token("user-1", "user1@example.com", auth_settings)


@pytest.fixture
def other_user_token(auth_settings):
    return make_token("user-2", "user2@example.com", auth_settings)


@pytest.fixture
def chicken_form():
    return RecipeFormData(
        ingredients="chicken, rice",
        cuisine="any",
        preferences=[],
        maxCookingTime=60,
        mealType="any",
        servings=4,
    )


@pytest.fixture
def token_for():
    return make_token
