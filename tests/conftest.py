"""Pytest configuration and fixtures."""

import os
from itertools import count

# Must be set before microblog reads its settings; bcrypt's minimum cost keeps tests fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from microblog import models  # noqa: E402, F401
from microblog.database import Base, create_db_engine  # noqa: E402
from microblog.models import User  # noqa: E402
from microblog.services import MicropostService, UserService  # noqa: E402

# Use test database - TEST_DATABASE_URL (e.g. PostgreSQL in Docker) or SQLite locally
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop the schema - each test cleans up after itself


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def user_service(db):
    return UserService(db)


@pytest.fixture
def micropost_service(db):
    return MicropostService(db)


@pytest.fixture
def user():
    """An unsaved, valid user."""
    return User(
        name="Example User",
        email="user@example.com",
        password="foobar",
        password_confirmation="foobar",
    )


@pytest.fixture
def make_user(user_service):
    """Factory creating saved users with unique names and emails."""
    sequence = count(1)

    def _make_user(**overrides) -> User:
        n = next(sequence)
        attributes = {
            "name": f"Person {n}",
            "email": f"person_{n}@example.com",
            "password": "foobar",
            "password_confirmation": "foobar",
        }
        attributes.update(overrides)
        return user_service.save_or_raise(User(**attributes))

    return _make_user
