import os
import tempfile

# Configure settings BEFORE importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ["EXTRACTION_URL"] = ""
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "certificate-api-tests.log")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.db.core import get_session, init_db
from app.main import app
from app.models.certificate import CertificateCreate
from app.repositories.memory import InMemoryCertificateRepository
from app.repositories.sql import SqlCertificateRepository


SCENARIO = {
    "student_name": "Aarav Sharma",
    "roll_number": "CS-123",
    "certificate_id": "JHU-84321-2023",
    "issue_date": "2023-05-20",
    "course": "B.Sc. Computer Science",
    "institution": "Johns Hopkins University",
}


@pytest.fixture(name="scenario")
def scenario_fixture():
    return CertificateCreate(**SCENARIO)


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="repository", params=["sql", "memory"])
def repository_fixture(request, session):
    if request.param == "sql":
        return SqlCertificateRepository(session)
    return InMemoryCertificateRepository()


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
