import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from permitpro.config import settings
from permitpro.database import get_db, init_db
from permitpro.main import app


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "PermitPro"
    (data_path / "uploads").mkdir(parents=True)
    original = settings.data_path
    settings.data_path = data_path
    yield data_path
    settings.data_path = original


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "db.sqlite"
    init_db(db_path)
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def client(test_db):
    return TestClient(app)


@pytest.fixture
def make_contractor(client):
    counter = {"n": 0}

    def _make(company_name="Acme Builders", license_number=None, **extra):
        counter["n"] += 1
        payload = {
            "companyName": company_name,
            "licenseNumber": license_number or f"CGC-{1000 + counter['n']}",
            "address": "1 Builder Way, Miami, FL",
            "phoneNumber": "305-555-0100",
            **extra,
        }
        r = client.post("/api/contractors", json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def make_package(client):
    def _make(**overrides):
        payload = {
            "customerName": "John Doe",
            "propertyAddress": "123 Main St",
            "county": "Miami-Dade",
            "permitType": "Mobile Home Permit",
            **overrides,
        }
        r = client.post("/api/permits", json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
