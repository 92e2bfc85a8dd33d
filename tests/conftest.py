"""
Pytest configuration and shared fixtures for the skincare booking tests.
"""

import datetime
import os

os.environ["TESTING"] = "True"
os.environ.setdefault("DATABASE_TEST_URL", "sqlite:///:memory:")

import bcrypt  # noqa: E402
import pytest  # noqa: E402
from flask import Flask  # noqa: E402

from main import create_app  # noqa: E402
from skincare_app.extensions import db as database  # noqa: E402
from skincare_app.models import (  # noqa: E402
    Account,
    Base,
    Service,
    Slot,
    Therapist,
)

PASSWORD = "password123"


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    """Create and configure a test app instance."""
    app = create_app()
    app.config.update(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key-for-testing-only",
            "JWT_SECRET": "test-jwt-secret-for-testing-only",
            "UPLOAD_FOLDER": str(tmp_path_factory.mktemp("images")),
            "S3_BUCKET_NAME": None,
        }
    )

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if not db_uri.startswith("sqlite"):
        pytest.exit(f"Refusing to run tests against a non-SQLite database: {db_uri}")

    yield app


@pytest.fixture
def db(app: Flask):
    """Fresh tables for every test."""
    with app.app_context():
        Base.metadata.create_all(bind=database.engine)

        yield database

        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def db_session(db):
    return db.session


@pytest.fixture
def client(app, db):
    return app.test_client()


@pytest.fixture
def make_account(db_session):
    """Factory for accounts with a known password."""

    def _make(username, email, role="Customer", is_active=True, password=PASSWORD):
        account = Account(
            username=username,
            email=email,
            password_hash=bcrypt.hashpw(
                password.encode("utf-8"), bcrypt.gensalt()
            ).decode("utf-8"),
            role=role,
            dob=datetime.date(1995, 5, 17),
            phone="0901234567",
            is_active=is_active,
        )
        db_session.add(account)
        db_session.commit()
        return account

    return _make


@pytest.fixture
def sample_customer(make_account):
    return make_account("customer", "customer@example.com")


@pytest.fixture
def sample_admin(make_account):
    return make_account("admin", "admin@example.com", role="Admin")


@pytest.fixture
def sample_staff(make_account):
    return make_account("staff", "staff@example.com", role="Staff")


@pytest.fixture
def sample_service(db_session):
    service = Service(
        service_name="Hydrating Facial",
        description="Deep hydration for dry skin",
        price=450000.0,
        is_active=True,
    )
    db_session.add(service)
    db_session.commit()
    return service


@pytest.fixture
def sample_therapist(db_session, make_account, sample_service):
    """A therapist account plus its therapist profile."""
    account = make_account("therapist", "therapist@example.com", role="Therapist")
    therapist = Therapist(
        account_id=account.id,
        specialization=[sample_service],
        certification=[
            {
                "name": "Skin Care Specialist",
                "issuedBy": "Beauty Academy",
                "issuedDate": "2020-06-01",
            }
        ],
        experience="5 years",
    )
    db_session.add(therapist)
    db_session.commit()
    return therapist


@pytest.fixture
def sample_slot(db_session):
    slot = Slot(slot_num=1, start_time="08:00", end_time="09:00")
    db_session.add(slot)
    db_session.commit()
    return slot


def login(client, email, password=PASSWORD):
    response = client.post("/api/account/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.json
    return response.json["data"]["token"]


@pytest.fixture
def auth_headers(client, sample_customer):
    """Bearer header for the sample customer."""
    return {"Authorization": f"Bearer {login(client, 'customer@example.com')}"}


@pytest.fixture
def admin_headers(client, sample_admin):
    return {"Authorization": f"Bearer {login(client, 'admin@example.com')}"}


@pytest.fixture
def staff_headers(client, sample_staff):
    return {"Authorization": f"Bearer {login(client, 'staff@example.com')}"}


@pytest.fixture
def therapist_headers(client, sample_therapist):
    return {"Authorization": f"Bearer {login(client, 'therapist@example.com')}"}
