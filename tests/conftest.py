import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-signing-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENV"] = "test"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from tiri.core.security import TokenCodec, hash_password
from tiri.core.session import Role
from tiri.db.base import Base
from tiri.db.session import create_db_engine, get_db
from tiri.dependencies.auth import get_token_codec
from tiri.main import app
from tiri.models import Event, Studio, Template, TemplateCategory, TeamRole, User

TEST_SECRET = "test-signing-secret"
TTL_SECONDS = 60 * 60 * 24 * 7

ADMIN_PHONE = "5550001"
STAFF_PHONE = "5550002"
OTHER_ADMIN_PHONE = "5559001"
PASSWORD = "secret-pass"

CLASSIC_TEMPLATE_ID = "0c1a5a1c-0000-4000-8000-000000000001"
RETIRED_TEMPLATE_ID = "0c1a5a1c-0000-4000-8000-000000000002"
ACME_EVENT_ID = "ac3e0000-0000-4000-8000-000000000001"
OTHER_EVENT_ID = "0e4e0000-0000-4000-8000-000000000001"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def codec(clock):
    return TokenCodec(secret=TEST_SECRET, ttl_seconds=TTL_SECONDS, clock=clock)


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def seed(db):
    """Two studios, an active and an inactive template, one event per studio."""
    acme = Studio(id="acme-id", name="Acme")
    other = Studio(id="other-id", name="Other Studio")

    admin = User(
        id="admin-id", phone=ADMIN_PHONE, password_hash=hash_password(PASSWORD),
        role=Role.ADMIN, team_role=TeamRole.EVENT_PLANNER, studio=acme,
    )
    staff = User(
        id="staff-id", phone=STAFF_PHONE, password_hash=hash_password(PASSWORD),
        role=Role.STAFF, team_role=TeamRole.PHOTO_CREW, studio=acme,
    )
    other_admin = User(
        id="other-admin-id", phone=OTHER_ADMIN_PHONE, password_hash=hash_password(PASSWORD),
        role=Role.ADMIN, studio=other,
    )

    classic = Template(id=CLASSIC_TEMPLATE_ID, name="Classic", slug="classic",
                       category=TemplateCategory.TRADITIONAL, is_active=True)
    retired = Template(id=RETIRED_TEMPLATE_ID, name="Retired", slug="retired",
                       category=TemplateCategory.MODERN, is_active=False)

    acme_event = Event(
        id=ACME_EVENT_ID, studio=acme, template=classic, title="Ayu & Bima",
        bride_phone="0811", groom_phone="0812", slug="ayu-bima",
        event_date=datetime(2026, 9, 1, tzinfo=timezone.utc),
    )
    other_event = Event(
        id=OTHER_EVENT_ID, studio=other, template=classic, title="Other Wedding",
        bride_phone="0821", groom_phone="0822", slug="other-wedding",
        event_date=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )

    db.add_all([acme, other, admin, staff, other_admin, classic, retired, acme_event, other_event])
    db.commit()
    return {"acme": acme, "other": other, "acme_event": acme_event, "other_event": other_event}


@pytest.fixture
def client(engine, codec, seed):
    testing_session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        session = testing_session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_codec] = lambda: codec

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_client(client):
    """Fresh cookie jar against the same app and database."""
    return lambda: TestClient(app)


def login(client: TestClient, phone: str, password: str = PASSWORD):
    return client.post("/api/auth/login", json={"phone": phone, "password": password})


@pytest.fixture
def admin_client(client):
    assert login(client, ADMIN_PHONE).status_code == 200
    return client


@pytest.fixture
def staff_client(make_client):
    staff = make_client()
    assert login(staff, STAFF_PHONE).status_code == 200
    return staff


@pytest.fixture
def other_client(make_client):
    other = make_client()
    assert login(other, OTHER_ADMIN_PHONE).status_code == 200
    return other
