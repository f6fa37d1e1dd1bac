import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from electrical_pm.core.database import Base, get_db
from electrical_pm.core.permissions import Role
from electrical_pm.core.security import get_password_hash
from electrical_pm.models.client import Client
from electrical_pm.models.employee import Employee
from electrical_pm.models.project import Project
from electrical_pm.models.user import User
from main import app

# Test database: one shared in-memory connection
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = "/api/v1"
PASSWORD = "Password123"


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_user(db, role: Role, email: str = None, password: str = PASSWORD) -> User:
    user = User(
        email=email or f"{role.value.lower()}@example.com",
        hashed_password=get_password_hash(password),
        first_name=role.value.split("_")[0].title(),
        last_name="Tester",
        role=role.value,
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client, email: str, password: str = PASSWORD) -> dict:
    response = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}


@pytest.fixture
def headers_for(client, db):
    """Build auth headers for a fresh user with the given role."""
    def _headers(role: Role) -> dict:
        user = create_user(db, role)
        return login(client, user.email)
    return _headers


@pytest.fixture
def admin_headers(headers_for):
    return headers_for(Role.OFFICE_ADMIN)


@pytest.fixture
def super_admin(db):
    return create_user(db, Role.SUPER_ADMIN)


@pytest.fixture
def super_admin_headers(client, super_admin):
    return login(client, super_admin.email)


@pytest.fixture
def test_client_record(db):
    record = Client(name="Acme General Contractors", type="GENERAL_CONTRACTOR")
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def project(db, test_client_record):
    record = Project(name="Main Street Retail", project_number="P-1001", client_id=test_client_record.id)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def make_employee(db):
    def _make(first_name="Jane", last_name="Doe", classification="Journeyman", hourly_rate=40.0, **kwargs):
        employee = Employee(
            first_name=first_name,
            last_name=last_name,
            classification=classification,
            hourly_rate=hourly_rate,
            **kwargs
        )
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee
    return _make


@pytest.fixture
def employee(make_employee):
    return make_employee()
