import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.auth import get_current_caller
from app.main import app
from config.database import get_db
from models import Base, EffortMapping, Employee
from schemas.employee import CallerContext

# id, name, role, reports_to, manager_id, application_name
ORG = [
    (1, "Hana", "head_lt", None, None, None),
    (2, "Luis", "lt", 1, None, None),
    (3, "Ada", "alt", 2, None, None),
    (10, "Meera", "manager", 3, None, None),
    (20, "Tomas", "admin", 10, 10, "Payments"),
    (21, "Priya", "employee", 20, 10, "Payments"),
    (22, "Kofi", "employee", 20, 10, "Lending"),
    (30, "Sven", "manager", 3, None, None),
    (31, "Yuki", "employee", 30, 30, "Lending"),
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def org(db):
    """Seed the reporting tree and return employees by id."""
    employees = {}
    for emp_id, name, role, reports_to, manager_id, application in ORG:
        employee = Employee(
            id=emp_id,
            name=name,
            email=f"{name.lower()}@example.com",
            role=role,
            reports_to=reports_to,
            manager_id=manager_id,
            application_name=application,
            is_active=True,
        )
        db.add(employee)
        employees[emp_id] = employee
    db.commit()
    return employees


@pytest.fixture
def effort_table(db):
    db.add(EffortMapping(type="Feature", values={"Simple": 2, "Medium": 5}))
    db.add(EffortMapping(type="Report", values={"Simple": 1, "Complex": 4}))
    db.commit()


def caller_for(employee: Employee) -> CallerContext:
    return CallerContext(
        id=employee.id,
        role=employee.role,
        manager_id=employee.manager_id,
        application_name=employee.application_name,
    )


@pytest.fixture
def as_caller(org):
    """Build a CallerContext for a seeded employee id."""

    def _as_caller(employee_id: int) -> CallerContext:
        return caller_for(org[employee_id])

    return _as_caller


@pytest.fixture
def client(db, org, effort_table):
    """TestClient whose caller is switched with ``client.login(employee_id)``."""
    current = {"caller": caller_for(org[1])}

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_caller] = lambda: current["caller"]

    test_client = TestClient(app)

    def login(employee_id: int) -> None:
        current["caller"] = caller_for(db.get(Employee, employee_id))

    test_client.login = login
    yield test_client
    app.dependency_overrides.clear()
