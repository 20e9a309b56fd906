"""Shared fixtures: in-memory SQLite database seeded with a small campus."""

from __future__ import annotations

import os

TOKEN = "test-token"
os.environ["INTERNAL_API_TOKEN"] = TOKEN
os.environ["SQLALCHEMY_URL"] = "sqlite://"

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from database.db import Base, get_db  # noqa: E402
from main import app  # noqa: E402
from models.attendance import Attendance  # noqa: E402,F401
from models.batches import Batch  # noqa: E402
from models.courses import Course  # noqa: E402
from models.notice_reads import NoticeRead  # noqa: E402,F401
from models.notices import Notice  # noqa: E402
from models.students import Student  # noqa: E402
from models.teaching_assignments import TeachingAssignment  # noqa: E402
from models.users import User  # noqa: E402

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def campus(db):
    """Two courses, three batches, one admin, two teachers and three students."""
    db.add_all([
        Course(id=1, code="BCA", name="Computer Applications"),
        Course(id=2, code="BBA", name="Business Administration"),
    ])
    db.flush()
    db.add_all([
        Batch(id=1, course_id=1, academic_unit=5, section="A"),
        Batch(id=2, course_id=2, academic_unit=3, section="A"),
        Batch(id=3, course_id=1, academic_unit=1, section="B"),
    ])
    db.add_all([
        User(id="admin-1", full_name="Asha Admin", email="admin@college.test", role="admin"),
        User(id="teacher-1", full_name="Tara Teacher", email="tara@college.test", role="teacher"),
        User(id="teacher-2", full_name="Tom Teacher", email="tom@college.test", role="teacher"),
        User(id="student-5", full_name="Sam Fifth", email="sam@college.test", role="student"),
        User(id="student-3", full_name="Sia Third", email="sia@college.test", role="student"),
        User(id="student-x", full_name="Nia Unassigned", email="nia@college.test", role="student"),
    ])
    db.flush()
    db.add_all([
        Student(id="student-5", full_name="Sam Fifth", batch_id=1),
        Student(id="student-3", full_name="Sia Third", batch_id=2),
        Student(id="student-x", full_name="Nia Unassigned", batch_id=None),
        TeachingAssignment(teacher_id="teacher-1", batch_id=1, subject_id=10),
    ])
    db.commit()
    return db


@pytest.fixture
def make_notice(db):
    """Insert a notice directly, bypassing the permission checks."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "title": f"Notice {counter['n']}",
            "message": "body",
            "target_type": "all",
            "target_value": None,
            "is_pinned": False,
            "created_by": "admin-1",
            "created_at": NOW - timedelta(hours=100 - counter["n"]),
            "expires_at": None,
        }
        values.update(overrides)
        notice = Notice(**values)
        db.add(notice)
        db.commit()
        db.refresh(notice)
        return notice

    return _make


@pytest.fixture
def client(session_factory, campus):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        test_client.headers.update({"Authorization": f"Bearer {TOKEN}"})
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def now():
    return NOW
