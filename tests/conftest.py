import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("DATABASE_URL", os.environ["TEST_DATABASE_URL"])
os.environ.setdefault("LOG_DIR", "logs")

import uuid
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

import main
from app.core.config import settings
from app.core.constants import RoleEnum, QuestionTypeEnum
from app.core.database import Base
from app.core.security import get_password_hash
from app.crud.exam import exam as crud_exam
from app.crud.question import question as crud_question
from app.crud.user import user as crud_user
from app.utils import deps as deps_utils

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if test_db_url == "sqlite:///./test.db" and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def user_factory(db_session):
    def _user_factory(role: RoleEnum = RoleEnum.STUDENT, password: str = "testpass123"):
        username = f"{role.value}-{uuid.uuid4().hex[:10]}"
        return crud_user.create(db_session, obj_in={
            "username": username,
            "hashed_password": get_password_hash(password),
            "full_name": f"Test {role.value}",
            "role": role,
        })
    return _user_factory

@pytest.fixture
def login(client):
    def _login(username: str, password: str = "testpass123") -> str:
        response = client.post("/auth/login", json={"username": username, "password": password})
        body = response.json()
        token = body.get("data", {}).get("token", {}).get("access_token")
        assert token, f"Login failed or token missing: {body}"
        return token
    return _login

@pytest.fixture
def token_for_role(user_factory, login):
    """Log in a fresh user of the given role and return (token, user)."""
    def _create_token_for_role(role_name: str):
        user = user_factory(RoleEnum(role_name))
        return login(user.username), user
    return _create_token_for_role

@pytest.fixture
def auth_headers():
    def _auth_headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

@pytest.fixture
def question_factory(db_session):
    def _question_factory(question_type: QuestionTypeEnum = QuestionTypeEnum.SINGLE_CHOICE,
                          correct_answer=None, points: float = 1.0, option_keys=("A", "B", "C", "D"),
                          content: str = "Sample question?"):
        is_choice = question_type in (QuestionTypeEnum.SINGLE_CHOICE, QuestionTypeEnum.MULTIPLE_CHOICE)
        return crud_question.create(db_session, obj_in={
            "type": question_type,
            "content": content,
            "options": [{"key": key, "label": f"Option {key}"} for key in option_keys] if is_choice else None,
            "correct_answer": correct_answer if is_choice else None,
            "points": points,
        })
    return _question_factory

@pytest.fixture
def exam_factory(db_session):
    def _exam_factory(questions=(), title: str = None):
        exam = crud_exam.create(db_session, obj_in={"title": title or f"Exam {uuid.uuid4().hex[:6]}"})
        return crud_exam.set_questions(db_session, exam=exam, question_ids=[q.id for q in questions])
    return _exam_factory
