from pathlib import Path
import sys
import os

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Safety default for any module-level app creation during test imports.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from asamblea import create_app
from asamblea.extensions import db
from asamblea.models import User
from asamblea.models.user import ATTENDANCE_ADMIN, VOTING_ADMIN
from asamblea.services import attendance, questions, registry, voting_session, weights


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
            "SQLALCHEMY_ENGINE_OPTIONS": {},
            "DB_RETRY_ATTEMPTS": 2,
            "DB_RETRY_WAIT_MULTIPLIER": 0,
            "DB_RETRY_MAX_WAIT": 0,
        }
    )

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        # The registry's current Session (same object services use via db.session);
        # the scoped_session proxy does not expose every Session method.
        yield db.session()


def _make_user(db_session, username, role):
    user = User(username=username, password_hash="hashed-password", role=role)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def voting_admin(db_session):
    return _make_user(db_session, "votacion", VOTING_ADMIN)


@pytest.fixture()
def attendance_admin(db_session):
    return _make_user(db_session, "asistencias", ATTENDANCE_ADMIN)


def _login(client, user):
    with client.session_transaction() as session:
        session["_user_id"] = str(user.id)
        session["_fresh"] = True
    return client


@pytest.fixture()
def auth_client(client, voting_admin):
    return _login(client, voting_admin)


@pytest.fixture()
def attendance_client(app, attendance_admin):
    return _login(app.test_client(), attendance_admin)


@pytest.fixture()
def checked_in_voter(db_session):
    """Voter 123456789 of apartment A101, checked in, with weight 1.5."""
    registry.register_voter("123456789", "A101")
    attendance.register_attendance("123456789", "A101")
    weights.replace_weight_table({"A101": 1.5})
    return registry.get_voter("123456789")


@pytest.fixture()
def yes_no_question(db_session):
    return questions.create_question("¿Aprueba el presupuesto?", "", ["Sí", "No"])


@pytest.fixture()
def open_session(yes_no_question):
    return voting_session.start_voting(yes_no_question.id)
