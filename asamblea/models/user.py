from flask_login import UserMixin

from asamblea.extensions import db

VOTING_ADMIN = "voting_admin"
ATTENDANCE_ADMIN = "attendance_admin"
ROLES = (VOTING_ADMIN, ATTENDANCE_ADMIN)


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default=VOTING_ADMIN)
