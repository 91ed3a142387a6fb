from asamblea.extensions import db

IDLE = "IDLE"
OPEN = "OPEN"
CLOSED = "CLOSED"


class VotingSession(db.Model):
    __tablename__ = "voting_sessions"

    id = db.Column(db.Integer, primary_key=True)
    active = db.Column(db.Boolean, nullable=False, default=False)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=True)
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, nullable=True)
    results_visible = db.Column(db.Boolean, nullable=False, default=False)
    round = db.Column(db.Integer, nullable=False, default=0)

    question = db.relationship("Question", lazy="joined")

    @property
    def state(self):
        if self.question_id is None:
            return IDLE
        return OPEN if self.active else CLOSED

    @property
    def is_open(self):
        return self.active and self.question_id is not None
