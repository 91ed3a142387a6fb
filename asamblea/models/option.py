from asamblea.extensions import db


def option_key(label):
    return (label or "").strip().lower()


class QuestionOption(db.Model):
    __tablename__ = "question_options"

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    label = db.Column(db.String(200), nullable=False)
    key = db.Column(db.String(200), nullable=False)

    def to_dict(self):
        return {"label": self.label, "key": self.key}
