from flask import current_app

from asamblea.extensions import db
from asamblea.models import Question, QuestionOption, VotingSession
from asamblea.models.option import option_key
from asamblea.services.clock import utcnow
from asamblea.services.errors import ErrorKind, VotingError
from asamblea.services.resilience import db_retry

DEFAULT_OPTIONS = ("Sí", "No")


@db_retry
def create_question(title, description=None, options=None):
    title = (title or "").strip()
    description = (description or "").strip() or None
    labels = list(DEFAULT_OPTIONS if options is None else options)

    if not title:
        raise VotingError(ErrorKind.INVALID_QUESTION, "The question title is required.")
    if len(labels) < 2:
        raise VotingError(
            ErrorKind.INVALID_QUESTION, "A question needs at least two options."
        )
    if any(not isinstance(label, str) or not label.strip() for label in labels):
        raise VotingError(ErrorKind.INVALID_QUESTION, "Every option must have text.")

    question = Question(title=title, description=description, created_at=utcnow())
    for position, label in enumerate(labels):
        question.options.append(
            QuestionOption(position=position, label=label.strip(), key=option_key(label))
        )

    db.session.add(question)
    db.session.commit()
    current_app.logger.info(
        "Question %s created with %s options", question.id, len(question.options)
    )
    return question


@db_retry
def list_questions():
    return Question.query.order_by(Question.created_at, Question.id).all()


def get_question(question_id):
    question = db.session.get(Question, question_id)
    if question is None:
        raise VotingError(ErrorKind.NOT_FOUND, "The question does not exist.")
    return question


@db_retry
def delete_question(question_id):
    question = get_question(question_id)
    session = db.session.get(VotingSession, 1)
    if session is not None and session.question_id == question.id:
        raise VotingError(ErrorKind.QUESTION_IN_USE)

    db.session.delete(question)
    db.session.commit()
    current_app.logger.info("Question %s deleted", question_id)


def match_option(question, raw):
    """Return the option whose key matches ``raw`` case-insensitively."""
    if not isinstance(raw, str):
        return None
    key = option_key(raw)
    if not key:
        return None
    return next((option for option in question.options if option.key == key), None)
