"""Rejection kinds shared by the voting services and the JSON routes."""

from enum import Enum


class ErrorKind(str, Enum):
    SESSION_INACTIVE = "session_inactive"
    ALREADY_VOTED = "already_voted"
    VOTER_NOT_REGISTERED = "voter_not_registered"
    APARTMENT_MISMATCH = "apartment_mismatch"
    NOT_CHECKED_IN = "not_checked_in"
    INVALID_OPTION = "invalid_option"
    ALREADY_ACTIVE = "already_active"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INVALID_QUESTION = "invalid_question"
    INVALID_IMPORT = "invalid_import"
    CONFIRMATION_REQUIRED = "confirmation_required"
    QUESTION_IN_USE = "question_in_use"


MESSAGES = {
    ErrorKind.SESSION_INACTIVE: "Voting is not open at the moment.",
    ErrorKind.ALREADY_VOTED: "This ID has already voted.",
    ErrorKind.VOTER_NOT_REGISTERED: "The voter is not registered in the system.",
    ErrorKind.APARTMENT_MISMATCH: "The apartment does not match the one registered for this ID.",
    ErrorKind.NOT_CHECKED_IN: "The voter is not enabled. Please register at the attendance desk.",
    ErrorKind.INVALID_OPTION: "The selected option is not part of the current question.",
    ErrorKind.ALREADY_ACTIVE: "A question is already open for voting. Stop it first.",
    ErrorKind.NOT_FOUND: "The requested record does not exist.",
    ErrorKind.UNAVAILABLE: "The database is temporarily unavailable. Please try again.",
    ErrorKind.INVALID_QUESTION: "The question is not valid.",
    ErrorKind.INVALID_IMPORT: "No valid data was found to import.",
    ErrorKind.CONFIRMATION_REQUIRED: "This action must be explicitly confirmed.",
    ErrorKind.QUESTION_IN_USE: "The question belongs to the current session. Reset the session first.",
}

STATUS_CODES = {
    ErrorKind.SESSION_INACTIVE: 403,
    ErrorKind.ALREADY_VOTED: 403,
    ErrorKind.VOTER_NOT_REGISTERED: 403,
    ErrorKind.APARTMENT_MISMATCH: 403,
    ErrorKind.NOT_CHECKED_IN: 403,
    ErrorKind.INVALID_OPTION: 400,
    ErrorKind.ALREADY_ACTIVE: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.INVALID_QUESTION: 400,
    ErrorKind.INVALID_IMPORT: 400,
    ErrorKind.CONFIRMATION_REQUIRED: 400,
    ErrorKind.QUESTION_IN_USE: 409,
}


class VotingError(Exception):
    """Raised by administrative operations; carries an ErrorKind."""

    def __init__(self, kind, message=None):
        self.kind = kind
        self.message = message or MESSAGES[kind]
        super().__init__(self.message)

    @property
    def status_code(self):
        return STATUS_CODES[self.kind]

    def to_dict(self):
        return {"ok": False, "error": self.kind.value, "message": self.message}


def error_body(kind):
    return {"ok": False, "error": kind.value, "message": MESSAGES[kind]}
