from asamblea.models.apartment_weight import ApartmentWeight
from asamblea.models.attendance import AttendanceRecord
from asamblea.models.ballot import Ballot
from asamblea.models.option import QuestionOption
from asamblea.models.question import Question
from asamblea.models.user import User
from asamblea.models.voter import Voter
from asamblea.models.voting_session import VotingSession

__all__ = [
    "User",
    "Voter",
    "AttendanceRecord",
    "ApartmentWeight",
    "Question",
    "QuestionOption",
    "VotingSession",
    "Ballot",
]
