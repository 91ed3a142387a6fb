from asamblea.services.voting.results import current_tally, export_ballots_csv
from asamblea.services.voting.tally import tally_weighted_ballots

__all__ = [
    "current_tally",
    "export_ballots_csv",
    "tally_weighted_ballots",
]
