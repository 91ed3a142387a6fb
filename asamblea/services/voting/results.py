import csv
import io

from asamblea.services import ballots
from asamblea.services.resilience import db_retry
from asamblea.services.voting.tally import tally_weighted_ballots
from asamblea.services.voting_session import load_session

EXPORT_HEADER = ("Apartamento", "Voto", "Peso")


@db_retry
def current_tally():
    session = load_session()
    question = session.question
    round_ballots = ballots.list_all(session.round) if question is not None else []

    options = [option.key for option in question.options] if question else None
    result = tally_weighted_ballots(round_ballots, options=options)

    labels = {option.key: option.label for option in question.options} if question else {}
    for ballot in round_ballots:
        labels.setdefault(ballot.option, ballot.option_label)
    for key, row in result["per_option"].items():
        row["label"] = labels.get(key, key)

    result["question"] = question.to_dict() if question is not None else None
    result["state"] = session.state
    return result


@db_retry
def export_ballots_csv():
    session = load_session()
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for ballot in ballots.list_all(session.round):
        writer.writerow((ballot.apartment, ballot.option_label, ballot.weight))
    return buffer.getvalue()
