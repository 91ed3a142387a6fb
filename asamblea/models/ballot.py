from asamblea.extensions import db


class Ballot(db.Model):
    __tablename__ = "ballots"
    __table_args__ = (
        db.UniqueConstraint("national_id", "session_round", name="uq_ballot_voter_round"),
    )

    id = db.Column(db.Integer, primary_key=True)
    national_id = db.Column(db.String(32), nullable=False)
    apartment = db.Column(db.String(32), nullable=False)
    option = db.Column(db.String(200), nullable=False)
    option_label = db.Column(db.String(200), nullable=False)
    weight = db.Column(db.Float, nullable=False)
    cast_at = db.Column(db.DateTime, nullable=False)
    session_round = db.Column(db.Integer, nullable=False, index=True)

    def to_dict(self, include_voter=True):
        data = {
            "apartment": self.apartment,
            "option": self.option,
            "option_label": self.option_label,
            "weight": self.weight,
            "cast_at": self.cast_at.isoformat(),
        }
        if include_voter:
            data["national_id"] = self.national_id
        return data
