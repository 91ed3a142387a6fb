from asamblea.extensions import db


class Voter(db.Model):
    __tablename__ = "voters"

    national_id = db.Column(db.String(32), primary_key=True)
    apartment = db.Column(db.String(32), nullable=False, index=True)
    attendance_apartment = db.Column(db.String(32), nullable=True)

    @property
    def voting_apartment(self):
        return self.attendance_apartment or self.apartment

    def to_dict(self):
        return {
            "national_id": self.national_id,
            "apartment": self.apartment,
            "attendance_apartment": self.attendance_apartment,
        }
