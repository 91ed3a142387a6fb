from asamblea.extensions import db


class ApartmentWeight(db.Model):
    __tablename__ = "apartment_weights"

    apartment = db.Column(db.String(32), primary_key=True)
    weight = db.Column(db.Float, nullable=False)
