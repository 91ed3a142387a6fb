from asamblea.extensions import db


class AttendanceRecord(db.Model):
    __tablename__ = "attendance"

    national_id = db.Column(db.String(32), primary_key=True)
    apartment = db.Column(db.String(32), nullable=False)
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    registered_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self):
        return {
            "national_id": self.national_id,
            "apartment": self.apartment,
            "enabled": self.enabled,
            "registered_at": self.registered_at.isoformat(),
        }
