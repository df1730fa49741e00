# durood_tracker/models/dua.py
from datetime import datetime
from .. import db


class Dua(db.Model):
    __tablename__ = "duas"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    arabic = db.Column(db.Text, nullable=False)
    urdu = db.Column(db.Text, nullable=False)
    english = db.Column(db.Text, nullable=False)
    transliteration = db.Column(db.Text)
    reference = db.Column(db.String(255))
    audio_url = db.Column(db.String(500))
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "arabic": self.arabic,
            "urdu": self.urdu,
            "english": self.english,
            "transliteration": self.transliteration,
            "reference": self.reference,
            "audio_url": self.audio_url,
            "order": self.display_order,
        }


class DuaFavorite(db.Model):
    __tablename__ = "dua_favorites"
    __table_args__ = (
        db.UniqueConstraint("user_id", "dua_id", name="uq_dua_favorites_user_dua"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    dua_id = db.Column(db.Integer, db.ForeignKey("duas.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    dua = db.relationship("Dua", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "dua_id": self.dua_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "dua": self.dua.to_dict() if self.dua else None,
        }
