from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z


class SpecialNote(db.Model):
    """
    Dated announcement posted by an admin.

    Deactivation is a soft delete: the row stays, is_active goes false and
    the note drops out of the active list for good.
    """
    __tablename__ = "special_notes"
    __table_args__ = (
        db.Index("ix_special_notes_active_date", "is_active", "note_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    note_date = db.Column(db.Date, nullable=False)
    note_content = db.Column(db.Text, nullable=False)

    entered_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    entered_by = db.relationship("User", foreign_keys=[entered_by_user_id])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "note_date": to_iso_date(self.note_date),
            "note_content": self.note_content,
            "entered_by_user_id": self.entered_by_user_id,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
        }
