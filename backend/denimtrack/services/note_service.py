# Overview: Service-layer operations for the special notes board.

from __future__ import annotations

from ..errors import NotFoundError, ValidationError
from ..models import SpecialNote, User
from ..time_utils import local_today, parse_iso_date


ACTIVE_NOTES_LIMIT = 20


class NoteBoard:
    """Admin announcements with soft delete."""

    def __init__(self, store):
        self.store = store

    @property
    def session(self):
        return self.store.session

    def add(self, content, author_id: int, note_date=None) -> SpecialNote:
        """
        Post a note. note_date defaults to today (server-local).

        Raises ValidationError for empty content or an unparsable date.
        """
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Note content is required.")

        try:
            parsed_date = parse_iso_date(note_date)
        except (TypeError, ValueError):
            raise ValidationError("Note date must be a valid date (YYYY-MM-DD).")

        note = SpecialNote(
            note_date=parsed_date or local_today(),
            note_content=content.strip(),
            entered_by_user_id=author_id,
            is_active=True,
        )
        self.session.add(note)
        self.session.commit()
        return note

    def list_active(self, limit: int = ACTIVE_NOTES_LIMIT) -> list[dict]:
        """Latest active notes: note_date desc, then creation time desc."""
        rows = (
            self.session.query(SpecialNote, User.username)
            .join(User, SpecialNote.entered_by_user_id == User.id)
            .filter(SpecialNote.is_active.is_(True))
            .order_by(SpecialNote.note_date.desc(), SpecialNote.created_at.desc(), SpecialNote.id.desc())
            .limit(limit)
            .all()
        )
        return [dict(note.to_dict(), entered_by_username=username) for note, username in rows]

    def deactivate(self, note_id: int) -> SpecialNote:
        """
        Hide a note from the active list.

        Deactivating an already inactive note succeeds again; only an id
        that never existed raises NotFoundError.
        """
        note = self.session.get(SpecialNote, note_id)
        if note is None:
            raise NotFoundError("Note not found.")

        note.is_active = False
        self.session.commit()
        return note
