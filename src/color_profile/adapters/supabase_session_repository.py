"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from color_profile.domain.landmarks import parse_landmarks, serialize_landmarks
from color_profile.domain.sessions import SessionRecord, SessionStatus
from color_profile.services.sessions import SessionRepository

_COLUMNS = (
    "id, status, expires_at, payment_reference, image_location, landmarks, "
    "questionnaire_data, analysis_id"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for analysis sessions."""

    client: Client

    def create_session(
        self, status: SessionStatus, expires_at: datetime
    ) -> SessionRecord:
        """Create a session row and return it."""
        response = (
            self.client.table("sessions")
            .insert({"status": status.value, "expires_at": expires_at.isoformat()})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _parse_session(response.data[0])

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("sessions")
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def update_status(
        self,
        session_id: UUID,
        expected_status: SessionStatus,
        status: SessionStatus,
        fields: dict[str, object] | None = None,
    ) -> SessionRecord | None:
        """Conditionally update a session; None when the status has moved on."""
        payload = {
            **_to_columns(fields or {}),
            "status": status.value,
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        response = (
            self.client.table("sessions")
            .update(payload)
            .eq("id", str(session_id))
            .eq("status", expected_status.value)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])


def _to_columns(fields: dict[str, object]) -> dict[str, object]:
    columns: dict[str, object] = {}
    for key, value in fields.items():
        if key == "landmarks":
            columns["landmarks"] = serialize_landmarks(value)
        elif key == "questionnaire":
            columns["questionnaire_data"] = value
        elif key == "analysis_id":
            columns["analysis_id"] = str(value) if value else None
        else:
            columns[key] = value
    return columns


def _parse_session(row: dict[str, object]) -> SessionRecord:
    return SessionRecord(
        id=UUID(row["id"]),
        status=SessionStatus(row["status"]),
        expires_at=datetime.fromisoformat(row["expires_at"]),
        payment_reference=row.get("payment_reference"),
        image_location=row.get("image_location"),
        landmarks=parse_landmarks(row.get("landmarks")),
        questionnaire=row.get("questionnaire_data"),
        analysis_id=UUID(row["analysis_id"]) if row.get("analysis_id") else None,
    )
