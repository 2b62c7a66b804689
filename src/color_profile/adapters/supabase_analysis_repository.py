"""Supabase-backed analysis repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from color_profile.domain.analysis import AnalysisRecord
from color_profile.services.analyses import AnalysisRepository

_COLUMNS = "id, result, input_data, user_id, created_at"


@dataclass
class SupabaseAnalysisRepository(AnalysisRepository):
    """Supabase implementation for generated analyses."""

    client: Client

    def create_analysis(
        self,
        result: dict[str, object],
        input_data: dict[str, object],
        owner_id: UUID | None,
    ) -> AnalysisRecord:
        """Insert an analysis row and return it."""
        response = (
            self.client.table("analyses")
            .insert(
                {
                    "result": result,
                    "input_data": input_data,
                    "user_id": str(owner_id) if owner_id else None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create analysis")
        return _parse_analysis(response.data[0])

    def get_analysis(self, analysis_id: UUID) -> AnalysisRecord | None:
        """Return an analysis by id, if present."""
        response = (
            self.client.table("analyses")
            .select(_COLUMNS)
            .eq("id", str(analysis_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_analysis(response.data[0])

    def list_for_owner(self, owner_id: UUID) -> list[AnalysisRecord]:
        """Return an owner's analyses, newest first."""
        response = (
            self.client.table("analyses")
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_analysis(row) for row in response.data or []]

    def reassign_owner(self, from_owner_id: UUID, to_owner_id: UUID) -> int:
        """Move every analysis of one owner to another."""
        response = (
            self.client.table("analyses")
            .update(
                {
                    "user_id": str(to_owner_id),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("user_id", str(from_owner_id))
            .execute()
        )
        return len(response.data or [])


def _parse_analysis(row: dict[str, object]) -> AnalysisRecord:
    created_at = row.get("created_at")
    return AnalysisRecord(
        id=UUID(row["id"]),
        result=row["result"],
        input_data=row["input_data"],
        owner_id=UUID(row["user_id"]) if row.get("user_id") else None,
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )
