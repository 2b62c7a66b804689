"""Stored analysis reads and ownership."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from color_profile.domain.analysis import AnalysisRecord
from color_profile.domain.errors import AnalysisNotFoundError

logger = logging.getLogger(__name__)


class AnalysisRepository(Protocol):
    """Persistence interface for generated analyses."""

    def create_analysis(
        self,
        result: dict[str, object],
        input_data: dict[str, object],
        owner_id: UUID | None,
    ) -> AnalysisRecord:
        """Insert an analysis and return it."""

    def get_analysis(self, analysis_id: UUID) -> AnalysisRecord | None:
        """Return an analysis by id, if present."""

    def list_for_owner(self, owner_id: UUID) -> list[AnalysisRecord]:
        """Return an owner's analyses, newest first."""

    def reassign_owner(self, from_owner_id: UUID, to_owner_id: UUID) -> int:
        """Move analyses between owners and return how many moved."""


@dataclass
class AnalysisService:
    """Read access to generated analyses."""

    analysis_repository: AnalysisRepository

    def get_analysis(self, analysis_id: UUID) -> AnalysisRecord:
        analysis = self.analysis_repository.get_analysis(analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(analysis_id)
        return analysis

    def list_for_owner(self, owner_id: UUID) -> list[AnalysisRecord]:
        return self.analysis_repository.list_for_owner(owner_id)

    def reassign_owner(self, from_owner_id: UUID, to_owner_id: UUID) -> int:
        """Attach analyses made under one identity to another account."""
        if from_owner_id == to_owner_id:
            return 0
        moved = self.analysis_repository.reassign_owner(from_owner_id, to_owner_id)
        logger.info(
            "Reassigned %s analyses from %s to %s", moved, from_owner_id, to_owner_id
        )
        return moved
