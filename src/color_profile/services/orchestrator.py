"""Analysis pipeline orchestration for one session."""

import logging
from dataclasses import dataclass
from uuid import UUID

from color_profile.domain.analysis import (
    AnalysisInput,
    AnalysisRecord,
    AnalysisStart,
    ContrastInput,
    ExtractedColorsInput,
    LabInput,
    Requester,
)
from color_profile.domain.colors import ContrastSummary, ExtractedColors
from color_profile.domain.errors import AnalysisPipelineError
from color_profile.domain.questionnaire import QuestionnaireAnswers
from color_profile.domain.sessions import SessionRecord
from color_profile.services.analyses import AnalysisRepository
from color_profile.services.analysis import AnalysisGenerator
from color_profile.services.contrast import evaluate_contrast
from color_profile.services.extraction import extract_facial_colors
from color_profile.services.sessions import BlobStore, SessionService

logger = logging.getLogger(__name__)


class MissingFeatureColorsError(ValueError):
    """Raised when extraction could not resolve the colors analysis needs."""


@dataclass
class AnalysisOrchestrator:
    """Sequences extraction, generation and persistence for a session."""

    session_service: SessionService
    analysis_repository: AnalysisRepository
    blob_store: BlobStore
    generator: AnalysisGenerator

    async def start_analysis(
        self, session_id: UUID, requester: Requester | None = None
    ) -> AnalysisStart:
        """Run the analysis pipeline once for a session.

        A session that is already pending or complete returns its current
        analysis id without running anything.
        """
        claim = self.session_service.claim_analysis(session_id)
        if not claim.claimed:
            logger.info(
                "Session %s already %s, skipping pipeline",
                session_id,
                claim.session.status,
            )
            return AnalysisStart(analysis_id=claim.session.analysis_id, started=False)

        session = claim.session
        try:
            analysis = await self._run_pipeline(session, requester)
            await self._discard_blob(session.image_location)
            self.session_service.complete_analysis(session_id, analysis.id)
        except Exception as exc:
            logger.exception("Analysis pipeline failed for session %s", session_id)
            self._record_failure(session_id)
            raise AnalysisPipelineError(session_id, str(exc) or type(exc).__name__) from exc

        logger.info("Session %s completed analysis %s", session_id, analysis.id)
        return AnalysisStart(analysis_id=analysis.id, started=True)

    async def _run_pipeline(
        self, session: SessionRecord, requester: Requester | None
    ) -> AnalysisRecord:
        image_bytes = await self.blob_store.get(session.image_location)
        colors = await extract_facial_colors(image_bytes, session.landmarks)
        answers = QuestionnaireAnswers.model_validate(session.questionnaire)

        if not colors.skin_color_hex or not colors.average_eye_color_hex:
            raise MissingFeatureColorsError(
                "Could not extract skin or eye color from the image"
            )
        contrast = evaluate_contrast(
            colors.skin_color_hex,
            colors.average_eye_color_hex,
            answers.natural_hair_color,
        )
        analysis_input = build_analysis_input(colors, contrast, answers)
        result = await self.generator.generate(analysis_input)

        owner_id = (
            requester.user_id
            if requester is not None and not requester.is_anonymous
            else None
        )
        return self.analysis_repository.create_analysis(
            result=result.model_dump(mode="json"),
            input_data=analysis_input.model_dump(mode="json"),
            owner_id=owner_id,
        )

    def _record_failure(self, session_id: UUID) -> None:
        try:
            self.session_service.fail_analysis(session_id)
        except Exception:
            logger.exception("Could not mark session %s as failed", session_id)

    async def _discard_blob(self, image_location: str | None) -> None:
        if not image_location:
            return
        try:
            await self.blob_store.delete(image_location)
        except Exception:
            logger.warning("Failed to delete selfie %s", image_location, exc_info=True)


def build_analysis_input(
    colors: ExtractedColors,
    contrast: ContrastSummary,
    answers: QuestionnaireAnswers,
) -> AnalysisInput:
    """Assemble the structured input for the generative analysis."""
    lab = colors.skin_color_lab
    return AnalysisInput(
        extracted_colors=ExtractedColorsInput(
            skin_color_hex=colors.skin_color_hex,
            skin_color_lab=(
                LabInput(l=round(lab.l, 2), a=round(lab.a, 2), b=round(lab.b, 2))
                if lab is not None
                else None
            ),
            average_eye_color_hex=colors.average_eye_color_hex,
            average_eyebrow_color_hex=colors.average_eyebrow_color_hex,
            contrast=ContrastInput(
                skin_eye_ratio=contrast.skin_eye_ratio,
                skin_hair_ratio=contrast.skin_hair_ratio,
                eye_hair_ratio=contrast.eye_hair_ratio,
                overall=contrast.overall.value,
            ),
            calculated_undertone=(
                colors.skin_undertone.value if colors.skin_undertone else None
            ),
        ),
        questionnaire_answers=answers,
    )
