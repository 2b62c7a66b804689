"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from color_profile.adapters.google_vision_face_detector import (
    GoogleVisionFaceDetector,
)
from color_profile.adapters.openai_analysis_client import OpenAIAnalysisClient
from color_profile.adapters.supabase_analysis_repository import (
    SupabaseAnalysisRepository,
)
from color_profile.adapters.supabase_blob_store import SupabaseBlobStore
from color_profile.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from color_profile.config import Settings
from color_profile.services.analyses import AnalysisService
from color_profile.services.analysis import AnalysisGenerator
from color_profile.services.orchestrator import AnalysisOrchestrator
from color_profile.services.selfies import SelfieValidator
from color_profile.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    analysis_service: AnalysisService
    orchestrator: AnalysisOrchestrator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    analysis_repository = SupabaseAnalysisRepository(supabase_client)
    blob_store = SupabaseBlobStore(
        supabase_client, bucket=resolved_settings.supabase_storage_bucket
    )
    selfie_validator = SelfieValidator(
        detector=GoogleVisionFaceDetector(
            credentials_file=resolved_settings.google_credentials_file
        ),
        min_confidence=resolved_settings.face_min_detection_confidence,
    )
    session_service = SessionService(
        session_repository=session_repository,
        blob_store=blob_store,
        selfie_validator=selfie_validator,
        session_ttl=resolved_settings.session_ttl,
    )
    openai_client = OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
    generator = AnalysisGenerator(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    orchestrator = AnalysisOrchestrator(
        session_service=session_service,
        analysis_repository=analysis_repository,
        blob_store=blob_store,
        generator=generator,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        analysis_service=AnalysisService(analysis_repository),
        orchestrator=orchestrator,
        close_resources=close_resources,
    )
