"""Shared test fixtures."""

import asyncio
import io
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest
from PIL import Image, ImageDraw

from color_profile.config import Settings
from color_profile.containers import AppContainer
from color_profile.domain import landmarks as lm
from color_profile.domain.analysis import AnalysisRecord
from color_profile.domain.landmarks import Landmark
from color_profile.domain.questionnaire import QuestionnaireAnswers
from color_profile.domain.selfies import DetectedFace
from color_profile.domain.sessions import PaymentOutcome, SessionRecord, SessionStatus
from color_profile.services.analyses import AnalysisRepository, AnalysisService
from color_profile.services.analysis import AnalysisClient, AnalysisGenerator
from color_profile.services.orchestrator import AnalysisOrchestrator
from color_profile.services.selfies import FaceDetector, SelfieValidator
from color_profile.services.sessions import (
    BlobStore,
    SessionRepository,
    SessionService,
)

SKIN_RGB = (200, 155, 124)
EYE_RGB = (75, 58, 42)
EYEBROW_RGB = (40, 30, 25)
HAIR_HEX = "#2C222B"

FACE_LANDMARKS = [
    Landmark(lm.LEFT_CHEEK_CENTER, 120, 250, 0),
    Landmark(lm.RIGHT_CHEEK_CENTER, 280, 250, 0),
    Landmark(lm.FOREHEAD_GLABELLA, 200, 150, 0),
    Landmark(lm.LEFT_EYE_LEFT_CORNER, 100, 155, 0),
    Landmark(lm.LEFT_EYE_RIGHT_CORNER, 140, 155, 0),
    Landmark(lm.LEFT_EYE_TOP_BOUNDARY, 120, 150, 0),
    Landmark(lm.LEFT_EYE_BOTTOM_BOUNDARY, 120, 160, 0),
    Landmark(lm.RIGHT_EYE_LEFT_CORNER, 260, 155, 0),
    Landmark(lm.RIGHT_EYE_RIGHT_CORNER, 300, 155, 0),
    Landmark(lm.RIGHT_EYE_TOP_BOUNDARY, 280, 150, 0),
    Landmark(lm.RIGHT_EYE_BOTTOM_BOUNDARY, 280, 160, 0),
    Landmark(lm.LEFT_EYEBROW_UPPER_MIDPOINT, 120, 120, 0),
    Landmark(lm.RIGHT_EYEBROW_UPPER_MIDPOINT, 280, 120, 0),
]


def build_face_image(image_format: str = "PNG") -> bytes:
    """Render a flat synthetic face matching FACE_LANDMARKS."""
    image = Image.new("RGB", (400, 400), SKIN_RGB)
    draw = ImageDraw.Draw(image)
    draw.rectangle((110, 148, 125, 162), fill=EYE_RGB)
    draw.rectangle((276, 148, 290, 162), fill=EYE_RGB)
    draw.rectangle((108, 118, 132, 130), fill=EYEBROW_RGB)
    draw.rectangle((268, 118, 292, 130), fill=EYEBROW_RGB)
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


def questionnaire_answers(**overrides: object) -> QuestionnaireAnswers:
    values: dict[str, object] = {
        "natural_hair_color": HAIR_HEX,
        "makeup_usage": "yes",
        "age_group": "25_34",
        "skin_reaction_to_sun": "tan_golden_olive",
        "vein_color": "green_or_olive",
        "jewelry_preference": "gold_tones",
        "white_vs_cream_preference": "off_white_cream",
        "flattering_colors": "olive green, rust",
        "unflattering_colors": None,
    }
    values.update(overrides)
    return QuestionnaireAnswers.model_validate(values)


def _color(name: str, hex_value: str) -> dict[str, str]:
    return {"name": name, "hex": hex_value}


def analysis_payload(with_makeup: bool = True) -> dict[str, object]:
    """Return a schema-valid analysis result."""
    return {
        "season": "Soft Autumn",
        "season_explanation": "Muted warm coloring with medium depth.",
        "undertone": "Warm",
        "undertone_explanation": "Green veins and a golden tan point to warmth.",
        "contrast_level": "Medium",
        "contrast_level_explanation": "Skin and hair differ moderately.",
        "overall_vibe": "Earthy and softly glowing.",
        "power_colors": [
            _color("Olive", "#708238"),
            _color("Rust", "#B7410E"),
            _color("Camel", "#C19A6B"),
            _color("Teal", "#367588"),
            _color("Terracotta", "#E2725B"),
        ],
        "colors_to_avoid": [
            _color("Icy Blue", "#A5F2F3"),
            _color("Fuchsia", "#FF00FF"),
            _color("Optic White", "#FFFFFF"),
        ],
        "primary_metal": "Gold",
        "metal_tones_explanation": "Gold echoes the warm undertone.",
        "style_scenarios": {
            scenario: {
                "color_combination_advice": f"{scenario} pairing",
                "color_combination_colors": [
                    _color("Camel", "#C19A6B"),
                    _color("Olive", "#708238"),
                ],
            }
            for scenario in ("professional", "elegant", "casual")
        },
        "hair_color_guidance": {
            "lighter_tone_effect": "Softens the face.",
            "darker_tone_effect": "Adds depth.",
            "color_to_avoid": {
                "color": _color("Ash Blonde", "#D1C4AE"),
                "explanation": "Ashy tones wash out warm skin.",
            },
        },
        "makeup_recommendations": (
            {
                "general_makeup_advice": "Stay in warm, muted families.",
                "foundation_undertone_guidance": {
                    "description": "Choose golden bases.",
                    "color": _color("Golden Beige", "#D4A373"),
                },
                "blush_recommendation": {
                    "description": "Peach blush.",
                    "color": _color("Peach", "#FFCBA4"),
                },
                "complementary_lip_colors": [
                    _color("Brick", "#8D3B2B"),
                    _color("Warm Nude", "#C08A6E"),
                ],
                "complementary_eye_colors": [
                    _color("Bronze", "#CD7F32"),
                    _color("Khaki", "#8A865D"),
                ],
            }
            if with_makeup
            else None
        ),
    }


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository with compare-and-set updates."""

    sessions: dict[UUID, SessionRecord] = field(default_factory=dict)
    updates: list[tuple[UUID, SessionStatus, SessionStatus]] = field(
        default_factory=list
    )

    def create_session(
        self, status: SessionStatus, expires_at: datetime
    ) -> SessionRecord:
        session = SessionRecord(id=uuid4(), status=status, expires_at=expires_at)
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def update_status(
        self,
        session_id: UUID,
        expected_status: SessionStatus,
        status: SessionStatus,
        fields: dict[str, object] | None = None,
    ) -> SessionRecord | None:
        session = self.sessions.get(session_id)
        if session is None or session.status != expected_status:
            return None
        updated = replace(session, status=status, **(fields or {}))
        self.sessions[session_id] = updated
        self.updates.append((session_id, expected_status, status))
        return updated

    def force(self, session_id: UUID, **changes: object) -> SessionRecord:
        """Overwrite stored fields directly, bypassing the state machine."""
        session = replace(self.sessions[session_id], **changes)
        self.sessions[session_id] = session
        return session


@dataclass
class InMemoryAnalysisRepository(AnalysisRepository):
    """In-memory analysis repository for tests."""

    analyses: dict[UUID, AnalysisRecord] = field(default_factory=dict)

    def create_analysis(
        self,
        result: dict[str, object],
        input_data: dict[str, object],
        owner_id: UUID | None,
    ) -> AnalysisRecord:
        analysis = AnalysisRecord(
            id=uuid4(),
            result=result,
            input_data=input_data,
            owner_id=owner_id,
            created_at=datetime.now(tz=UTC),
        )
        self.analyses[analysis.id] = analysis
        return analysis

    def get_analysis(self, analysis_id: UUID) -> AnalysisRecord | None:
        return self.analyses.get(analysis_id)

    def list_for_owner(self, owner_id: UUID) -> list[AnalysisRecord]:
        owned = [a for a in self.analyses.values() if a.owner_id == owner_id]
        return sorted(owned, key=lambda a: a.created_at, reverse=True)

    def reassign_owner(self, from_owner_id: UUID, to_owner_id: UUID) -> int:
        moved = 0
        for analysis_id, analysis in list(self.analyses.items()):
            if analysis.owner_id == from_owner_id:
                self.analyses[analysis_id] = replace(analysis, owner_id=to_owner_id)
                moved += 1
        return moved


@dataclass
class FakeBlobStore(BlobStore):
    """Blob store holding bytes in memory."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    fail_delete: bool = False

    async def get(self, location: str) -> bytes:
        if location not in self.blobs:
            raise RuntimeError(f"Blob {location} is empty or missing")
        return self.blobs[location]

    async def delete(self, location: str) -> None:
        if self.fail_delete:
            raise RuntimeError("storage unavailable")
        self.deleted.append(location)
        self.blobs.pop(location, None)


@dataclass
class FakeFaceDetector(FaceDetector):
    """Face detector returning configured faces."""

    faces: list[DetectedFace] = field(
        default_factory=lambda: [
            DetectedFace(
                landmarks=list(FACE_LANDMARKS),
                detection_confidence=0.98,
                blurred_likelihood=1,
                under_exposed_likelihood=1,
            )
        ]
    )
    error: Exception | None = None

    async def detect(self, image_bytes: bytes) -> list[DetectedFace]:
        if self.error is not None:
            raise self.error
        return self.faces


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Analysis client returning a fixed payload and recording prompts."""

    payload: dict[str, object] = field(default_factory=analysis_payload)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.calls.append(
            {"model": model, "user_prompt": user_prompt, "schema": schema}
        )
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        payment_webhook_token="webhook-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def analysis_repository() -> InMemoryAnalysisRepository:
    return InMemoryAnalysisRepository()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def face_detector() -> FakeFaceDetector:
    return FakeFaceDetector()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def session_service(
    settings: Settings,
    session_repository: InMemorySessionRepository,
    blob_store: FakeBlobStore,
    face_detector: FakeFaceDetector,
) -> SessionService:
    return SessionService(
        session_repository=session_repository,
        blob_store=blob_store,
        selfie_validator=SelfieValidator(
            detector=face_detector,
            min_confidence=settings.face_min_detection_confidence,
        ),
        session_ttl=settings.session_ttl,
    )


@pytest.fixture
def orchestrator(
    settings: Settings,
    session_service: SessionService,
    analysis_repository: InMemoryAnalysisRepository,
    blob_store: FakeBlobStore,
    analysis_client: FakeAnalysisClient,
) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(
        session_service=session_service,
        analysis_repository=analysis_repository,
        blob_store=blob_store,
        generator=AnalysisGenerator(
            client=analysis_client,
            model=settings.openai_model,
            reasoning_effort=settings.openai_reasoning_effort,
            store=settings.openai_store,
        ),
    )


@pytest.fixture
def container(
    settings: Settings,
    session_service: SessionService,
    analysis_repository: InMemoryAnalysisRepository,
    orchestrator: AnalysisOrchestrator,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_service=session_service,
        analysis_service=AnalysisService(analysis_repository),
        orchestrator=orchestrator,
        close_resources=close_resources,
    )


@pytest.fixture
def ready_session(
    session_service: SessionService,
    blob_store: FakeBlobStore,
) -> SessionRecord:
    """A session that has paid, passed selfie validation and answered questions."""
    session = session_service.start_session()
    session_service.record_payment(session.id, PaymentOutcome.SUCCEEDED, "pay_123")
    blob_store.blobs["selfies/face.png"] = build_face_image()
    asyncio.run(session_service.submit_selfie(session.id, "selfies/face.png"))
    return session_service.submit_questionnaire(session.id, questionnaire_answers())
