"""Models for generative analysis input, output and persisted results."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from color_profile.domain.questionnaire import HEX_COLOR_PATTERN, QuestionnaireAnswers


class ColorInfo(BaseModel):
    """Named color swatch."""

    name: str
    hex: str = Field(pattern=HEX_COLOR_PATTERN)


class MakeupCard(BaseModel):
    """Single makeup guidance card."""

    description: str
    color: ColorInfo


class MakeupRecommendations(BaseModel):
    """Makeup block, present only when the user wears makeup."""

    general_makeup_advice: str
    foundation_undertone_guidance: MakeupCard
    blush_recommendation: MakeupCard
    complementary_lip_colors: list[ColorInfo] = Field(min_length=2, max_length=3)
    complementary_eye_colors: list[ColorInfo] = Field(min_length=2, max_length=3)


class StyleScenario(BaseModel):
    """Color pairing advice for one setting."""

    color_combination_advice: str
    color_combination_colors: list[ColorInfo] = Field(min_length=2, max_length=2)


class StyleScenarios(BaseModel):
    professional: StyleScenario
    elegant: StyleScenario
    casual: StyleScenario


class HairColorToAvoid(BaseModel):
    color: ColorInfo
    explanation: str


class HairColorGuidance(BaseModel):
    """Effects of lighter or darker hair and one shade to avoid."""

    lighter_tone_effect: str
    darker_tone_effect: str
    color_to_avoid: HairColorToAvoid


class AnalysisResult(BaseModel):
    """Structured output of the generative analysis."""

    season: str
    season_explanation: str
    undertone: Literal["Warm", "Cool", "Neutral", "Olive"]
    undertone_explanation: str
    contrast_level: Literal["High", "Medium", "Low"]
    contrast_level_explanation: str
    overall_vibe: str
    power_colors: list[ColorInfo] = Field(min_length=5, max_length=5)
    colors_to_avoid: list[ColorInfo] = Field(min_length=3, max_length=3)
    primary_metal: Literal["Gold", "Silver", "Bronze"]
    metal_tones_explanation: str
    style_scenarios: StyleScenarios
    hair_color_guidance: HairColorGuidance
    makeup_recommendations: MakeupRecommendations | None = None


class LabInput(BaseModel):
    l: float  # noqa: E741
    a: float
    b: float


class ContrastInput(BaseModel):
    """Contrast ratios sent to the analysis model."""

    skin_eye_ratio: float
    skin_hair_ratio: float
    eye_hair_ratio: float
    overall: Literal["High", "Medium", "Low"]


class ExtractedColorsInput(BaseModel):
    """Image-derived features sent to the analysis model."""

    skin_color_hex: str | None
    skin_color_lab: LabInput | None
    average_eye_color_hex: str | None
    average_eyebrow_color_hex: str | None
    contrast: ContrastInput
    calculated_undertone: str | None = None


class AnalysisInput(BaseModel):
    """Full structured input for one generative analysis call."""

    extracted_colors: ExtractedColorsInput
    questionnaire_answers: QuestionnaireAnswers


@dataclass(frozen=True)
class AnalysisRecord:
    """Represents a persisted analysis."""

    id: UUID
    result: dict[str, object]
    input_data: dict[str, object]
    owner_id: UUID | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Requester:
    """Identity attached to a start request by the auth layer."""

    user_id: UUID
    is_anonymous: bool = False


@dataclass(frozen=True)
class AnalysisStart:
    """Result of a start request."""

    analysis_id: UUID | None
    started: bool
