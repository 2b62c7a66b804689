"""Questionnaire answers submitted before analysis."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class QuestionnaireAnswers(BaseModel):
    """Answers to the fixed question set."""

    model_config = ConfigDict(extra="forbid")

    natural_hair_color: str = Field(pattern=HEX_COLOR_PATTERN)
    makeup_usage: Literal["yes", "no", "prefer_not_to_say"]
    age_group: Literal["under_18", "18_24", "25_34", "35_44", "45_54", "55_plus"]
    skin_reaction_to_sun: Literal[
        "burn_no_tan",
        "burn_then_reddish_tan",
        "tan_neutral_brown",
        "tan_golden_olive",
        "tan_deep_golden",
        "unsure",
    ]
    vein_color: Literal["blue_or_purple", "green_or_olive", "blue_and_green"]
    jewelry_preference: Literal[
        "silver_tones", "gold_tones", "rose_gold_or_both", "unknown"
    ]
    white_vs_cream_preference: Literal[
        "pure_white", "off_white_cream", "both_equal", "unsure"
    ]
    flattering_colors: str | None = Field(default=None, max_length=500)
    unflattering_colors: str | None = Field(default=None, max_length=500)
