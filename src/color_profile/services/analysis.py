"""Generative color analysis using LLMs."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from color_profile.domain.analysis import AnalysisInput, AnalysisResult

logger = logging.getLogger(__name__)

_HEX = {"type": "string", "pattern": "^#[0-9A-Fa-f]{6}$"}


def _object(properties: dict[str, object]) -> dict[str, object]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def _color_list(min_items: int, max_items: int) -> dict[str, object]:
    return {
        "type": "array",
        "items": COLOR_SCHEMA,
        "minItems": min_items,
        "maxItems": max_items,
    }


COLOR_SCHEMA = _object({"name": {"type": "string"}, "hex": _HEX})

_SCENARIO_SCHEMA = _object(
    {
        "color_combination_advice": {"type": "string"},
        "color_combination_colors": _color_list(2, 2),
    }
)

_MAKEUP_CARD_SCHEMA = _object(
    {"description": {"type": "string"}, "color": COLOR_SCHEMA}
)

MAKEUP_SCHEMA = _object(
    {
        "general_makeup_advice": {"type": "string"},
        "foundation_undertone_guidance": _MAKEUP_CARD_SCHEMA,
        "blush_recommendation": _MAKEUP_CARD_SCHEMA,
        "complementary_lip_colors": _color_list(2, 3),
        "complementary_eye_colors": _color_list(2, 3),
    }
)

ANALYSIS_SCHEMA: dict[str, object] = _object(
    {
        "season": {"type": "string"},
        "season_explanation": {"type": "string"},
        "undertone": {"type": "string", "enum": ["Warm", "Cool", "Neutral", "Olive"]},
        "undertone_explanation": {"type": "string"},
        "contrast_level": {"type": "string", "enum": ["High", "Medium", "Low"]},
        "contrast_level_explanation": {"type": "string"},
        "overall_vibe": {"type": "string"},
        "power_colors": _color_list(5, 5),
        "colors_to_avoid": _color_list(3, 3),
        "primary_metal": {"type": "string", "enum": ["Gold", "Silver", "Bronze"]},
        "metal_tones_explanation": {"type": "string"},
        "style_scenarios": _object(
            {
                "professional": _SCENARIO_SCHEMA,
                "elegant": _SCENARIO_SCHEMA,
                "casual": _SCENARIO_SCHEMA,
            }
        ),
        "hair_color_guidance": _object(
            {
                "lighter_tone_effect": {"type": "string"},
                "darker_tone_effect": {"type": "string"},
                "color_to_avoid": _object(
                    {"color": COLOR_SCHEMA, "explanation": {"type": "string"}}
                ),
            }
        ),
        "makeup_recommendations": {"anyOf": [MAKEUP_SCHEMA, {"type": "null"}]},
    }
)

SYSTEM_PROMPT = """\
You are an expert personal color analyst. You receive a JSON object with two
keys: extracted_colors (skin, eye and eyebrow colors measured from a selfie,
the skin color in CIE Lab, contrast ratios against the natural hair color and
a calculated undertone) and questionnaire_answers (the user's own answers).

Determine the user's color season, undertone and contrast level and give
personalized color advice. Follow these rules:

1. Weigh the measured colors and contrast most heavily for season and palette.
2. Determine the undertone primarily from vein_color, skin_reaction_to_sun,
   jewelry_preference and white_vs_cream_preference. Use calculated_undertone
   only as supporting evidence, and ignore it when it is "Undetermined".
3. Base contrast_level on extracted_colors.contrast.overall.
4. Treat flattering_colors and unflattering_colors as secondary information.
   When they conflict with the measured analysis, the analysis wins.
5. power_colors has exactly five colors, colors_to_avoid exactly three, and
   every style scenario pairs exactly two colors. Choose colors that suit the
   user's own skin, eye and hair colors, from distinct color families.
6. primary_metal follows the undertone; mention jewelry_preference in the
   explanation.
7. Include makeup_recommendations only when makeup_usage is "yes"; otherwise
   set it to null.
8. Do not recommend specific clothing items. Keep explanations to one to three
   sentences in accessible language that refer back to the inputs.
"""


class AnalysisClient(Protocol):
    """Interface for structured LLM generation."""

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
        """Return structured output matching the schema."""


@dataclass
class AnalysisGenerator:
    """Service that prepares analysis prompts and validates results."""

    client: AnalysisClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(self, analysis_input: AnalysisInput) -> AnalysisResult:
        """Produce a validated color analysis for the given input."""
        user_prompt = "Here is the user data: " + json.dumps(
            analysis_input.model_dump(mode="json"), indent=2
        )
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=user_prompt,
            schema=ANALYSIS_SCHEMA,
        )
        result = AnalysisResult.model_validate(raw)
        logger.info("Generated analysis: season=%s", result.season)
        return result
