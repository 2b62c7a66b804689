"""Catalog of natural hair colors offered by the questionnaire."""

from dataclasses import dataclass
from typing import Literal

HairCategory = Literal["Blondes", "Browns", "Blacks", "Reds/Auburns"]


@dataclass(frozen=True)
class HairColor:
    """Named natural hair shade."""

    name: str
    hex: str
    category: HairCategory


NATURAL_HAIR_COLORS: tuple[HairColor, ...] = (
    HairColor("Platinum Blonde", "#E2DACC", "Blondes"),
    HairColor("Light Ash Blonde", "#D1C4AE", "Blondes"),
    HairColor("Light Golden Blonde", "#F0E2B6", "Blondes"),
    HairColor("Golden Blonde", "#E6CE9C", "Blondes"),
    HairColor("Honey Blonde", "#C5A46F", "Blondes"),
    HairColor("Dishwater Blonde", "#C1A87C", "Blondes"),
    HairColor("Dark Blonde", "#B89B71", "Blondes"),
    HairColor("Light Brown", "#A57F58", "Browns"),
    HairColor("Ash Brown", "#907B68", "Browns"),
    HairColor("Golden Brown", "#8B694A", "Browns"),
    HairColor("Medium Brown", "#715441", "Browns"),
    HairColor("Chestnut Brown", "#6D4C3C", "Browns"),
    HairColor("Dark Brown", "#5C4033", "Browns"),
    HairColor("Cool Dark Brown", "#4A362A", "Browns"),
    HairColor("Brown-Black", "#2E2622", "Blacks"),
    HairColor("Soft Black", "#3D312A", "Blacks"),
    HairColor("Medium Black", "#352A25", "Blacks"),
    HairColor("Warm Black", "#302926", "Blacks"),
    HairColor("Natural Black", "#2C221F", "Blacks"),
    HairColor("Blue-Black", "#1F2124", "Blacks"),
    HairColor("Jet Black", "#1A1110", "Blacks"),
    HairColor("Strawberry Blonde", "#C99A7C", "Reds/Auburns"),
    HairColor("Ginger Red", "#C16E48", "Reds/Auburns"),
    HairColor("Copper Red", "#B85C3A", "Reds/Auburns"),
    HairColor("Light Auburn", "#A45D41", "Reds/Auburns"),
    HairColor("Auburn", "#8E4433", "Reds/Auburns"),
    HairColor("Dark Auburn", "#5D2E27", "Reds/Auburns"),
    HairColor("Deep Red Mahogany", "#522E2B", "Reds/Auburns"),
)


def grouped_hair_colors() -> dict[str, list[HairColor]]:
    """Group the catalog by category, preserving catalog order."""
    grouped: dict[str, list[HairColor]] = {}
    for color in NATURAL_HAIR_COLORS:
        grouped.setdefault(color.category, []).append(color)
    return grouped
