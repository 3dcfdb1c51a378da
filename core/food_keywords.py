"""
core/food_keywords.py
────────────────────────────────────────────────────────────────────────
Food-name keyword tables for the fuzzy serving units.

A food whose lowercased name contains one of the keywords below gets
that keyword's cup / plate / piece amounts (grams, or ml for liquids)
ahead of the generic defaults. `None` means the unit does not apply to
that food and resolution falls through to the default table.

Matching rule: the table is scanned in the order written here and the
FIRST keyword found as a substring wins, so "Chicken and rice" matches
`rice` (grains come before proteins).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class KeywordConversions:
    cup: float | None
    plate: float | None
    piece: float | None

    def get(self, unit: str) -> float | None:
        return getattr(self, unit, None)


_K = KeywordConversions

# ── keyword → per-unit amounts (ordered; first match wins) ───────────
FOOD_SPECIFIC_CONVERSIONS: tuple[tuple[str, KeywordConversions], ...] = (
    # grains & cereals
    ("rice",       _K(cup=185, plate=200, piece=None)),
    ("pasta",      _K(cup=220, plate=180, piece=None)),
    ("oatmeal",    _K(cup=240, plate=200, piece=None)),
    ("quinoa",     _K(cup=170, plate=150, piece=None)),
    ("bread",      _K(cup=None, plate=None, piece=25)),
    # fruits
    ("apple",      _K(cup=125, plate=None, piece=180)),
    ("banana",     _K(cup=150, plate=None, piece=120)),
    ("orange",     _K(cup=180, plate=None, piece=150)),
    ("grapes",     _K(cup=150, plate=200, piece=5)),
    ("strawberry", _K(cup=150, plate=200, piece=15)),
    ("blueberry",  _K(cup=150, plate=200, piece=1)),
    # vegetables
    ("broccoli",   _K(cup=90, plate=150, piece=25)),
    ("potato",     _K(cup=150, plate=200, piece=200)),
    ("carrot",     _K(cup=130, plate=150, piece=60)),
    ("tomato",     _K(cup=180, plate=200, piece=120)),
    ("onion",      _K(cup=160, plate=180, piece=100)),
    ("cucumber",   _K(cup=120, plate=150, piece=300)),
    # proteins
    ("chicken",    _K(cup=None, plate=200, piece=150)),
    ("beef",       _K(cup=None, plate=200, piece=100)),
    ("fish",       _K(cup=None, plate=180, piece=120)),
    ("egg",        _K(cup=None, plate=None, piece=50)),
    ("tofu",       _K(cup=250, plate=200, piece=85)),
    # dairy
    ("cheese",     _K(cup=115, plate=None, piece=30)),
    ("yogurt",     _K(cup=245, plate=None, piece=None)),
    # nuts & seeds
    ("almond",     _K(cup=140, plate=None, piece=1)),
    ("walnut",     _K(cup=120, plate=None, piece=3)),
    ("peanut",     _K(cup=150, plate=None, piece=1)),
)

# Piece weights for highly variable items. Suggestions only; the resolver
# never reads this table.
SIZE_VARIANTS: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "apple":  MappingProxyType({"piece_small": 120, "piece_medium": 180, "piece_large": 240}),
    "potato": MappingProxyType({"piece_small": 150, "piece_medium": 200, "piece_large": 300}),
    "banana": MappingProxyType({"piece_small": 90, "piece_medium": 120, "piece_large": 150}),
    "egg":    MappingProxyType({"piece_small": 40, "piece_medium": 50, "piece_large": 60}),
})


def match_food_keyword(name: str | None) -> str | None:
    """Return the first table keyword contained in `name`, if any."""
    if not name:
        return None
    lowered = name.lower()
    for keyword, _ in FOOD_SPECIFIC_CONVERSIONS:
        if keyword in lowered:
            return keyword
    return None


def keyword_conversions(name: str | None) -> KeywordConversions | None:
    keyword = match_food_keyword(name)
    if keyword is None:
        return None
    return dict(FOOD_SPECIFIC_CONVERSIONS)[keyword]


def suggested_conversions(name: str | None) -> dict[str, float | None] | None:
    """Pre-fill values for a food's custom conversions form, or None."""
    table = keyword_conversions(name)
    return asdict(table) if table else None


def piece_size_variants(name: str | None) -> dict[str, float] | None:
    lowered = (name or "").lower()
    for keyword, sizes in SIZE_VARIANTS.items():
        if keyword in lowered:
            return dict(sizes)
    return None
