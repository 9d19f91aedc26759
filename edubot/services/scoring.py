"""Suitability scoring for the school recommendation endpoint.

Each school earns points for every preference it satisfies in the family's
profile.  Criteria are independent and additive, so the total is simply the
sum of the satisfied weights (0-120 with the default weights).

Upstream records are loosely typed JSON: any field may be missing or hold a
value of the wrong kind.  Every criterion is a guarded check that contributes
nothing in that case, so scoring never raises.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MIN_SCORE = 30

# Upper fee bound (inclusive) for each paid fee preference. "free" means exactly 0.
FEE_CEILINGS: dict[str, float] = {
    "low": 500.0,
    "medium": 1500.0,
}


@dataclass(frozen=True)
class ScoreWeights:
    """Points awarded per satisfied criterion."""

    class_match: int = 30
    location: int = 20
    type: int = 20
    distance: int = 20
    fee: int = 20
    midday_meal: int = 5
    girl_child: int = 5

    @property
    def max_score(self) -> int:
        return sum(asdict(self).values())


DEFAULT_WEIGHTS = ScoreWeights()

# Keys accepted by :func:`parse_weights`, mapped to ScoreWeights fields.
WEIGHT_KEYS: dict[str, str] = {
    "class": "class_match",
    "location": "location",
    "type": "type",
    "distance": "distance",
    "fee": "fee",
    "midday": "midday_meal",
    "girlSupport": "girl_child",
}


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------


@dataclass
class SchoolRecord:
    """A school as stored upstream.

    Only the fields used for matching are lifted out; ``raw`` keeps the full
    upstream mapping so that responses can echo it back untouched.
    """

    classes: Any = None
    location: Any = None
    type: Any = None
    distence: Any = None  # upstream spelling
    fee: Any = None
    midday: Any = None
    girl_support: Any = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchoolRecord:
        return cls(
            classes=data.get("classes"),
            location=data.get("location"),
            type=data.get("type"),
            distence=data.get("distence"),
            fee=data.get("fee"),
            midday=data.get("midday"),
            girl_support=data.get("girlSupport"),
            raw=dict(data),
        )


@dataclass
class UserProfile:
    """A family's stated preferences, as submitted to ``/api/recommend``."""

    class_: Any = None
    location: Any = None
    type: Any = None
    max_distance: Any = None
    fee: Any = None
    midday_meal: Any = None
    girl_child: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserProfile:
        return cls(
            class_=data.get("class"),
            location=data.get("location"),
            type=data.get("type"),
            max_distance=data.get("maxDistance"),
            fee=data.get("fee"),
            midday_meal=data.get("middayMeal"),
            girl_child=data.get("girlChild"),
        )


# ---------------------------------------------------------------------------
# Type guards
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    """True for ints and floats.  Booleans are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _as_label(value: Any) -> str:
    """Stringify a class label the way a JSON client prints it.

    ``10``, ``10.0`` and ``"10"`` all become ``"10"``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------


def _class_matches(school: SchoolRecord, user: UserProfile) -> bool:
    if school.classes is None or user.class_ is None:
        return False
    offered = school.classes if isinstance(school.classes, (list, tuple)) else [school.classes]
    wanted = _as_label(user.class_)
    return any(_as_label(c) == wanted for c in offered if c is not None)


def _location_matches(school: SchoolRecord, user: UserProfile) -> bool:
    if not (_is_text(school.location) and _is_text(user.location)):
        return False
    return user.location.lower() in school.location.lower()


def _type_matches(school: SchoolRecord, user: UserProfile) -> bool:
    if not (_is_text(school.type) and _is_text(user.type)):
        return False
    return school.type.lower() == user.type.lower()


def _distance_fits(school: SchoolRecord, user: UserProfile) -> bool:
    if not (_is_number(school.distence) and _is_number(user.max_distance)):
        return False
    return school.distence <= user.max_distance


def _fee_fits(school: SchoolRecord, user: UserProfile) -> bool:
    if not _is_number(school.fee) or not isinstance(user.fee, str):
        return False
    if user.fee == "free":
        return school.fee == 0
    ceiling = FEE_CEILINGS.get(user.fee)
    return ceiling is not None and school.fee <= ceiling


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def calculate_score(
    school: SchoolRecord,
    user: UserProfile,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """Return the suitability score of *school* for *user*.

    Never raises: a criterion whose inputs are missing or of the wrong type
    simply awards nothing.
    """
    score = 0
    if _class_matches(school, user):
        score += weights.class_match
    if _location_matches(school, user):
        score += weights.location
    if _type_matches(school, user):
        score += weights.type
    if _distance_fits(school, user):
        score += weights.distance
    if _fee_fits(school, user):
        score += weights.fee

    # Welfare schemes only count when the school flag is literally true.
    if user.midday_meal and school.midday is True:
        score += weights.midday_meal
    if user.girl_child and school.girl_support is True:
        score += weights.girl_child

    return score


def recommend_schools(
    schools: Iterable[Mapping[str, Any]],
    user: UserProfile,
    min_score: int = DEFAULT_MIN_SCORE,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> list[dict[str, Any]]:
    """Score every school, keep those at or above *min_score*, best first.

    Each result is the upstream record with an added ``score`` key.  Schools
    with equal scores keep their store order.
    """
    scored: list[dict[str, Any]] = []
    for data in schools:
        record = SchoolRecord.from_dict(data)
        score = calculate_score(record, user, weights)
        if score >= min_score:
            scored.append({**record.raw, "score": score})
    scored.sort(key=lambda s: s["score"], reverse=True)
    return scored


def parse_weights(weights_str: str | None) -> ScoreWeights:
    """Parse a ``key:value,key:value`` weight string into :class:`ScoreWeights`.

    Example input: ``"class:40,location:10,midday:0"``.  Unknown keys and
    malformed pairs are ignored, negative values clamp to zero, and anything
    not mentioned keeps its default.
    """
    if not weights_str:
        return DEFAULT_WEIGHTS
    overrides: dict[str, int] = {}
    for pair in weights_str.split(","):
        pair = pair.strip()
        if ":" not in pair:
            continue
        key, _, val = pair.partition(":")
        attr = WEIGHT_KEYS.get(key.strip())
        if attr is None:
            continue
        try:
            overrides[attr] = max(int(val.strip()), 0)
        except ValueError:
            continue
    if not overrides:
        return DEFAULT_WEIGHTS
    return ScoreWeights(**overrides)
