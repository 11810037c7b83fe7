"""Sub-score normalisation and overall score aggregation.

Normalisation policy, applied everywhere a ScoreSet is built:
- missing / None / non-numeric values count as 0
- numeric values are clamped to [0, 100]
- fractional values are rounded half-up to an integer

The overall score is the arithmetic mean of the five normalised sub-scores,
rounded half-up.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from recall.core.scoring.types import ScoreSet

SUB_SCORE_MIN = 0
SUB_SCORE_MAX = 100


def round_half_up(value: float | int | Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_sub_score(value: Any) -> int:
    """Coerce a raw sub-score into an integer in [0, 100]."""
    if value is None or isinstance(value, bool):
        return SUB_SCORE_MIN

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return SUB_SCORE_MIN

    if not isinstance(value, (int, float, Decimal)):
        return SUB_SCORE_MIN

    if isinstance(value, float) and not math.isfinite(value):
        return SUB_SCORE_MIN

    clamped = min(max(value, SUB_SCORE_MIN), SUB_SCORE_MAX)
    return round_half_up(clamped)


def average_sub_scores(values: Iterable[Any]) -> int:
    """Mean of the normalised values, rounded half-up. Empty input yields 0."""
    normalized = [normalize_sub_score(v) for v in values]
    if not normalized:
        return 0
    mean = Decimal(sum(normalized)) / Decimal(len(normalized))
    return round_half_up(mean)


def overall_score(score_set: "ScoreSet") -> int:
    """
    Convert a ScoreSet into its overall (Recall) score.

    Total over its input domain: an all-zero set yields 0.
    """
    return average_sub_scores(score_set.as_tuple())
