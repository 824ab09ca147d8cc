"""Post-hoc classification and formatting of evaluation results.

The evaluator never fails on NaN or infinity; this layer is where such
results are flagged for the operator.
"""

from __future__ import annotations

import math
from enum import Enum

DEFAULT_LARGE_THRESHOLD = 1e12


class ResultStatus(str, Enum):
    ok = "ok"
    nan = "nan"
    infinite = "infinite"
    large = "large"


_WARNINGS = {
    ResultStatus.nan: "Answer is not a number!",
    ResultStatus.infinite: "Answer is infinity!",
    ResultStatus.large: "Answer is really large, possible singularity",
}


def classify_result(
    value: float, large_threshold: float = DEFAULT_LARGE_THRESHOLD
) -> ResultStatus:
    """Classify *value* as ok, NaN, infinite, or suspiciously large."""
    if math.isnan(value):
        return ResultStatus.nan
    if math.isinf(value):
        return ResultStatus.infinite
    if abs(value) > large_threshold:
        return ResultStatus.large
    return ResultStatus.ok


def result_warning(status: ResultStatus) -> str | None:
    """Operator-facing warning for *status*, or None when it is ok."""
    return _WARNINGS.get(status)


def format_result(value: float, precision: int = 10) -> str:
    """Fixed-point rendering, e.g. ``14.0`` -> ``"14.0000000000"``."""
    return f"{value:.{precision}f}"
