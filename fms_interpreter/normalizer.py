# fms_interpreter/normalizer.py
"""
Coerces raw completion text into an InterpretationResult.

The model is asked for a fixed JSON structure but nothing forces it to
comply, so every field is checked on its own and replaced with an empty
default when it is missing or has the wrong type. Array elements are kept
as they are; only the top-level shape is enforced.
"""

import json
import logging
import math
from typing import Any, Dict

from .models import InterpretationResult, TrainingRecommendations

logger = logging.getLogger("fms_interpreter.normalizer")

FALLBACK_SUMMARY = "Unable to parse structured AI output."


def fallback_result() -> InterpretationResult:
    return InterpretationResult(summary=FALLBACK_SUMMARY)


def _list_or_empty(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _normalize_recommendations(value: Any) -> TrainingRecommendations:
    if not isinstance(value, dict):
        return TrainingRecommendations()
    return TrainingRecommendations(
        phase_1_focus=_list_or_empty(value.get("phase_1_focus")),
        phase_2_focus=_list_or_empty(value.get("phase_2_focus")),
        specific_interventions=_list_or_empty(value.get("specific_interventions")),
        refer_out_flags=_list_or_empty(value.get("refer_out_flags")),
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def strict_loads(text: str) -> Any:
    """json.loads limited to standard JSON: NaN, Infinity and overflowing numbers are errors."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def _parse(raw: str) -> Dict[str, Any]:
    parsed = strict_loads(raw)
    if not isinstance(parsed, dict):
        logger.warning("Model returned JSON %s instead of an object", type(parsed).__name__)
        return {}
    return parsed


def normalize_interpretation(raw: str) -> InterpretationResult:
    """Parse ``raw`` and return a complete, well-typed result. Never raises."""
    try:
        parsed = _parse(raw)
    except (TypeError, ValueError, RecursionError):
        logger.warning("Could not parse JSON. Raw: %s", str(raw)[:300])
        return fallback_result()

    summary = parsed.get("summary")
    return InterpretationResult(
        summary=summary if isinstance(summary, str) else "",
        movement_dysfunctions=_list_or_empty(parsed.get("movement_dysfunctions")),
        priority_issues=_list_or_empty(parsed.get("priority_issues")),
        training_recommendations=_normalize_recommendations(parsed.get("training_recommendations")),
    )
