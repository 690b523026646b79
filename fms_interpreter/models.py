# fms_interpreter/models.py
import math
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_REPORT_KEYS = ("tests", "derived")


class TrainingRecommendations(BaseModel):
    model_config = ConfigDict(extra="forbid")

    phase_1_focus: List[Any] = Field(default_factory=list)
    phase_2_focus: List[Any] = Field(default_factory=list)
    specific_interventions: List[Any] = Field(default_factory=list)  # {goal, strategies[]}
    refer_out_flags: List[Any] = Field(default_factory=list)


class InterpretationResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    summary: str = ""
    movement_dysfunctions: List[Any] = Field(default_factory=list)  # {pattern, findings[], implications[]}
    priority_issues: List[Any] = Field(default_factory=list)
    training_recommendations: TrainingRecommendations = Field(default_factory=TrainingRecommendations)


class ErrorResponse(BaseModel):
    error: str


def _is_truthy(value: Any) -> bool:
    """JSON truthiness: null, false, 0, NaN and "" are falsy, any object or array is not."""
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    return True


def is_valid_report(body: Any) -> bool:
    """Check that a parsed request body looks like an FMS report."""
    if not isinstance(body, dict):
        return False
    return all(_is_truthy(body.get(key)) for key in REQUIRED_REPORT_KEYS)
