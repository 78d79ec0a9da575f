from dataclasses import dataclass
from enum import Enum
from typing import Any


class HaltReason(str, Enum):
    FINAL_RULE = "final_rule"
    NO_RULE = "no_rule"
    HALT_STATE = "halt_state"
    NO_TRANSITION = "no_transition"
    STEP_LIMIT = "step_limit"


@dataclass(frozen=True)
class StepRecord:
    """One trace entry. Appended by an engine, never mutated afterwards."""
    index: int
    snapshot: Any
    description: str
