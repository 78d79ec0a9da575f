from dataclasses import dataclass
from enum import Enum

from simulator.steps import HaltReason, StepRecord

BLANK = "B"
START_STATE = "q0"
HALT_STATES = ("qf", "qF", "halt")
DEFAULT_MAX_STEPS = 1000
LEADING_BLANKS = 1
TRAILING_BLANKS = 4


class Move(str, Enum):
    LEFT = "L"
    RIGHT = "R"
    NONE = "N"

    @classmethod
    def from_token(cls, token):
        # Anything that is not L or R leaves the head in place.
        try:
            return cls(token)
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class Transition:
    new_symbol: str
    move: Move
    new_state: str


@dataclass(frozen=True)
class TapeCell:
    symbol: str
    is_active: bool


@dataclass(frozen=True)
class TapeSnapshot:
    tape: tuple
    head_position: int
    state: str


def parse_rules(text):
    """Parse `state,symbol,new_symbol,move,new_state` lines into a transition table.

    Lines that do not have exactly five comma separated fields are skipped.
    A repeated (state, symbol) key keeps the last definition.
    """
    transitions = {}
    for line in text.split("\n"):
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split(",")]
        if len(parts) != 5:
            continue
        state, symbol, new_symbol, move, new_state = parts
        transitions[(state, symbol)] = Transition(new_symbol, Move.from_token(move), new_state)
    return transitions


def is_halt_state(state):
    return state in HALT_STATES


class TapeMachine:
    def __init__(self, max_steps=DEFAULT_MAX_STEPS):
        self.max_steps = max_steps
        self.transitions = {}
        self.tape = []
        self.head_position = 0
        self.current_state = START_STATE
        self.step_count = 0
        self.steps = []
        self.running = False
        self.finished = False
        self.halt_reason = None

    def initialize(self, rules_text, input_string):
        self.tape = [BLANK] * LEADING_BLANKS + list(input_string) + [BLANK] * TRAILING_BLANKS
        self.head_position = LEADING_BLANKS
        self.current_state = START_STATE
        self.step_count = 0
        self.steps = []
        self.running = False
        self.finished = False
        self.halt_reason = None

        self.parse_rules(rules_text)
        self._add_step("Initial tape")

    def parse_rules(self, rules_text):
        self.transitions = parse_rules(rules_text)
        return self.transitions

    def step(self):
        if self.finished or self.step_count >= self.max_steps:
            if not self.finished and self.halt_reason is None:
                self._add_step("Step limit reached")
                self.halt_reason = HaltReason.STEP_LIMIT
            self.running = False
            return False

        if is_halt_state(self.current_state):
            self._add_step(f"Halting state reached: {self.current_state}")
            return self._finish(HaltReason.HALT_STATE)

        symbol = self.read_symbol()
        transition = self.transitions.get((self.current_state, symbol))
        if transition is None:
            self._add_step(f"No transition for ({self.current_state}, {symbol})")
            return self._finish(HaltReason.NO_TRANSITION)

        self.tape[self.head_position] = transition.new_symbol

        if transition.move is Move.RIGHT:
            self.head_position += 1
            if self.head_position >= len(self.tape):
                self.tape.append(BLANK)
        elif transition.move is Move.LEFT:
            self.head_position -= 1
            if self.head_position < 0:
                self.tape.insert(0, BLANK)
                self.head_position = 0

        previous_state = self.current_state
        self.current_state = transition.new_state
        self.step_count += 1
        self._add_step(
            f"Applied transition: {previous_state},{symbol} -> "
            f"{transition.new_symbol},{transition.move.value},{transition.new_state}"
        )

        if is_halt_state(self.current_state):
            self._add_step(f"Halting state reached: {self.current_state}")
            return self._finish(HaltReason.HALT_STATE)
        return True

    def run(self):
        self.running = True
        while self.step():
            pass
        return self.step_count

    def read_symbol(self):
        if 0 <= self.head_position < len(self.tape):
            return self.tape[self.head_position]
        return BLANK

    def snapshot(self):
        return TapeSnapshot(tuple(self.tape), self.head_position, self.current_state)

    def get_tape_display(self, radius=5):
        """Window of cells around the head, clipped to the tape bounds."""
        start = max(0, self.head_position - radius)
        end = min(len(self.tape), self.head_position + radius + 1)
        return [
            TapeCell(self.tape[i], i == self.head_position)
            for i in range(start, end)
        ]

    def get_steps(self):
        return list(self.steps)

    def get_result(self):
        return "".join(self.tape).strip(BLANK)

    def _finish(self, reason):
        self.halt_reason = reason
        self.finished = True
        self.running = False
        return False

    def _add_step(self, description):
        self.steps.append(StepRecord(len(self.steps), self.snapshot(), description))
