from dataclasses import dataclass

from simulator.steps import HaltReason, StepRecord

DEFAULT_MAX_STEPS = 1000
SEPARATORS = ("->", "→")


@dataclass(frozen=True)
class Rule:
    pattern: str
    replacement: str
    is_final: bool
    source_text: str


@dataclass(frozen=True)
class RuleAnalysis:
    complexity: int
    rule_count: int
    has_recursion: bool
    has_termination: bool


def _non_blank_lines(text):
    return [line for line in text.split("\n") if line.strip()]


def _split_rule(line):
    """Return the trimmed (pattern, replacement) of a line, or None if it is not a rule."""
    for separator in SEPARATORS:
        if separator in line:
            parts = [part.strip() for part in line.split(separator)]
            if len(parts) != 2:
                return None
            return parts[0], parts[1]
    return None


def parse_rules(text):
    """Parse `pattern -> replacement` lines into an ordered list of rules.

    Lines without a separator, or with more than one, are dropped. A leading
    "." on the pattern or a trailing "." on the replacement (other than a bare
    ".") marks the rule final and is stripped.
    """
    rules = []
    for line in _non_blank_lines(text):
        split = _split_rule(line)
        if split is None:
            continue
        pattern, replacement = split
        is_final = False

        if pattern.startswith("."):
            is_final = True
            pattern = pattern[1:]

        if replacement.endswith(".") and replacement != ".":
            is_final = True
            replacement = replacement[:-1]

        rules.append(Rule(pattern, replacement, is_final, line))
    return rules


def optimize_rules(text):
    """Drop blank and duplicate lines, keeping the first occurrence of each."""
    optimized = []
    seen = set()
    for line in _non_blank_lines(text):
        if line not in seen:
            seen.add(line)
            optimized.append(line)
    return "\n".join(optimized)


def analyze_rules(text):
    lines = _non_blank_lines(text)
    complexity = 0
    has_recursion = False
    has_termination = False

    for line in lines:
        split = _split_rule(line)
        if split is None:
            continue
        pattern, replacement = split
        complexity += len(pattern)
        if pattern in replacement:
            has_recursion = True
        if pattern.startswith(".") or replacement.endswith("."):
            has_termination = True

    return RuleAnalysis(
        complexity=complexity,
        rule_count=len(lines),
        has_recursion=has_recursion,
        has_termination=has_termination,
    )


class RewriteEngine:
    """Markov normal algorithm: at most one rule application per step.

    Rules are tried in the order they were written; the first one whose
    pattern occurs in the working string rewrites its leftmost occurrence.
    """

    def __init__(self, max_steps=DEFAULT_MAX_STEPS):
        self.max_steps = max_steps
        self.rules = []
        self.working_string = ""
        self.steps = []
        self.step_count = 0
        self.running = False
        self.halt_reason = None

    def initialize(self, rules_text, input_string):
        self.working_string = input_string
        self.step_count = 0
        self.steps = []
        self.halt_reason = None
        self.running = True

        self.parse_rules(rules_text)
        self._add_step("Initial string")

    def parse_rules(self, rules_text):
        self.rules = parse_rules(rules_text)
        return self.rules

    def step(self):
        if not self.running:
            return False

        if self.step_count >= self.max_steps:
            self._add_step("Step limit reached")
            return self._halt(HaltReason.STEP_LIMIT)

        for rule in self.rules:
            index = self.working_string.find(rule.pattern)
            if index == -1:
                continue

            self.working_string = (
                self.working_string[:index]
                + rule.replacement
                + self.working_string[index + len(rule.pattern):]
            )
            self.step_count += 1
            self._add_step(f"Applied rule: {rule.source_text}")

            if rule.is_final:
                self._add_step("Final rule applied")
                return self._halt(HaltReason.FINAL_RULE)
            return True

        self._add_step("No applicable rules")
        return self._halt(HaltReason.NO_RULE)

    def run(self):
        while self.step():
            pass

    def get_current_string(self):
        return self.working_string

    def get_steps(self):
        return list(self.steps)

    def get_result(self):
        return self.working_string

    def _halt(self, reason):
        self.halt_reason = reason
        self.running = False
        return False

    def _add_step(self, description):
        self.steps.append(StepRecord(len(self.steps), self.working_string, description))
