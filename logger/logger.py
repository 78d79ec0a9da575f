import json
import os
from datetime import datetime, timezone

from simulator.steps import HaltReason
from simulator.turing_machine import TapeMachine, TapeSnapshot


def run_summary(kind, engine):
    """Build a JSON-serialisable summary of a finished (or running) engine."""
    entry = {
        "kind": kind,
        "steps_taken": engine.step_count,
        "max_steps": engine.max_steps,
        "halt_reason": engine.halt_reason.value if engine.halt_reason else None,
        "halted": engine.halt_reason not in (None, HaltReason.STEP_LIMIT),
        "result": engine.get_result(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    if isinstance(engine, TapeMachine):
        entry["final_state"] = engine.current_state
        entry["head_position"] = engine.head_position
    return entry


def trace_entries(engine):
    entries = []
    for record in engine.steps:
        snapshot = record.snapshot
        if isinstance(snapshot, TapeSnapshot):
            snapshot = {
                "tape": "".join(snapshot.tape),
                "head_position": snapshot.head_position,
                "state": snapshot.state
            }
        entries.append({
            "index": record.index,
            "snapshot": snapshot,
            "description": record.description
        })
    return entries


class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="machines_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_summary(self, entries: list):
        """Log run summaries (halt reason, steps, result)."""
        filename = f"{self.log_file_prefix}summary_{self.today}.jsonl"
        self._log_to_file(filename, entries)

    def log_halting(self, entries: list):
        """Log runs that stopped on their own."""
        filename = f"halting_{self.today}.jsonl"
        self._log_to_file(filename, entries)

    def log_non_halting(self, entries: list):
        """Log runs that were cut off by the step limit."""
        filename = f"non_halting_{self.today}.jsonl"
        self._log_to_file(filename, entries)

    def log_run(self, kind, engine, include_trace=False):
        entry = run_summary(kind, engine)
        if include_trace:
            entry["trace"] = trace_entries(engine)
        self.log(entry)
        if entry["halted"]:
            self.log_halting([entry])
        else:
            self.log_non_halting([entry])
        return entry
