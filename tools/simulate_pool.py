# tools/simulate_pool.py

import argparse
import json
import os
from datetime import datetime, timezone
from pathlib import Path

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from logger.logger import JSONLogger, run_summary
from simulator.driver import create_engine, drive
from simulator.examples import load_example
from simulator.steps import HaltReason

# === Promotion for Long-Runners ===
def promote_long_runner(job_id, pool_file="pools/long_runners.txt"):
    Path(pool_file).parent.mkdir(parents=True, exist_ok=True)
    with open(pool_file, "a", encoding="utf-8") as f:
        f.write(job_id + "\n")

# === Utility Loaders ===
def load_job_pool(job_pool_file):
    """Load a pool of jobs, one JSON object per line."""
    if not Path(job_pool_file).exists():
        raise FileNotFoundError(f"Job pool {job_pool_file} not found.")
    jobs = []
    with open(job_pool_file, "r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                job = json.loads(line)
                if not isinstance(job, dict):
                    raise ValueError(f"Job pool {job_pool_file} holds a non-object line: {line.strip()}")
                jobs.append(job)
    return jobs

def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []

def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)

def resolve_job(job):
    """Return (kind, rules_text, input_string) for a pool entry."""
    if "job_id" not in job or "kind" not in job:
        raise ValueError(f"Job entry is missing 'job_id' or 'kind': {job}")
    for field in ("job_id", "kind", "example", "rules", "input"):
        if field in job and not isinstance(job[field], str):
            raise ValueError(f"Job field '{field}' must be a string, got {type(job[field]).__name__}.")

    kind = job["kind"]
    if "example" in job:
        input_string, rules_text = load_example(kind, job["example"])
        input_string = job.get("input", input_string)
    elif "rules" in job and "input" in job:
        rules_text = job["rules"]
        input_string = job["input"]
    else:
        raise ValueError(f"Job {job['job_id']} needs either 'example' or both 'rules' and 'input'.")
    return kind, rules_text, input_string

def simulate_job(job, max_steps=1000):
    kind, rules_text, input_string = resolve_job(job)
    engine = create_engine(kind, max_steps)
    engine.initialize(rules_text, input_string)
    drive(engine)

    entry = run_summary(kind, engine)
    entry["job_id"] = job["job_id"]
    return entry

def console_message(msg):
    print(f"[{Path(os.getcwd()).name}] {msg}")

# === Main Simulation Runner ===
def simulate_pool(job_pool_file, output_name="results", results_root="results", batch_size=256,
                  max_steps=1000, long_runner_file="pools/long_runners.txt"):
    pool_name = Path(job_pool_file).stem
    results_folder = Path(results_root) / pool_name
    results_folder.mkdir(parents=True, exist_ok=True)
    checkpoint_file = results_folder / f"{output_name}_checkpoint.json"
    results_logger = JSONLogger(str(results_folder), f"{output_name}_")

    all_jobs = load_job_pool(job_pool_file)
    completed = load_checkpoint(checkpoint_file)

    pending_jobs = [job for job in all_jobs if job.get("job_id") not in completed]
    console_message(f"Loaded {len(all_jobs):,} total jobs. {len(pending_jobs):,} pending.")

    halted = 0
    step_limited = 0
    failed = 0

    for batch_start in range(0, len(pending_jobs), batch_size):
        batch = pending_jobs[batch_start:batch_start + batch_size]
        console_message(f"Processing batch {batch_start // batch_size + 1} with {len(batch):,} jobs...")

        with Progress(
                SpinnerColumn(),
                BarColumn(),
                "[progress.percentage]{task.percentage:>3.0f}%",
                TextColumn("{task.completed}/{task.total} Jobs"),
                TimeElapsedColumn()
        ) as progress:

            task = progress.add_task("[cyan]Simulating...", total=len(batch))

            batch_results = []

            for job in batch:
                try:
                    entry = simulate_job(job, max_steps=max_steps)
                    batch_results.append(entry)
                    completed.append(entry["job_id"])

                    if entry["halt_reason"] == HaltReason.STEP_LIMIT.value:
                        step_limited += 1
                        promote_long_runner(entry["job_id"], long_runner_file)
                    else:
                        halted += 1

                except (ValueError, KeyError) as e:
                    failed += 1
                    console_message(f"[WARNING] Failed to simulate {job.get('job_id')}: {e}")

                progress.update(task, advance=1)

            # === BULK WRITE once per batch ===
            results_logger.log_batch(batch_results)

            save_checkpoint(completed, checkpoint_file)
            console_message("[INFO] Batch completed. Checkpoint saved.")

    results_logger.log_summary([{
        "pool": pool_name,
        "total_jobs": len(all_jobs),
        "simulated": halted + step_limited,
        "halted": halted,
        "step_limited": step_limited,
        "failed": failed,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }])

    console_message("[SUCCESS] All jobs simulated. Results saved.")
    return Path(results_logger.current_log)


# === CLI ===
def main(argv=None):
    parser = argparse.ArgumentParser(description="Simulate a pool of rewrite / tape machine jobs with checkpointing.")
    parser.add_argument("--pool", required=True, help="Path to job pool file (one JSON object per line)")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--results_root", default="results", help="Folder that receives per-pool results")
    parser.add_argument("--batch_size", type=int, default=256, help="Batch size per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=1000, help="Maximum steps before a job is cut off")
    args = parser.parse_args(argv)

    simulate_pool(
        args.pool,
        args.output,
        results_root=args.results_root,
        batch_size=args.batch_size,
        max_steps=args.max_steps
    )

if __name__ == "__main__":
    main()
