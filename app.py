# app.py

import argparse
import sys

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, IntPrompt, FloatPrompt, Confirm
from rich.table import Table
from rich.text import Text

from config.config_loader import LOCAL_CONFIG_PATH, load_config, resolve_config_path, save_config
from logger.logger import JSONLogger
from simulator.driver import create_engine, drive
from simulator.examples import MARKOV, TURING, list_examples, load_example
from simulator.steps import HaltReason
from tools.ruleset_inspect import inspect, load_rules_text

console = Console()

EMPTY_RESULT = "(empty string)"

# === Utilities ===
def load_runtime_config(path=None):
    config_path = resolve_config_path(path)
    try:
        return load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error: {escape(str(config_path))} not found![/red]")
        sys.exit(1)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error: invalid configuration in {escape(str(config_path))}: {escape(str(e))}[/red]")
        sys.exit(1)

def save_runtime_config(config, path=LOCAL_CONFIG_PATH):
    save_config(config, path)
    console.print("[green]Configuration updated successfully.[/green]")

def prepare_run(kind, example=None, rules_path=None, input_string=None):
    """Resolve the rule text and input for a run, refusing empty values."""
    rules_text = None
    if example:
        example_input, rules_text = load_example(kind, example)
        if input_string is None:
            input_string = example_input
    elif rules_path:
        rules_text = load_rules_text(rules_path)

    if not input_string or not input_string.strip():
        raise ValueError("Please enter an input string.")
    if not rules_text or not rules_text.strip():
        raise ValueError("Please enter the rules.")
    return rules_text.strip(), input_string.strip()

# === Rendering ===
def display_markov_step(record):
    console.print(f"[bold]Step {record.index}:[/bold] \"{escape(record.snapshot)}\"")
    console.print(f"  [dim]{escape(record.description)}[/dim]")

def display_markov_result(engine):
    status = "Stopped at step limit" if engine.halt_reason is HaltReason.STEP_LIMIT else "Completed"
    table = Table(title="Result", show_header=False)
    table.add_row("Result", escape(engine.get_result() or EMPTY_RESULT))
    table.add_row("Total steps", str(engine.step_count))
    table.add_row("Status", status)
    console.print(table)

def render_tape(engine, window=5):
    text = Text()
    for cell in engine.get_tape_display(window):
        if cell.is_active:
            text.append(f"[{cell.symbol}]", style="bold reverse")
        else:
            text.append(f" {cell.symbol} ")
    return text

def display_turing_machine(engine, window=5):
    console.print(render_tape(engine, window))
    console.print(f"State: {escape(engine.current_state)}  Steps: {engine.step_count}")

def display_turing_result(engine):
    table = Table(title="Result", show_header=False)
    table.add_row("Result", escape(engine.get_result() or EMPTY_RESULT))
    table.add_row("Final state", escape(engine.current_state))
    table.add_row("Steps taken", str(engine.step_count))
    console.print(table)

# === Running ===
def run_machine(kind, rules_text, input_string, config, step_mode=False, interval=None):
    engine = create_engine(kind, config["max_steps"])
    engine.initialize(rules_text, input_string)
    window = config["tape_window"]
    shown = 0

    def on_step(current):
        nonlocal shown
        if kind == MARKOV:
            for record in current.steps[shown:]:
                display_markov_step(record)
            shown = len(current.steps)
        else:
            display_turing_machine(current, window)

    on_step(engine)

    if step_mode:
        if kind == TURING:
            engine.running = True
        while engine.halt_reason is None:
            console.input("[dim]Press Enter for the next step...[/dim]")
            engine.step()
            on_step(engine)
    else:
        if interval is None:
            interval = config["step_interval"]
        drive(engine, interval=interval, on_step=on_step)

    if kind == MARKOV:
        display_markov_result(engine)
    else:
        display_turing_result(engine)

    if config["log_runs"]:
        JSONLogger(config["output_directory"], config["log_file_prefix"]).log_run(kind, engine)
    return engine

def show_examples(kind=None):
    kinds = [kind] if kind else [MARKOV, TURING]
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Kind")
    table.add_column("Example")
    table.add_column("Input")
    for k in kinds:
        for name in list_examples(k):
            input_string, _ = load_example(k, name)
            table.add_row(k, name, escape(input_string))
    console.print(table)

# === Interactive Mode ===
def show_main_menu():
    console.print("\n[bold cyan]Markov Algorithm & Turing Machine Simulator[/bold cyan]")
    console.print("[1] Run Markov Algorithm")
    console.print("[2] Run Turing Machine")
    console.print("[3] List Examples")
    console.print("[4] Inspect Rule Set")
    console.print("[5] Edit Config")
    console.print("[6] Exit")

def ask_run_source(kind):
    """Ask for an example name or a rules file, plus the input string."""
    example = Prompt.ask("Example name (leave empty to use a rules file)", default="")
    if example:
        input_string, _ = load_example(kind, example)
        input_string = Prompt.ask("Input string", default=input_string)
        return prepare_run(kind, example=example, input_string=input_string)
    rules_path = Prompt.ask("Path to rules file")
    input_string = Prompt.ask("Input string")
    return prepare_run(kind, rules_path=rules_path, input_string=input_string)

def handle_run(kind, config):
    title = "Markov Algorithm" if kind == MARKOV else "Turing Machine"
    console.print(f"\n[bold]{title}[/bold]")
    try:
        rules_text, input_string = ask_run_source(kind)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return
    step_mode = Confirm.ask("Step through one transition at a time?", default=False)
    run_machine(kind, rules_text, input_string, config, step_mode=step_mode)

def handle_inspect():
    console.print("\n[bold]Inspect Rule Set[/bold]")
    kind = Prompt.ask("Machine kind", choices=[MARKOV, TURING], default=MARKOV)
    source = Prompt.ask("Example name or path to rules file")
    try:
        if source in list_examples(kind):
            _, rules_text = load_example(kind, source)
        else:
            rules_text = load_rules_text(source)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return
    inspect(kind, rules_text)

def handle_edit_config(config, path=LOCAL_CONFIG_PATH):
    """Prompt for new settings and save them; returns the config now in effect."""
    console.print("\n[bold]Edit Configuration[/bold]")

    max_steps = IntPrompt.ask("Max Steps", default=config.get("max_steps", 1000))
    step_interval = FloatPrompt.ask("Seconds between animated steps", default=config.get("step_interval", 0.5))
    tape_window = IntPrompt.ask("Tape cells shown on each side of the head", default=config.get("tape_window", 5))
    log_runs = Confirm.ask("Log finished runs?", default=config.get("log_runs", True))

    updated = dict(config)
    updated.update({
        "max_steps": max_steps,
        "step_interval": step_interval,
        "tape_window": tape_window,
        "log_runs": log_runs
    })

    try:
        save_runtime_config(updated, path)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Configuration not saved: {escape(str(e))}[/red]")
        return config
    return updated

def interactive_main(config_path=None):
    config = load_runtime_config(config_path)
    save_path = config_path or LOCAL_CONFIG_PATH

    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4", "5", "6"], default="6")

        if choice == "1":
            handle_run(MARKOV, config)
        elif choice == "2":
            handle_run(TURING, config)
        elif choice == "3":
            show_examples()
        elif choice == "4":
            handle_inspect()
        elif choice == "5":
            config = handle_edit_config(config, save_path)
        elif choice == "6":
            console.print("[bold green]Goodbye![/bold green]")
            break

# === CLI Mode for Automation ===
def cli_main(args):
    config = load_runtime_config(args.config)
    if args.max_steps is not None:
        config["max_steps"] = args.max_steps

    kind = MARKOV if args.markov else TURING

    if args.list_examples:
        show_examples(kind)
        return None

    rules_text, input_string = prepare_run(kind, example=args.example, rules_path=args.rules, input_string=args.input)
    return run_machine(kind, rules_text, input_string, config, step_mode=args.step, interval=args.interval)

def build_parser():
    parser = argparse.ArgumentParser(description="Markov Algorithm & Turing Machine Simulator")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--markov", action="store_true", help="Run the Markov (string rewriting) engine")
    group.add_argument("--turing", action="store_true", help="Run the Turing (tape) machine")
    parser.add_argument("--example", help="Load a bundled example by name")
    parser.add_argument("--rules", help="Path to a rules file")
    parser.add_argument("--input", help="Input string (overrides the example's input)")
    parser.add_argument("--step", action="store_true", help="Wait for Enter between steps")
    parser.add_argument("--interval", type=float, help="Seconds between animated steps")
    parser.add_argument("--max-steps", type=int, help="Step limit for this run")
    parser.add_argument("--list-examples", action="store_true", help="List bundled examples")
    parser.add_argument("--config", help="Path to runtime config JSON (default: config/runtime_config.json, then the bundled copy)")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.list_examples and not (args.markov or args.turing):
        show_examples()
        return 0

    if not (args.markov or args.turing):
        interactive_main(args.config)
        return 0

    try:
        cli_main(args)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
