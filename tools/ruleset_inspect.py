import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table

from simulator.examples import MARKOV, TURING, load_example
from simulator.markov_algorithm import analyze_rules, optimize_rules, parse_rules as parse_markov_rules
from simulator.turing_machine import parse_rules as parse_turing_rules

console = Console()

def load_rules_text(path):
    """Read a rule file as text."""
    rules_path = Path(path)
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules file {rules_path} not found.")
    with open(rules_path, "r", encoding="utf-8") as f:
        return f.read()

def transition_table(transitions):
    """Arrange a transition table as rows of states by columns of symbols, in order of first appearance."""
    states = []
    symbols = []
    for state, symbol in transitions:
        if state not in states:
            states.append(state)
        if symbol not in symbols:
            symbols.append(symbol)

    rows = []
    for state in states:
        row = []
        for symbol in symbols:
            transition = transitions.get((state, symbol))
            if transition is None:
                row.append("HALT")
            else:
                row.append(f"{transition.new_symbol}{transition.move.value}{transition.new_state}")
        rows.append(row)
    return states, symbols, rows

def latex_table(states, symbols, rows):
    lines = [r"\begin{array}{c|" + "c" * len(symbols) + "}"]
    lines.append("State/Symbol & " + " & ".join([f"\\text{{{s}}}" for s in symbols]) + r" \\ \hline")
    for state, row in zip(states, rows):
        lines.append(" & ".join([state] + row) + r" \\")
    lines.append(r"\end{array}")
    return "\n".join(lines)

def pretty_print_ruleset(rules_text):
    """Pretty print a transition table in a state x symbol grid, followed by its LaTeX form."""
    transitions = parse_turing_rules(rules_text)
    states, symbols, rows = transition_table(transitions)

    table = Table(title="Transition Table", show_header=True, header_style="bold magenta")
    table.add_column("State")
    for symbol in symbols:
        table.add_column(symbol, justify="center")
    for state, row in zip(states, rows):
        table.add_row(state, *row)
    console.print(table)

    # === LaTeX Table Output ===
    console.print("\n=== LaTeX Table ===")
    console.print(latex_table(states, symbols, rows), markup=False, highlight=False)

def pretty_print_markov(rules_text):
    """Print rewrite rules in priority order along with a short analysis."""
    rules = parse_markov_rules(rules_text)

    table = Table(title="Rewrite Rules", show_header=True, header_style="bold magenta")
    table.add_column("Priority", justify="center")
    table.add_column("Pattern")
    table.add_column("Replacement")
    table.add_column("Final", justify="center")
    for priority, rule in enumerate(rules, start=1):
        table.add_row(str(priority), repr(rule.pattern), repr(rule.replacement), "yes" if rule.is_final else "")
    console.print(table)

    analysis = analyze_rules(rules_text)
    console.print(f"Rule lines: {analysis.rule_count}", markup=False)
    console.print(f"Pattern complexity: {analysis.complexity}", markup=False)
    console.print(f"Recursive rules: {'yes' if analysis.has_recursion else 'no'}", markup=False)
    console.print(f"Final rules: {'yes' if analysis.has_termination else 'no'}", markup=False)

    optimized = optimize_rules(rules_text)
    if optimized != rules_text.strip("\n"):
        console.print("\n=== Optimized Rules ===")
        console.print(optimized, markup=False, highlight=False)

def inspect(kind, rules_text):
    if kind == MARKOV:
        pretty_print_markov(rules_text)
    elif kind == TURING:
        pretty_print_ruleset(rules_text)
    else:
        raise ValueError(f"Unknown machine kind: {kind}")

def main(argv=None):
    parser = argparse.ArgumentParser(description="Rule Set Inspector")
    parser.add_argument("--kind", required=True, choices=[MARKOV, TURING], help="Machine kind")
    parser.add_argument("--rules", help="Path to a rules file")
    parser.add_argument("--example", help="Name of a bundled example to inspect")
    args = parser.parse_args(argv)

    if args.rules:
        rules_text = load_rules_text(args.rules)
    elif args.example:
        _, rules_text = load_example(args.kind, args.example)
        console.print(f"[INFO] Example {args.example}", markup=False)
    else:
        raise ValueError("You must specify either --rules or --example.")

    inspect(args.kind, rules_text)

if __name__ == "__main__":
    main()
