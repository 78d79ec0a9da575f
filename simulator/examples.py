"""Canned rule sets for the two engines, keyed by kind and name."""

MARKOV = "markov"
TURING = "turing"

MARKOV_EXAMPLES = {
    # Doubles every symbol; never terminates on its own.
    "doubling": ("abc", "a -> aa\nb -> bb\nc -> cc"),
    "reverse": ("abc", "ab -> ba\nbc -> cb\nac -> ca"),
    "remove": ("aabaca", "a -> "),
    "replace": ("ababab", "ab -> ba"),
    "parentheses": ("((()))", "() -> "),
    "binary": ("11111", "11 -> 1\n1 -> .1"),
}

TURING_EXAMPLES = {
    "increment": ("111", "q0,1,1,R,q0\nq0,B,1,N,qf"),
    "decrement": ("111", "q0,1,1,R,q0\nq0,B,B,L,q1\nq1,1,B,N,qf"),
    "copy": (
        "101",
        "\n".join([
            "q0,0,X,R,q1",
            "q0,1,Y,R,q2",
            "q0,B,B,N,qf",
            "q1,0,0,R,q1",
            "q1,1,1,R,q1",
            "q1,B,0,L,q3",
            "q2,0,0,R,q2",
            "q2,1,1,R,q2",
            "q2,B,1,L,q3",
            "q3,0,0,L,q3",
            "q3,1,1,L,q3",
            "q3,X,0,R,q0",
            "q3,Y,1,R,q0",
        ]),
    ),
    "binary_increment": (
        "101",
        "\n".join([
            "q0,0,0,R,q0",
            "q0,1,1,R,q0",
            "q0,B,B,L,q1",
            "q1,0,1,N,qf",
            "q1,1,0,L,q1",
            "q1,B,1,N,qf",
        ]),
    ),
}

EXAMPLES = {
    MARKOV: MARKOV_EXAMPLES,
    TURING: TURING_EXAMPLES,
}


def list_examples(kind):
    if kind not in EXAMPLES:
        raise ValueError(f"Unknown machine kind: {kind}")
    return sorted(EXAMPLES[kind])


def load_example(kind, name):
    """Return the (input, rules_text) pair of a named example."""
    if kind not in EXAMPLES:
        raise ValueError(f"Unknown machine kind: {kind}")
    examples = EXAMPLES[kind]
    if name not in examples:
        raise ValueError(f"Example '{name}' not found for {kind}. Available: {', '.join(sorted(examples))}")
    return examples[name]
