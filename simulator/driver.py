import time

from simulator.examples import MARKOV, TURING
from simulator.markov_algorithm import RewriteEngine
from simulator.turing_machine import TapeMachine


def create_engine(kind, max_steps):
    if kind == MARKOV:
        return RewriteEngine(max_steps=max_steps)
    if kind == TURING:
        return TapeMachine(max_steps=max_steps)
    raise ValueError(f"Unknown machine kind: {kind}")


def drive(engine, interval=0.0, on_step=None, sleep=time.sleep):
    """
    Call engine.step() until it reports a halt.

    on_step(engine) runs after every call, including the halting one, and
    `interval` seconds are slept between calls. Returns the number of
    step() calls made.
    """
    # The tape machine leaves `running` to whoever drives it.
    if isinstance(engine, TapeMachine) and not engine.finished:
        engine.running = True

    calls = 0
    while True:
        more = engine.step()
        calls += 1
        if on_step is not None:
            on_step(engine)
        if not more:
            return calls
        if interval > 0:
            sleep(interval)
