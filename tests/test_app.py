import json

import pytest

import app


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "runtime_config.json"
    path.write_text(json.dumps({
        "max_steps": 100,
        "step_interval": 0,
        "log_runs": True,
        "output_directory": str(tmp_path / "logs"),
        "log_file_prefix": "runs_",
    }), encoding="utf-8")
    return str(path)


def test_markov_example_run(config_path, capsys):
    assert app.main(["--markov", "--example", "remove", "--config", config_path]) == 0

    out = capsys.readouterr().out
    assert "Initial string" in out
    assert "bc" in out
    assert "Completed" in out


def test_step_limit_status(config_path, capsys):
    assert app.main(["--markov", "--example", "doubling", "--max-steps", "3", "--config", config_path]) == 0

    assert "Stopped at step limit" in capsys.readouterr().out


def test_turing_rules_file_run_is_logged(config_path, tmp_path, capsys):
    rules = tmp_path / "inc.txt"
    rules.write_text("q0,1,1,R,q0\nq0,B,1,N,qf\n", encoding="utf-8")

    engine = app.cli_main(app.build_parser().parse_args(
        ["--turing", "--rules", str(rules), "--input", "11", "--config", config_path]
    ))

    assert engine.get_result() == "111"
    assert "qf" in capsys.readouterr().out
    halting = list((tmp_path / "logs").glob("halting_*.jsonl"))
    assert len(halting) == 1
    assert json.loads(halting[0].read_text(encoding="utf-8").splitlines()[0])["result"] == "111"


def test_step_mode_waits_for_enter_between_steps(config_path, monkeypatch):
    prompts = []
    monkeypatch.setattr(app.console, "input", lambda prompt="", **kwargs: prompts.append(prompt) or "")

    engine = app.cli_main(app.build_parser().parse_args(
        ["--turing", "--example", "increment", "--step", "--config", config_path]
    ))

    assert engine.finished
    assert len(prompts) == 4


def test_empty_input_is_rejected(config_path, tmp_path, capsys):
    rules = tmp_path / "rules.txt"
    rules.write_text("a -> b", encoding="utf-8")

    assert app.main(["--markov", "--rules", str(rules), "--input", "  ", "--config", config_path]) == 1
    assert "Please enter an input string" in capsys.readouterr().out


def test_empty_rules_are_rejected(config_path, tmp_path, capsys):
    rules = tmp_path / "rules.txt"
    rules.write_text("\n\n", encoding="utf-8")

    assert app.main(["--markov", "--rules", str(rules), "--input", "abc", "--config", config_path]) == 1
    assert "Please enter the rules" in capsys.readouterr().out


def test_unknown_example_is_reported(config_path, capsys):
    assert app.main(["--turing", "--example", "nope", "--config", config_path]) == 1
    assert "not found" in capsys.readouterr().out


def test_list_examples(capsys):
    assert app.main(["--list-examples"]) == 0

    out = capsys.readouterr().out
    assert "parentheses" in out
    assert "binary_increment" in out


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        app.main(["--markov", "--example", "remove", "--config", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1


def test_render_tape_marks_the_head():
    engine = app.create_engine("turing", 10)
    engine.initialize("", "ab")

    assert app.render_tape(engine, 5).plain == " B [a] b  B  B  B  B "


def answer_menu(monkeypatch, choices, int_answer):
    picks = iter(choices)
    monkeypatch.setattr(app.Prompt, "ask", lambda *args, **kwargs: next(picks))
    monkeypatch.setattr(app.IntPrompt, "ask", lambda *args, **kwargs: int_answer)
    monkeypatch.setattr(app.FloatPrompt, "ask", lambda *args, **kwargs: 0.25)
    monkeypatch.setattr(app.Confirm, "ask", lambda *args, **kwargs: False)


def test_edit_config_rejects_negative_values_and_keeps_menu_alive(config_path, monkeypatch, capsys):
    answer_menu(monkeypatch, ["5", "6"], -1)

    assert app.main(["--config", config_path]) == 0

    out = capsys.readouterr().out
    assert "max_steps must not be negative" in out
    assert "Goodbye" in out
    with open(config_path, "r", encoding="utf-8") as f:
        assert json.load(f)["max_steps"] == 100


def test_edit_config_returns_previous_config_on_rejection(config_path, monkeypatch):
    answer_menu(monkeypatch, [], -1)
    config = app.load_runtime_config(config_path)

    assert app.handle_edit_config(config, config_path) is config
    assert config["max_steps"] == 100


def test_edit_config_saves_valid_values(config_path, monkeypatch):
    answer_menu(monkeypatch, ["5", "6"], 7)

    assert app.main(["--config", config_path]) == 0

    with open(config_path, "r", encoding="utf-8") as f:
        saved = json.load(f)
    assert saved["max_steps"] == 7
    assert saved["tape_window"] == 7
    assert saved["step_interval"] == 0.25
    assert saved["log_runs"] is False


def test_config_with_wrong_type_exits_with_message(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"max_steps": "many", "output_directory": str(tmp_path / "logs")}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        app.main(["--markov", "--example", "remove", "--config", str(path)])

    assert excinfo.value.code == 1
    assert "invalid configuration" in capsys.readouterr().out
