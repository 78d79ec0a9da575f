import json

import pytest

from config.config_loader import (
    DEFAULT_CONFIG,
    LOCAL_CONFIG_PATH,
    PACKAGED_CONFIG_PATH,
    load_config,
    resolve_config_path,
    save_config,
    validate_config,
)


def write_config(tmp_path, **overrides):
    data = {"output_directory": str(tmp_path / "logs")}
    data.update(overrides)
    path = tmp_path / "runtime_config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_fill_missing_keys(tmp_path):
    config = load_config(write_config(tmp_path))

    assert config["max_steps"] == 1000
    assert config["step_interval"] == 0.5
    assert config["tape_window"] == 5


def test_overrides_win_over_defaults(tmp_path):
    config = load_config(write_config(tmp_path, max_steps=25))

    assert config["max_steps"] == 25


def test_output_directory_is_created(tmp_path):
    load_config(write_config(tmp_path))

    assert (tmp_path / "logs").is_dir()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.json")


def test_wrong_type_raises(tmp_path):
    with pytest.raises(TypeError, match="max_steps"):
        load_config(write_config(tmp_path, max_steps="many"))


def test_missing_key_raises():
    config = DEFAULT_CONFIG.copy()
    del config["tape_window"]

    with pytest.raises(ValueError, match="tape_window"):
        validate_config(config)


def test_negative_step_limit_raises():
    config = DEFAULT_CONFIG.copy()
    config["max_steps"] = -1

    with pytest.raises(ValueError):
        validate_config(config)


def test_integer_interval_is_accepted():
    config = DEFAULT_CONFIG.copy()
    config["step_interval"] = 1

    validate_config(config)


def test_save_then_load(tmp_path):
    path = tmp_path / "saved.json"
    config = DEFAULT_CONFIG.copy()
    config.update({"max_steps": 42, "output_directory": str(tmp_path / "out")})

    save_config(config, path)

    assert load_config(path)["max_steps"] == 42


def test_bundled_config_is_valid():
    with open(PACKAGED_CONFIG_PATH, "r", encoding="utf-8") as f:
        bundled = json.load(f)

    validate_config(bundled)


def test_verbose_prints_summary(tmp_path, capsys):
    load_config(write_config(tmp_path), verbose=True)

    assert "max_steps: 1000" in capsys.readouterr().out


def test_resolve_falls_back_to_packaged_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert resolve_config_path() == PACKAGED_CONFIG_PATH


def test_resolve_prefers_working_directory_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "runtime_config.json").write_text("{}", encoding="utf-8")

    assert resolve_config_path() == LOCAL_CONFIG_PATH


def test_resolve_explicit_path_wins(tmp_path):
    assert resolve_config_path(str(tmp_path / "x.json")) == tmp_path / "x.json"


def test_save_defaults_to_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = DEFAULT_CONFIG.copy()
    config["output_directory"] = str(tmp_path / "logs")

    save_config(config)

    assert (tmp_path / "config" / "runtime_config.json").exists()
    assert load_config()["output_directory"] == str(tmp_path / "logs")


def test_save_rejects_invalid_config_without_writing(tmp_path):
    path = tmp_path / "bad.json"
    config = DEFAULT_CONFIG.copy()
    config["tape_window"] = -2

    with pytest.raises(ValueError):
        save_config(config, path)
    assert not path.exists()
