import json
import os
from datetime import datetime
from pathlib import Path

# Working-directory config wins; the packaged copy is the read-only fallback.
LOCAL_CONFIG_PATH = Path("config/runtime_config.json")
PACKAGED_CONFIG_PATH = Path(__file__).parent / "runtime_config.json"

DEFAULT_CONFIG = {
    "max_steps": 1000,
    "step_interval": 0.5,
    "tape_window": 5,
    "log_runs": True,
    "output_directory": "logs/",
    "log_file_prefix": "machines_"
}

# Expected types for validation
CONFIG_SCHEMA = {
    "max_steps": int,
    "step_interval": (int, float),
    "tape_window": int,
    "log_runs": bool,
    "output_directory": str,
    "log_file_prefix": str
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        if not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    if config["max_steps"] < 0:
        raise ValueError("max_steps must not be negative.")
    if config["step_interval"] < 0:
        raise ValueError("step_interval must not be negative.")
    if config["tape_window"] < 0:
        raise ValueError("tape_window must not be negative.")

def resolve_config_path(path=None):
    if path:
        return Path(path)
    if LOCAL_CONFIG_PATH.exists():
        return LOCAL_CONFIG_PATH
    return PACKAGED_CONFIG_PATH

def load_config(path=None, verbose=False):
    path = resolve_config_path(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    validate_config(config)

    os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config

def save_config(config, path=LOCAL_CONFIG_PATH):
    validate_config(config)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
