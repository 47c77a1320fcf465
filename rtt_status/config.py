"""Configuration constants, credentials loading and the runtime Config dataclass."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

# API constants
API_BASE = "https://api.rtt.io/api/v1/json"
HTTP_TIMEOUT = 10.0  # seconds
REFRESH_INTERVAL = 30  # seconds
TICK_RATE = 100  # milliseconds

CONFIG_PATH = Path("~/.config/rtt.yaml").expanduser()
DEBUG_DIR = Path("~/.rtttui/debug").expanduser()

# Width kept free at the end of a status line for the two time columns
RESERVED_TRAILING_WIDTH = 12

USERNAME_ENV = "RTT_USERNAME"
PASSWORD_ENV = "RTT_PASSWORD"


class ConfigError(Exception):
    """Raised when credentials cannot be loaded."""


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


@dataclass
class Config:
    """Runtime configuration built from CLI arguments."""
    departs: str
    source: str
    dest: str
    tick_rate: int = TICK_RATE
    refresh_interval: int = REFRESH_INTERVAL
    config_path: Path = CONFIG_PATH
    debug: bool = False
    exit_on_error: bool = False
    show_intermediary: bool = True


def load_credentials(path: Path = CONFIG_PATH) -> Credentials:
    """
    Load the Realtime Trains username and password.

    RTT_USERNAME and RTT_PASSWORD take precedence when both are set; otherwise
    the YAML file at `path` must be a mapping with `username` and `password`.
    """
    env_user = os.getenv(USERNAME_ENV)
    env_pass = os.getenv(PASSWORD_ENV)
    if env_user and env_pass:
        return Credentials(env_user, env_pass)

    path = Path(path).expanduser()
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(
            f"Credentials file {path} not found. Create it with 'username' and "
            f"'password' keys or set {USERNAME_ENV}/{PASSWORD_ENV}."
        ) from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping with 'username' and 'password'")

    missing = [key for key in ("username", "password") if not data.get(key)]
    if missing:
        raise ConfigError(f"{path} is missing: {', '.join(missing)}")

    return Credentials(str(data["username"]), str(data["password"]))
