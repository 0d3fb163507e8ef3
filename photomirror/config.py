import argparse
import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from photomirror.errors import ConfigError

# === REMOTE SERVICE ===
API_URL = "https://api.smugmug.com/services/api/json/1.2.2/"

# === USER CONFIGURATION ===
CONFIG_FILE = Path("photomirror.json")

DEFAULTS = {
    "apikey": "",
    "email": "",
    "password": "",
    "dir": ".",
    "dry": False,
    "delete": True,
    "log_level": "INFO",
    "log_file": "",
}

# Options that may also come from an environment variable of the same
# name in upper case.
ENV_OPTIONS = ["apikey", "email", "password", "dir", "log_level"]


def load_user_config(path: Path = CONFIG_FILE) -> dict:
    """
    Load the user's JSON config file. A missing file means no overrides.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must hold a JSON object")

    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"unknown keys in {path}: {', '.join(unknown)}")

    for name in ("dry", "delete"):
        if name in data and not isinstance(data[name], bool):
            raise ConfigError(f"{name} in {path} must be true or false, not {data[name]!r}")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photomirror",
        description="Mirror a SmugMug photo collection into a local directory.",
    )
    parser.add_argument("--config", default=str(CONFIG_FILE), help="JSON config file")
    parser.add_argument("--apikey", help="SmugMug API key")
    parser.add_argument("--email", help="Email address")
    parser.add_argument("--password", help="Password")
    parser.add_argument("--dir", help="Target directory")
    parser.add_argument("--dry", action="store_true", default=None, help="Dry run (no changes)")
    parser.add_argument(
        "--delete",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Delete local files not found on the server",
    )
    parser.add_argument("--log-level", dest="log_level", help="Logging level")
    parser.add_argument("--log-file", dest="log_file", help="Also write the log to this file")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def load_config(argv: Optional[List[str]] = None, environ: Optional[Dict[str, str]] = None) -> dict:
    """
    Resolve the run configuration, in ascending priority:
    1. DEFAULTS
    2. the JSON config file
    3. environment variables (option name in upper case)
    4. command-line flags
    """
    if environ is None:
        environ = dict(os.environ)

    args = build_parser().parse_args(argv)
    if args.extra:
        raise ConfigError(f"Unknown command-line options: {' '.join(args.extra)}")

    config = dict(DEFAULTS)
    config.update(load_user_config(Path(args.config)))

    for name in ENV_OPTIONS:
        value = environ.get(name.upper(), "")
        if value:
            config[name] = value

    for name in DEFAULTS:
        value = getattr(args, name)
        if value is not None:
            config[name] = value

    if not (config["apikey"] and config["email"] and config["password"]):
        raise ConfigError("apikey, email, and password are all required")

    config["dir"] = str(Path(config["dir"] or ".").expanduser().resolve())
    return config
