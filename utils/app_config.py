"""Pre-DB bootstrap configuration.

Stores user preferences that must be known before opening the DB (db_folder,
default owner). Config lives in ~/.budget_tracker/config.json; the directory
can be moved with BUDGET_TRACKER_HOME.
"""
import json
import os
from pathlib import Path

from utils.constants import DB_FILE

DB_ENV_VAR = "BUDGET_TRACKER_DB"
HOME_ENV_VAR = "BUDGET_TRACKER_HOME"
DEFAULT_OWNER = "local"


def config_dir() -> Path:
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".budget_tracker"


def config_file() -> Path:
    return config_dir() / "config.json"


def load_config() -> dict:
    """Returns {} on missing or corrupt file — never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = config_file()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_default_owner() -> str:
    return load_config().get("owner") or DEFAULT_OWNER


def set_default_owner(owner_id: str) -> None:
    config = load_config()
    config["owner"] = owner_id
    save_config(config)


def resolve_db_path(explicit: str | None = None) -> str:
    """--db option, then BUDGET_TRACKER_DB, then db_folder from config, then CWD."""
    if explicit:
        return explicit
    env_path = os.getenv(DB_ENV_VAR)
    if env_path:
        return env_path
    folder = get_db_folder()
    if folder:
        return os.path.join(folder, DB_FILE)
    return DB_FILE
