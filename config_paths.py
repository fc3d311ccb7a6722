import json
import os

from record_source import DEFAULT_SOURCE_URL

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "rostertable")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
SOURCE_URL_DEFAULT = DEFAULT_SOURCE_URL
TIMEOUT_SECONDS_DEFAULT = 10.0


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "SOURCE_URL": SOURCE_URL_DEFAULT,
        "TIMEOUT_SECONDS": TIMEOUT_SECONDS_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return cfg

    source = data.get("source") if isinstance(data, dict) else None
    if not isinstance(source, dict):
        return cfg

    url = source.get("url")
    if isinstance(url, str) and url.strip():
        cfg["SOURCE_URL"] = url.strip()

    timeout = source.get("timeout_seconds")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        cfg["TIMEOUT_SECONDS"] = float(timeout)

    return cfg
