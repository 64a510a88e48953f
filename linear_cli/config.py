"""
linear-cli shared configuration, constants, credential storage, and
module-level runtime state.
"""

import json
import os
import tempfile

from linear_cli.exceptions import CONFIG_ERROR, CliError, SetupError

# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------

env = os.environ


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"

API_URL = "https://api.linear.app/graphql"
API_SETTINGS_URL = "https://linear.app/settings/api"
API_KEY_ENV = "LINEAR_API_KEY"

FORMAT_JSON = "json"
FORMAT_TABLE = "table"
FORMAT_PLAIN = "plain"
VALID_FORMATS = (FORMAT_JSON, FORMAT_TABLE, FORMAT_PLAIN)

VALID_INITIATIVE_STATUSES = ("Planned", "Active", "Completed")
VALID_PROJECT_STATES = ("planned", "started", "paused", "completed", "canceled")

DEFAULT_PAGE_SIZE = 50
QUERY_TIMEOUT_SECONDS = 30

HTTP_TIMEOUT_SECONDS = _env_int("LINEAR_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("LINEAR_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("LINEAR_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("LINEAR_HTTP_LOG_SAMPLE_RATE", 1.0)))

# ---------------------------------------------------------------------------
# Runtime flags (set by cli.main)
# ---------------------------------------------------------------------------

RUNTIME_QUIET = False
RUNTIME_VERBOSE = False

# ---------------------------------------------------------------------------
# Config file and credential store
# ---------------------------------------------------------------------------


def get_config_path():
    """Path of the JSON config file holding the stored API key."""
    base = env.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "linear-cli", "config.json")


def load_config():
    """Read the config file. Missing file -> empty dict."""
    path = get_config_path()
    if not os.path.exists(path):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SetupError(f"Could not read config file {path}: {e}", CONFIG_ERROR) from e
    if not isinstance(data, dict):
        raise SetupError(f"Config file {path} must contain a JSON object.", CONFIG_ERROR)
    return data


def save_config(data):
    """Write the config file (atomic write-then-rename, owner-only perms)."""
    path = get_config_path()
    config_dir = os.path.dirname(path)
    try:
        os.makedirs(config_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=config_dir, prefix=".config_tmp_")
    except OSError as e:
        raise CliError(f"Could not write config file {path}: {e}", CONFIG_ERROR) from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise
    # No-op on Windows.
    try:
        os.chmod(path, 0o600)
    except (OSError, NotImplementedError):
        pass


def get_api_key():
    """Return the API key from the environment or the config file, or None."""
    key = env.get(API_KEY_ENV)
    if key:
        return key
    return load_config().get("apiKey") or None


def api_key_source():
    """``environment`` when LINEAR_API_KEY is set, else ``config``."""
    return "environment" if env.get(API_KEY_ENV) else "config"


def save_api_key(api_key):
    data = load_config()
    data["apiKey"] = api_key
    save_config(data)


def remove_api_key():
    data = load_config()
    if "apiKey" not in data:
        return
    del data["apiKey"]
    save_config(data)


def require_api_key():
    """Return the API key or raise NOT_AUTHENTICATED."""
    key = get_api_key()
    if not key:
        raise SetupError(
            "Not authenticated. Run: linear auth login --key <key> "
            f"(or set {API_KEY_ENV}).",
            details={"configPath": get_config_path()},
        )
    return key
