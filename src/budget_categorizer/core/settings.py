import os
import re

from dotenv import find_dotenv, load_dotenv

from budget_categorizer.core.profiles import DEFAULT_SUGGESTION_LIMIT
from budget_categorizer.domain.filters import parse_filter_list
from budget_categorizer.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"
DEFAULT_SCAN_CHUNK_SIZE = 10
DEFAULT_SCAN_WORKERS = 1

CONFIG_KEYS = (
    "LOG_LEVEL",
    "LOG_DIR",
    "NOISE_FILTERS",
    "SUGGESTION_LIMIT",
    "SCAN_CHUNK_SIZE",
    "SCAN_WORKERS",
)

_INLINE_COMMENT_RE = re.compile(r"\s+#.*$")

_config_path: str | None = None
_config_values: dict[str, str] = {}
_external_keys: set[str] = set()


def _config_dir_file(name: str) -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    return os.path.join(config_dir, name) if config_dir else None


def _parse_value(raw_value: str) -> str:
    """
    Read a flat ``config.yaml`` scalar.

    A value opening with a quote runs to the matching quote (``#`` inside is
    kept); otherwise a ``#`` preceded by whitespace starts a comment.
    """
    value = raw_value.strip()
    if value[:1] in {'"', "'"}:
        end = value.find(value[0], 1)
        if end != -1:
            return value[1:end]
    return _INLINE_COMMENT_RE.sub("", value).strip()


def read_config_file(path: str | None) -> dict[str, str]:
    """Parse ``KEY: value`` lines; blank values, comments and other lines are ignored."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            key, sep, raw_value = line.strip().partition(":")
            key = key.strip()
            if not sep or not key or key.startswith("#"):
                continue
            value = _parse_value(raw_value)
            if value:
                values[key] = value
    return values


def load_environment() -> None:
    """
    Populate ``os.environ`` from ``.env`` and then ``config.yaml``.

    Variables already set in the process environment always win; the config
    file only fills the known keys that are still missing.
    """
    global _config_path, _config_values, _external_keys

    dotenv_path = _config_dir_file(".env")
    if not dotenv_path or not os.path.exists(dotenv_path):
        dotenv_path = find_dotenv(usecwd=True) or None
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _external_keys = set(os.environ)

    _config_path = _config_dir_file(CONFIG_FILENAME)
    if _config_path is None:
        candidate = os.path.join(os.getcwd(), "config", CONFIG_FILENAME)
        _config_path = candidate if os.path.exists(candidate) else os.path.join(os.getcwd(), CONFIG_FILENAME)
    _config_values = read_config_file(_config_path)

    for key in CONFIG_KEYS:
        if key not in os.environ and key in _config_values:
            os.environ[key] = _config_values[key]


def get_config_path() -> str | None:
    return _config_path


def is_env_override(name: str) -> bool:
    return name in _external_keys


def value_source(name: str) -> str:
    if is_env_override(name):
        return "env"
    if name in _config_values and os.getenv(name) == _config_values[name]:
        return "config"
    return "default"


def ensure_dir(path: str | None) -> None:
    if path and path not in {".", "./"}:
        os.makedirs(path, exist_ok=True)


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_list(name: str) -> list[str]:
    return parse_filter_list(os.getenv(name))


def get_noise_filters() -> list[str]:
    return get_env_list("NOISE_FILTERS")


def get_suggestion_limit() -> int:
    return get_env_int("SUGGESTION_LIMIT", DEFAULT_SUGGESTION_LIMIT, min_value=1)


def get_scan_chunk_size() -> int:
    return get_env_int("SCAN_CHUNK_SIZE", DEFAULT_SCAN_CHUNK_SIZE, min_value=1)


def get_scan_workers() -> int:
    return get_env_int("SCAN_WORKERS", DEFAULT_SCAN_WORKERS, min_value=1)


def _sanitize_env_value(value: str) -> str:
    return value.replace("\r", "\\r").replace("\n", "\\n")


def log_environment() -> None:
    logger.info("[CONFIG] Config file: %s", _config_path or "<none>")
    for key in CONFIG_KEYS:
        raw_value = os.getenv(key)
        value = "<unset>" if raw_value is None else _sanitize_env_value(raw_value)
        logger.info("[ENV] %s=%s (%s)", key, value, value_source(key))


load_environment()

LOG_DIR = os.getenv("LOG_DIR")
CONFIG_DIR = os.getenv("CONFIG_DIR")

ensure_dir(LOG_DIR)
ensure_dir(CONFIG_DIR)
