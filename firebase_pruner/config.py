from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from dotenv import load_dotenv
from pathlib import Path
import re
import os

from .api import DEFAULT_TIMEOUT
from .errors import ConfigurationInvalid
from .models import RetentionPolicy
from .utils import first_set, parse_non_negative_int

try:
    import tomllib as toml_loader
except ImportError:
    import tomli as toml_loader


DEFAULT_MIN_COUNT = 5
DEFAULT_MAX_DAYS = 30

ENV_PROJECT_ID = "FIREBASE_PROJECT_ID"
ENV_APP_ID = "FIREBASE_APP_ID"
ENV_KEY_JSON = "FIREBASE_SERVICE_ACCOUNT_KEY_JSON"
ENV_KEY_PATH = "FIREBASE_SERVICE_ACCOUNT_KEY_PATH"
ENV_MIN_COUNT = "PRUNER_MIN_COUNT"
ENV_MAX_DAYS = "PRUNER_MAX_DAYS"


@dataclass(frozen=True)
class PrunerOptions:
    project_id: str
    service_account_key_json: Optional[str] = None
    service_account_key_path: Optional[str] = None
    app_id: Optional[str] = None
    min_count: int = DEFAULT_MIN_COUNT
    max_days: int = DEFAULT_MAX_DAYS
    timeout: float = DEFAULT_TIMEOUT

    @property
    def policy(self) -> RetentionPolicy:
        return RetentionPolicy(min_keep=self.min_count, max_age_days=self.max_days)


_PLACEHOLDER = re.compile(r"ENV_([A-Z0-9_]+)")


def expand_placeholders(value: Any) -> Any:
    """Replace every ``ENV_NAME`` string, at any depth, with ``$NAME``.

    Unset variables leave the placeholder in place with a warning.
    """
    if isinstance(value, dict):
        return {key: expand_placeholders(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_placeholders(item) for item in value]
    if not isinstance(value, str):
        return value
    match = _PLACEHOLDER.fullmatch(value)
    if not match:
        return value
    resolved = os.getenv(match.group(1))
    if resolved is None:
        print(f"Warning: '{value}' refers to unset environment variable {match.group(1)}")
        return value
    return resolved


def _dotenv_files(cfg_path: Path, data: Dict[str, Any]) -> List[Path]:
    # a .env beside the config file first, then dot_env, then dot_envs in order
    names: List[Any] = [".env"] if (cfg_path.parent / ".env").exists() else []
    if data.get("dot_env"):
        names.append(data["dot_env"])
    extra = data.get("dot_envs") or []
    if not isinstance(extra, list):
        raise ConfigurationInvalid("'dot_envs' must be a list of paths.")
    names.extend(extra)
    for name in names:
        if not isinstance(name, str):
            raise ConfigurationInvalid(f"dot-env entries must be paths, got {name!r}")
    return [cfg_path.parent / name for name in names if name]


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return {}
    cfg_path = Path(config_path)
    if not cfg_path.is_file():
        raise ConfigurationInvalid(f"Config file not found: {cfg_path}")
    try:
        with cfg_path.open("rb") as fp:
            data: Dict[str, Any] = toml_loader.load(fp)
    except (OSError, toml_loader.TOMLDecodeError) as err:
        raise ConfigurationInvalid(f"Failed to read config TOML: {err}") from err

    for env_file in _dotenv_files(cfg_path, data):
        load_dotenv(dotenv_path=str(env_file), override=False)
    return expand_placeholders(data)


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationInvalid(f"[{name}] must be a table, got {section!r}")
    return section


def _text(value: Any, field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationInvalid(f"'{field}' must be a string, got {value!r}")
    return value


def build_options(
    args: Any,
    cfg: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PrunerOptions:
    """Merge CLI flags, environment and TOML into validated options.

    Precedence is flags, then environment, then the TOML file, then defaults.
    Wrongly typed TOML sections or values raise ConfigurationInvalid.
    """
    cfg = cfg or {}
    environ = os.environ if environ is None else environ
    firebase_cfg = _section(cfg, "firebase")
    retention_cfg = _section(cfg, "retention")

    def pick(attr: str, env_name: Optional[str], section: Dict[str, Any], key: str) -> Any:
        return first_set(
            getattr(args, attr, None),
            environ.get(env_name) if env_name else None,
            section.get(key),
        )

    def pick_text(attr: str, env_name: str, key: str) -> Optional[str]:
        return _text(pick(attr, env_name, firebase_cfg, key), key)

    project_id = pick_text("project_id", ENV_PROJECT_ID, "project_id")
    if not project_id:
        raise ConfigurationInvalid(
            f"A project id is required (--project-id, {ENV_PROJECT_ID} or firebase.project_id)."
        )

    try:
        min_count = parse_non_negative_int(
            first_set(
                pick("min_count", ENV_MIN_COUNT, retention_cfg, "min_count"),
                DEFAULT_MIN_COUNT,
            ),
            "min-count",
        )
        max_days = parse_non_negative_int(
            first_set(
                pick("max_days", ENV_MAX_DAYS, retention_cfg, "max_days"),
                DEFAULT_MAX_DAYS,
            ),
            "max-days",
        )
    except ValueError as err:
        raise ConfigurationInvalid(str(err)) from err

    timeout = first_set(getattr(args, "timeout", None), firebase_cfg.get("timeout"), DEFAULT_TIMEOUT)
    if isinstance(timeout, bool):
        raise ConfigurationInvalid(f"'timeout' must be a number, got {timeout!r}")
    try:
        timeout = float(timeout)
    except (TypeError, ValueError):
        raise ConfigurationInvalid(f"'timeout' must be a number, got {timeout!r}") from None
    if timeout <= 0:
        raise ConfigurationInvalid(f"'timeout' must be positive, got {timeout}")

    return PrunerOptions(
        project_id=project_id,
        service_account_key_json=pick_text(
            "service_account_key_json", ENV_KEY_JSON, "service_account_key_json"
        ),
        service_account_key_path=pick_text(
            "service_account_key_path", ENV_KEY_PATH, "service_account_key_path"
        ),
        app_id=pick_text("app_id", ENV_APP_ID, "app_id"),
        min_count=min_count,
        max_days=max_days,
        timeout=timeout,
    )
