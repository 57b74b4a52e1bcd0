"""Resolution settings for the CLI: defaults, YAML config file, environment and flags.

Precedence, lowest first: built-in defaults, the YAML config file, the
environment, then CLI flags. The resolver core never reads the environment;
everything it needs is collected here and passed in explicitly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """The YAML config file is unreadable or has the wrong shape."""


@dataclass
class ResolutionSettings:
    """Everything ``pom.parser.Parser`` needs besides the root POM path."""
    local_repository: Optional[str] = None
    remote_repositories: List[str] = field(
        default_factory=lambda: [Constants.REGISTRY_URL_MAVEN_CENTRAL]
    )
    verify_dependencies: bool = True
    excluded_scopes: List[str] = field(default_factory=list)
    strict_properties: bool = False


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load settings from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        The mapping under a top-level ``pomgate`` key when present, else the whole document.

    Raises:
        ConfigError: the file cannot be read or is not a mapping.
    """
    if not config_path:
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")
    section = data.get("pomgate", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Config {config_path}: 'pomgate' must be a mapping")
    return section


def _as_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(f"'{key}' must be a string or a list of strings")


def env_local_repository() -> Optional[str]:
    """``$POMGATE_LOCAL_REPOSITORY`` when set and non-blank."""
    env_value = os.environ.get(Constants.ENV_LOCAL_REPOSITORY)
    if env_value and env_value.strip():
        return env_value.strip()
    return None


def default_local_repository() -> Optional[str]:
    """``~/.m2/repository`` when it exists."""
    candidate = os.path.expanduser(Constants.DEFAULT_LOCAL_REPOSITORY)
    if os.path.isdir(candidate):
        return candidate
    return None


def build_settings(args) -> ResolutionSettings:
    """Merge defaults, config file, environment and CLI flags into settings."""
    settings = ResolutionSettings()
    config = load_config(getattr(args, "CONFIG", None))

    if "local_repository" in config:
        settings.local_repository = config["local_repository"] or None
    else:
        settings.local_repository = default_local_repository()
    if "remote_repositories" in config:
        settings.remote_repositories = _as_list(config["remote_repositories"], "remote_repositories")
    if "excluded_scopes" in config:
        settings.excluded_scopes = _as_list(config["excluded_scopes"], "excluded_scopes")
    if "verify_dependencies" in config:
        settings.verify_dependencies = bool(config["verify_dependencies"])
    if "strict_properties" in config:
        settings.strict_properties = bool(config["strict_properties"])

    env_repository = env_local_repository()
    if env_repository:
        settings.local_repository = env_repository

    if getattr(args, "LOCAL_REPOSITORY", None):
        settings.local_repository = args.LOCAL_REPOSITORY
    if getattr(args, "REMOTE_REPOSITORIES", None):
        settings.remote_repositories = list(args.REMOTE_REPOSITORIES)
    if getattr(args, "OFFLINE", False):
        settings.remote_repositories = []
    if getattr(args, "NO_VERIFY", False):
        settings.verify_dependencies = False
    if getattr(args, "EXCLUDED_SCOPES", None):
        settings.excluded_scopes = list(args.EXCLUDED_SCOPES)
    if getattr(args, "STRICT_PROPERTIES", False):
        settings.strict_properties = True

    if settings.local_repository:
        settings.local_repository = os.path.expanduser(settings.local_repository)
    logger.debug("Resolution settings: %s", settings)
    return settings
