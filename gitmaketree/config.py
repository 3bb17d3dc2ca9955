"""Configuration handling for gitmaketree"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

try:
    import tomllib
except ImportError:  # Python < 3.11
    import tomli as tomllib

from .core import ConfigError
from .logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = 'GITMAKETREE_CONFIG'

OVERWRITE_POLICIES = ["always", "ask"]


def default_config_path() -> Path:
    """Per-user configuration file, honouring ``$XDG_CONFIG_HOME``."""
    config_home = os.environ.get('XDG_CONFIG_HOME')
    base = Path(config_home) if config_home else Path.home() / '.config'
    return base / 'gitmaketree' / 'config.toml'


@dataclass
class Config:
    """Settings for a gitmaketree run, validated on creation."""

    # Safety prompts
    warn_if_uncommitted: bool = True
    warn_if_not_on_main: bool = True
    warn_if_nested_path: bool = True
    main_branches: List[str] = field(default_factory=lambda: ["main", "master"])

    # After creation
    cd_to_new_worktree: bool = True
    copy_extras: List[str] = field(default_factory=list)
    overwrite: str = "always"  # always, ask

    def __post_init__(self):
        self._validate_flags()
        self._validate_main_branches()
        self._validate_copy_extras()
        self._validate_overwrite()

    def _validate_flags(self):
        for name in ('warn_if_uncommitted', 'warn_if_not_on_main',
                     'warn_if_nested_path', 'cd_to_new_worktree'):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false, got {getattr(self, name)!r}")

    def _validate_main_branches(self):
        if isinstance(self.main_branches, str):
            self.main_branches = [self.main_branches]
        if not isinstance(self.main_branches, list):
            raise ValueError("main_branches must be a list")
        self.main_branches = [str(b).strip() for b in self.main_branches if str(b).strip()]
        if not self.main_branches:
            raise ValueError("main_branches cannot be empty")

    def _validate_copy_extras(self):
        if not isinstance(self.copy_extras, list):
            raise ValueError("copy_extras must be a list")
        self.copy_extras = [str(p) for p in self.copy_extras if str(p).strip()]

    def _validate_overwrite(self):
        if self.overwrite not in OVERWRITE_POLICIES:
            raise ValueError(f"overwrite must be one of {OVERWRITE_POLICIES}, got '{self.overwrite}'")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Create Config from a dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        unknown = set(config_dict) - known_fields
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(sorted(unknown))}")

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load configuration from the ``[options]`` table of a TOML file.

    Resolution order: explicit ``path``, ``$GITMAKETREE_CONFIG``, then the
    per-user default. A missing file gives the defaults, except when the
    path was given explicitly.
    """
    explicit = path is not None or CONFIG_ENV_VAR in os.environ
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or default_config_path()
    config_file = Path(path).expanduser()

    if not config_file.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"No configuration at {config_file}, using defaults")
        return Config()

    try:
        with open(config_file, 'rb') as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Unable to read {config_file}: {e}")

    options = data.get('options', {})
    if not isinstance(options, dict):
        raise ConfigError(f"[options] in {config_file} must be a table")

    try:
        config = Config.from_dict(options)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}")

    logger.debug(f"Loaded configuration from {config_file}")
    return config
