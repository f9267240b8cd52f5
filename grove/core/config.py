"""Configuration management for Grove.

Reads and writes the repository-local and global configuration files,
and works out the identity recorded on new commits.
"""

import configparser
import io
import os
from pathlib import Path
from typing import Optional

from .errors import GroveError
from ..utils.fileio import atomic_write


def _read_parser(path: Optional[Path]) -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    if path is not None and path.exists():
        try:
            parser.read(path)
        except configparser.Error as e:
            raise GroveError(f"Cannot parse config file {path}: {e}")
    return parser


class Config:
    """
    Manages Grove configuration files.

    Configuration is stored in INI format, similar to Git:
    - Global config: ~/.groveconfig
    - Repository config: .grove/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.groveconfig'

    def __init__(self, repo_config_path: Optional[Path] = None, global_config_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            repo_config_path: Path to repository config file, if in a repo
            global_config_path: Override for the global config location
        """
        self.repo_config_path = Path(repo_config_path) if repo_config_path else None
        self.global_config_path = Path(global_config_path) if global_config_path else self.GLOBAL_CONFIG_PATH
        self._global_config = None
        self._repo_config = None

    @property
    def global_config(self) -> configparser.ConfigParser:
        if self._global_config is None:
            self._global_config = _read_parser(self.global_config_path)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = _read_parser(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (GROVE_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value

        Args:
            section: Config section (e.g., 'user', 'core')
            key: Config key (e.g., 'name', 'email')
            fallback: Default value if not found

        Returns:
            Configuration value or fallback
        """
        env_value = os.environ.get(f"GROVE_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def _target(self, global_config: bool):
        if global_config:
            return self.global_config, self.global_config_path
        if not self.repo_config_path:
            raise GroveError("No repository config available outside a repository")
        return self.repo_config, self.repo_config_path

    def _save(self, config: configparser.ConfigParser, config_path: Path) -> None:
        buffer = io.StringIO()
        config.write(buffer)
        atomic_write(config_path, buffer.getvalue())

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Set a configuration value.

        Args:
            section: Config section
            key: Config key
            value: Value to set
            global_config: If True, write to global config; otherwise repo config
        """
        config, config_path = self._target(global_config)
        if not config.has_section(section):
            config.add_section(section)
        config.set(section, key, value)
        self._save(config, config_path)

    def unset(self, section: str, key: str, global_config: bool = False) -> bool:
        """
        Remove a configuration value.

        Returns:
            True if value was removed, False if it didn't exist
        """
        config, config_path = self._target(global_config)
        if not config.has_option(section, key):
            return False

        config.remove_option(section, key)
        if not config.options(section):
            config.remove_section(section)
        self._save(config, config_path)
        return True

    def list_all(self) -> dict[str, dict[str, str]]:
        """
        List effective configuration values.

        Repository values override global ones.

        Returns:
            Dict of sections to key-value dicts
        """
        result: dict[str, dict[str, str]] = {}
        for config in (self.global_config, self.repo_config):
            if config is None:
                continue
            for section in config.sections():
                result.setdefault(section, {}).update(config.items(section))
        return result

    def get_user_identity(self) -> tuple[str, str]:
        """
        Get the name and email recorded on new commits.

        Looks at GROVE_AUTHOR_NAME/EMAIL, then GIT_AUTHOR_NAME/EMAIL,
        then user.name/user.email, then falls back to the login name.

        Returns:
            Tuple of (name, email)
        """
        name = (os.environ.get('GROVE_AUTHOR_NAME')
                or os.environ.get('GIT_AUTHOR_NAME')
                or self.get('user', 'name'))
        email = (os.environ.get('GROVE_AUTHOR_EMAIL')
                 or os.environ.get('GIT_AUTHOR_EMAIL')
                 or self.get('user', 'email'))

        if not name:
            name = os.environ.get('USER') or 'unknown'
        if not email:
            email = f"{name}@example.com"
        return name, email


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config
    """
    if repo:
        return Config(repo.config_file)
    return Config()
