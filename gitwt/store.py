"""
Dedicated configuration store for git-wt.

Hook commands are kept in their own git config file, `.gitconfig_wt`,
placed next to the user's git configuration instead of inside any
repository. The repository name is the section and the configuration key
is the option; an option may repeat to form an ordered list:

    [my-project]
        create_commands = npm install
        create_commands = code .

Every operation opens the file afresh; nothing is cached between calls.
"""

import configparser
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from git.config import GitConfigParser

from gitwt.core import GitWtError

WT_CONFIG_FILENAME = '.gitconfig_wt'

# Level recorded for the dedicated file when it is created.
APP_LEVEL = 'app'

CREATE_COMMANDS = 'create_commands'
REMOVE_COMMANDS = 'remove_commands'
OPEN_COMMANDS = 'open_commands'

PathLike = Union[str, Path]


class ConfigError(GitWtError):
    """Base exception for configuration store failures."""
    pass


class ConfigLocationError(ConfigError):
    """Neither an XDG nor a user git configuration file could be found."""
    pass


class ConfigIOError(ConfigError):
    """The dedicated configuration file could not be created."""
    pass


class ConfigBackendError(ConfigError):
    """The configuration backend failed to open, parse, read or write."""
    pass


class MissingKeyError(ConfigError):
    """A single-value lookup found no entry."""

    def __init__(self, key: str):
        super().__init__(f"Configuration key '{key}' not found")
        self.key = key


def find_config_path(
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[PathLike] = None
) -> Path:
    """Locate the user's git configuration file.

    The XDG file (`$XDG_CONFIG_HOME/git/config`, or `~/.config/git/config`
    when the variable is unset) is preferred over `~/.gitconfig`. Only
    files that exist are considered.
    """
    if environ is None:
        environ = os.environ
    if home is None:
        home = environ.get('HOME') or Path.home()
    home = Path(home)

    xdg_home = environ.get('XDG_CONFIG_HOME')
    if xdg_home:
        xdg_config = Path(xdg_home) / 'git' / 'config'
    else:
        xdg_config = home / '.config' / 'git' / 'config'

    for candidate in (xdg_config, home / '.gitconfig'):
        if candidate.is_file():
            return candidate

    raise ConfigLocationError("Unable to find XDG or user git configuration")


def resolve_config_path(config_file: Optional[PathLike] = None) -> Path:
    """Use `config_file` when given, otherwise locate the git configuration."""
    if config_file:
        return Path(config_file).expanduser()
    return find_config_path()


def dedicated_config_path(config_path: PathLike) -> Path:
    """Path of the dedicated file that lives alongside `config_path`."""
    return Path(config_path).with_name(WT_CONFIG_FILENAME)


def composite_key(repo_name: str, key: str) -> str:
    """Build the `<repo_name>.<key>` lookup key."""
    return f"{repo_name}.{key}"


def split_key(key: str) -> Tuple[str, str]:
    """Split a composite key into its section and option on the last dot."""
    section, _, option = key.rpartition('.')
    if not section or not option:
        raise ConfigError(f"Invalid configuration key '{key}'")
    return section, option


class ConfigHandle:
    """Open handle on the dedicated configuration file.

    Use as a context manager so the underlying parser is released (and its
    lock file removed) when the operation is done.
    """

    def __init__(self, path: Path, read_only: bool = True, created: bool = False):
        self.path = path
        self.read_only = read_only
        self.created = created
        # Record of (level, path) layers registered by this handle. Only the
        # open that creates the file registers it, as the `app` layer.
        self.layers: List[Tuple[str, Path]] = []

        try:
            self.parser = GitConfigParser(str(path), read_only=read_only, merge_includes=False)
        except OSError as e:
            raise ConfigBackendError(f"Unable to open {path}: {e}")

        try:
            self.parser.read()
        except (configparser.Error, UnicodeDecodeError) as e:
            self.parser.release()
            raise ConfigBackendError(f"Unable to parse {path}: {e}")

    def __enter__(self) -> 'ConfigHandle':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            self.close()
        except ConfigBackendError:
            # An error already propagating out of the block wins.
            if exc_type is None:
                raise

    def close(self) -> None:
        """Release the parser, flushing any pending write."""
        try:
            self.parser.release()
        except OSError as e:
            raise ConfigBackendError(f"Unable to write {self.path}: {e}")

    def add_layer(self, path: Path, level: str) -> None:
        """Register `path` as a configuration layer at `level`."""
        layer = (level, path)
        if layer not in self.layers:
            self.layers.append(layer)

    def get_all(self, key: str) -> List[str]:
        """All values of `key` in insertion order."""
        section, option = split_key(key)
        return self.items(section).get(option, [])

    def get_string(self, key: str) -> str:
        """Single value of `key`; the last one when the key repeats."""
        values = self.get_all(key)
        if not values:
            raise MissingKeyError(key)
        return values[-1]

    def add(self, key: str, value: str) -> None:
        """Append `value` to `key`, keeping any existing values."""
        section, option = split_key(key)
        try:
            self.parser.add_value(section, option, value)
        except (OSError, configparser.Error) as e:
            raise ConfigBackendError(f"Unable to write {key} to {self.path}: {e}")

    def items(self, section: str) -> Dict[str, List[str]]:
        """Every option of `section` with its values."""
        if not self.parser.has_section(section):
            return {}
        try:
            items = self.parser.items_all(section)
        except (KeyError, configparser.Error) as e:
            raise ConfigBackendError(f"Unable to read [{section}] from {self.path}: {e}")

        return {
            name: [value for value in values if isinstance(value, str)]
            for name, values in items
        }


def open_store(config_path: Optional[PathLike] = None, read_only: bool = True) -> ConfigHandle:
    """Open the dedicated configuration file, creating it if needed.

    `config_path` is the user's git configuration file; only its directory
    is used. When omitted it is located with `find_config_path()`.
    """
    if config_path is None:
        config_path = find_config_path()
    path = dedicated_config_path(config_path)

    created = False
    if not path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        except OSError as e:
            raise ConfigIOError(f"Unable to create {path}: {e}")
        created = True

    handle = ConfigHandle(path, read_only=read_only, created=created)
    if created:
        handle.add_layer(path, APP_LEVEL)
    return handle


def get_entry(repo_name: str, key: str, config_path: Optional[PathLike] = None) -> str:
    """Get the value configured for `key` (the last one if it repeats)."""
    with open_store(config_path) as handle:
        return handle.get_string(composite_key(repo_name, key))


def get_entries(repo_name: str, key: str, config_path: Optional[PathLike] = None) -> List[str]:
    """Get every value configured for `key`, in insertion order."""
    with open_store(config_path) as handle:
        return handle.get_all(composite_key(repo_name, key))


def add_entry(repo_name: str, key: str, value: str, config_path: Optional[PathLike] = None) -> None:
    """Append `value` to the values configured for `key`."""
    with open_store(config_path, read_only=False) as handle:
        handle.add(composite_key(repo_name, key), value)


def list_entries(repo_name: str, config_path: Optional[PathLike] = None) -> Dict[str, List[str]]:
    """Get every key configured for a repository with its values."""
    with open_store(config_path) as handle:
        return handle.items(repo_name)
