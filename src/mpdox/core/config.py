"""
Configuration management for mpdox
"""

import os
import tomllib
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from mpdox.keys import (
    SCOPE_ACTIONS,
    Key,
    KeyConfig,
    Scope,
    build_key_config,
    format_key_spec,
    parse_key_spec,
)
from mpdox.keys.defaults import DEFAULT_KEYBINDS

APP_NAME = "mpdox"
PASSWORD_ENV = "MPDOX_PASSWORD"
MIN_STATUS_INTERVAL_MS = 100
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Invalid configuration file or value."""


@dataclass(frozen=True)
class SymbolsConfig:
    """Markers drawn in front of list entries."""

    dir: str = "/"
    song: str = "♪"
    marker: str = "*"


@dataclass(frozen=True)
class UIConfig:
    """Configuration for the terminal interface."""

    # Percent of the body width for parent / current / preview columns
    column_widths: tuple[int, int, int] = (20, 38, 42)
    symbols: SymbolsConfig = field(default_factory=SymbolsConfig)
    # Hide entries that fail an active filter instead of only highlighting matches
    hide_unmatched: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    log_file: Optional[str] = None  # None = data dir / mpdox.log


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    address: str = "127.0.0.1:6600"
    password: Optional[str] = None
    volume_step: int = 5
    # 0 disables status polling
    status_update_interval_ms: int = 1000
    keybinds: KeyConfig = field(default_factory=build_key_config)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def get_log_path(config: Config) -> Path:
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / f"{APP_NAME}.log"


def _render_keybinds() -> str:
    lines = []
    for scope in Scope:
        lines.append(f"[keybinds.{scope.value}]")
        for action, keys in DEFAULT_KEYBINDS.get(scope, {}).items():
            specs = ", ".join(f'"{_toml_escape(format_key_spec(key))}"' for key in keys)
            lines.append(f"{action.value} = [{specs}]")
        lines.append("")
    return "\n".join(lines)


def _toml_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    defaults = Config()
    widths = ", ".join(str(width) for width in defaults.ui.column_widths)
    symbols = defaults.ui.symbols
    hide_unmatched = str(defaults.ui.hide_unmatched).lower()
    return f"""# mpdox configuration

# MPD server: "host:port", "[ipv6]:port", or a unix socket path
address = "{defaults.address}"

# Server password (or set {PASSWORD_ENV} in the environment / config dir .env)
# password = ""

# Volume change per keypress
volume_step = {defaults.volume_step}

# Status refresh interval; 0 disables polling, values below {MIN_STATUS_INTERVAL_MS} are raised to it
status_update_interval_ms = {defaults.status_update_interval_ms}

[logging]
# TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
level = "{defaults.logging.level}"
# log_file = "~/.local/share/{APP_NAME}/{APP_NAME}.log"

[ui]
# Parent / current / preview column widths in percent
column_widths = [{widths}]
# Hide entries that do not match the filter (default: highlight matches)
hide_unmatched = {hide_unmatched}

[ui.symbols]
dir = "{symbols.dir}"
song = "{symbols.song}"
marker = "{symbols.marker}"

# Keys: "q", "G" (implies Shift), "<Enter>", "<Space>", "<C-d>", "<A-x>", "<S-Tab>"
# A binding replaces the default for that exact key within its scope.
{_render_keybinds()}"""


def _expect(value: Any, kind: type | tuple[type, ...], name: str) -> Any:
    # bool is an int subclass, and never a valid number here
    if isinstance(value, bool) and kind is int:
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if not isinstance(value, kind):
        raise ConfigError(f"{name} has the wrong type: {value!r}")
    return value


def _parse_keybinds(data: Any) -> dict[Scope, dict[Enum, list[Key]]]:
    _expect(data, dict, "keybinds")
    scopes_by_name = {scope.value: scope for scope in Scope}
    bindings: dict[Scope, dict[Enum, list[Key]]] = {}

    for scope_name, table in data.items():
        scope = scopes_by_name.get(scope_name)
        if scope is None:
            raise ConfigError(f"Unknown keybind scope: [keybinds.{scope_name}]")
        _expect(table, dict, f"keybinds.{scope_name}")
        actions = SCOPE_ACTIONS[scope]

        scope_bindings: dict[Enum, list[Key]] = {}
        for action_name, specs in table.items():
            try:
                action = actions(action_name)
            except ValueError:
                raise ConfigError(
                    f"Unknown action '{action_name}' in [keybinds.{scope_name}]"
                ) from None
            if isinstance(specs, str):
                specs = [specs]
            _expect(specs, list, f"keybinds.{scope_name}.{action_name}")
            keys = []
            for spec in specs:
                _expect(spec, str, f"keybinds.{scope_name}.{action_name}")
                try:
                    keys.append(parse_key_spec(spec))
                except ValueError as e:
                    raise ConfigError(f"[keybinds.{scope_name}] {action_name}: {e}") from e
            scope_bindings[action] = keys
        bindings[scope] = scope_bindings

    return bindings


def _parse_ui(data: Any) -> UIConfig:
    _expect(data, dict, "ui")
    defaults = UIConfig()

    widths = data.get("column_widths", list(defaults.column_widths))
    _expect(widths, list, "ui.column_widths")
    if len(widths) != 3 or not all(
        isinstance(w, int) and not isinstance(w, bool) and w >= 0 for w in widths
    ):
        raise ConfigError(f"ui.column_widths must be three non-negative integers: {widths!r}")
    if sum(widths) <= 0:
        raise ConfigError("ui.column_widths must not all be zero")

    symbols_data = _expect(data.get("symbols", {}), dict, "ui.symbols")
    symbols = SymbolsConfig(
        dir=_expect(symbols_data.get("dir", defaults.symbols.dir), str, "ui.symbols.dir"),
        song=_expect(symbols_data.get("song", defaults.symbols.song), str, "ui.symbols.song"),
        marker=_expect(
            symbols_data.get("marker", defaults.symbols.marker), str, "ui.symbols.marker"
        ),
    )
    hide_unmatched = _expect(
        data.get("hide_unmatched", defaults.hide_unmatched), bool, "ui.hide_unmatched"
    )
    return UIConfig(
        column_widths=(widths[0], widths[1], widths[2]),
        symbols=symbols,
        hide_unmatched=hide_unmatched,
    )


def _parse_logging(data: Any) -> LoggingConfig:
    _expect(data, dict, "logging")
    level = _expect(data.get("level", "INFO"), str, "logging.level").upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Invalid logging.level: {level!r}")
    log_file = data.get("log_file")
    if log_file is not None:
        _expect(log_file, str, "logging.log_file")
    return LoggingConfig(level=level, log_file=log_file)


def parse_config(toml_data: dict[str, Any]) -> Config:
    """Build a Config from already-parsed TOML.

    Raises:
        ConfigError: An unknown scope/action, a bad key spec or a wrongly typed value
    """
    defaults = Config()

    address = _expect(toml_data.get("address", defaults.address), str, "address")
    if not address:
        raise ConfigError("address must not be empty")

    password = toml_data.get("password")
    if password is not None:
        _expect(password, str, "password")

    volume_step = _expect(toml_data.get("volume_step", defaults.volume_step), int, "volume_step")
    if not 0 < volume_step <= 100:
        raise ConfigError(f"volume_step must be between 1 and 100, got {volume_step}")

    interval = _expect(
        toml_data.get("status_update_interval_ms", defaults.status_update_interval_ms),
        int,
        "status_update_interval_ms",
    )
    if interval < 0:
        raise ConfigError(f"status_update_interval_ms must not be negative, got {interval}")
    if 0 < interval < MIN_STATUS_INTERVAL_MS:
        logger.warning(
            f"status_update_interval_ms={interval} raised to {MIN_STATUS_INTERVAL_MS}"
        )
        interval = MIN_STATUS_INTERVAL_MS

    keybinds = build_key_config(_parse_keybinds(toml_data.get("keybinds", {})))

    return Config(
        address=address,
        password=password or None,
        volume_step=volume_step,
        status_update_interval_ms=interval,
        keybinds=keybinds,
        ui=_parse_ui(toml_data.get("ui", {})),
        logging=_parse_logging(toml_data.get("logging", {})),
    )


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults when it doesn't exist.

    The password can also come from MPDOX_PASSWORD (process environment or a
    .env file in the config directory), which takes precedence over the file.

    Raises:
        ConfigError: The file can't be read or holds invalid values
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"{config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e
        config = parse_config(toml_data)
    else:
        config = Config()

    env_password = os.environ.get(PASSWORD_ENV)
    if env_password:
        config = replace(config, password=env_password)

    return config
