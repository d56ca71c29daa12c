"""
tsh Configuration Loader

Configuration management for the shell:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Runtime configuration updates

Author: YSNRFD
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from tsh.exceptions import ConfigError


WAIT_POLICIES = ("pipeline", "stage")

# Lowest accepted per-stage argument limit.
MIN_ARGS = 25


@dataclass
class ShellConfig:
    """Shell configuration settings."""
    prompt: str = "$ "
    quit_keyword: str = "quit"
    max_args: int = 1024
    wait_policy: str = "pipeline"
    report_exec_failures: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the shell.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('tsh.json')
        >>> print(config.shell.prompt)
        $
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be loaded, parsed or validated
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Cannot read configuration file: {e}",
                path=config_path
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                "Configuration root must be a JSON object",
                path=config_path
            )

        config = self._parse_config(data)
        self.validate(config)

        self._config = config
        self._loaded = True
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'shell' in data:
            shell_data = self._section(data, 'shell')
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                quit_keyword=shell_data.get('quit_keyword', config.shell.quit_keyword),
                max_args=shell_data.get('max_args', config.shell.max_args),
                wait_policy=shell_data.get('wait_policy', config.shell.wait_policy),
                report_exec_failures=shell_data.get(
                    'report_exec_failures', config.shell.report_exec_failures
                ),
            )

        if 'logging' in data:
            log_data = self._section(data, 'logging')
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        return config

    @staticmethod
    def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
        section = data[name]
        if not isinstance(section, dict):
            raise ConfigError(
                f"Section '{name}' must be a JSON object",
                key=name
            )
        return section

    @staticmethod
    def validate(config: Config) -> None:
        """
        Check a configuration for values the shell cannot run with.

        Raises:
            ConfigError: On the first invalid value found
        """
        shell = config.shell

        if not isinstance(shell.prompt, str):
            raise ConfigError("Prompt must be a string", key="shell.prompt")

        keyword = shell.quit_keyword
        if not isinstance(keyword, str) or not keyword or keyword.split() != [keyword]:
            raise ConfigError(
                "Quit keyword must be a single non-empty word",
                key="shell.quit_keyword"
            )

        if isinstance(shell.max_args, bool) or not isinstance(shell.max_args, int) \
                or shell.max_args < MIN_ARGS:
            raise ConfigError(
                f"Argument limit must be an integer >= {MIN_ARGS}",
                key="shell.max_args"
            )

        if shell.wait_policy not in WAIT_POLICIES:
            raise ConfigError(
                f"Wait policy must be one of {', '.join(WAIT_POLICIES)}",
                key="shell.wait_policy"
            )

        level = config.logging.level
        if not isinstance(level, str) or level.upper() not in (
            "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
        ):
            raise ConfigError(f"Unknown log level: {level}", key="logging.level")

        log_file = config.logging.log_file
        if log_file is not None and not isinstance(log_file, str):
            raise ConfigError("Log file must be a path string", key="logging.log_file")

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'shell.prompt')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'shell.wait_policy')
            value: Value to set

        Note:
            This modifies configuration at runtime but does not
            persist changes to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if hasattr(obj, final_key):
            setattr(obj, final_key, value)
            self._loaded = True
        else:
            raise ConfigError(f"Invalid configuration key: {key}", key=key)

    def reset(self) -> None:
        """Drop any loaded configuration and go back to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, list):
                return [dataclass_to_dict(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: dataclass_to_dict(v) for k, v in obj.items()}
            else:
                return obj

        return dataclass_to_dict(self._config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
