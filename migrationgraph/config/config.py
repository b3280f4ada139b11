"""
Configuration module for MigrationGraph
Supports configuration through environment variables and a .env file
"""

import os
import threading
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


class DefaultConfig:
    """Default configuration values"""
    # Paths
    OUTPUT_DIR = './output'
    CACHE_DIR = './cache/components'

    # Logging
    LOG_LEVEL = 'INFO'
    LOG_DIR = './logs'
    AUTO_LOG_ENABLED = True  # Create a log file per command automatically

    # Caller-side bounds (the engine itself never limits input)
    MAX_SELECTION_SIZE = 500
    MAX_GRAPH_SIZE = 50000
    ALLOW_PARTIAL_SELECTION = False

    # Export
    MERMAID_MAX_NODES = 50


class Config:
    """
    MigrationGraph configuration (thread-safe singleton)

    Usage:
        config = Config.get_instance()  # Recommended
        # or
        config = get_config()

    Thread-safe: yes (threading.Lock with double-check locking)
    """

    _instance: Optional['Config'] = None
    _lock: threading.Lock = threading.Lock()
    _initialized: bool = False

    def __new__(cls) -> 'Config':
        """
        Singleton through __new__

        Returns:
            The single Config instance
        """
        if cls._instance is None:
            with cls._lock:
                # Double-check locking pattern
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Load settings (runs only once per instance)"""
        if Config._initialized:
            return

        with Config._lock:
            if Config._initialized:
                return

            # Load .env, then environment.env, from the project root
            base_path = Path(__file__).parent.parent.parent
            env_path = base_path / '.env'
            if not env_path.exists():
                env_path = base_path / 'environment.env'

            if env_path.exists():
                load_dotenv(env_path)
                self._env_loaded = True
            else:
                self._env_loaded = False

            # Paths
            self.output_dir = os.getenv('MIGRATIONGRAPH_OUTPUT_DIR', DefaultConfig.OUTPUT_DIR)
            self.cache_dir = os.getenv('MIGRATIONGRAPH_CACHE_DIR', DefaultConfig.CACHE_DIR)

            # Logging
            self.log_level = os.getenv('MIGRATIONGRAPH_LOG_LEVEL', DefaultConfig.LOG_LEVEL).upper()
            self.log_file = os.getenv('MIGRATIONGRAPH_LOG_FILE')  # Optional
            self.log_dir = os.getenv('MIGRATIONGRAPH_LOG_DIR', DefaultConfig.LOG_DIR)
            self.auto_log_enabled = self._getenv_bool('MIGRATIONGRAPH_AUTO_LOG_ENABLED',
                                                      DefaultConfig.AUTO_LOG_ENABLED)

            # Input bounds
            self.max_selection_size = self._getenv_int('MIGRATIONGRAPH_MAX_SELECTION_SIZE',
                                                       DefaultConfig.MAX_SELECTION_SIZE)
            self.max_graph_size = self._getenv_int('MIGRATIONGRAPH_MAX_GRAPH_SIZE',
                                                   DefaultConfig.MAX_GRAPH_SIZE)
            self.allow_partial_selection = self._getenv_bool('MIGRATIONGRAPH_ALLOW_PARTIAL_SELECTION',
                                                             DefaultConfig.ALLOW_PARTIAL_SELECTION)

            # Export
            self.mermaid_max_nodes = self._getenv_int('MIGRATIONGRAPH_MERMAID_MAX_NODES',
                                                      DefaultConfig.MERMAID_MAX_NODES)

            self._validate()

            Config._initialized = True

    @classmethod
    def get_instance(cls) -> 'Config':
        """
        Return the singleton configuration (recommended)

        Example:
            >>> config = Config.get_instance()
            >>> config.max_selection_size
            500
        """
        return cls()

    @classmethod
    def reset_instance(cls) -> None:
        """
        Reset the singleton (tests only)
        """
        with cls._lock:
            cls._instance = None
            cls._initialized = False

    @staticmethod
    def _getenv_int(key: str, default: int) -> int:
        """Read env var as int"""
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    @staticmethod
    def _getenv_bool(key: str, default: bool = False) -> bool:
        """Read env var as bool"""
        value = os.getenv(key, '').lower()
        if not value:
            return default
        return value in ('true', '1', 'yes', 'on')

    def _validate(self) -> None:
        """Validate settings"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.log_level not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")

        if self.max_selection_size < 1:
            raise ValueError("MAX_SELECTION_SIZE must be positive")

        if self.max_graph_size < 1:
            raise ValueError("MAX_GRAPH_SIZE must be positive")

        if self.mermaid_max_nodes < 1:
            raise ValueError("MERMAID_MAX_NODES must be positive")

    def __repr__(self) -> str:
        return (f"Config(output_dir={self.output_dir}, cache_dir={self.cache_dir}, "
                f"log_level={self.log_level}, env_loaded={self._env_loaded})")


def get_config() -> Config:
    """
    Return the global configuration

    Returns:
        Config instance
    """
    return Config.get_instance()


def reload_config() -> Config:
    """
    Reload configuration from the environment (useful in tests)

    Returns:
        New Config instance
    """
    Config.reset_instance()
    return Config.get_instance()
