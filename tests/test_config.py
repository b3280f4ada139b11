"""
Tests for the configuration singleton
"""

import threading

import pytest

from migrationgraph.config import Config, DefaultConfig, get_config, reload_config


class TestConfig:
    """Tests for Config"""

    def test_singleton(self):
        assert Config() is Config.get_instance()
        assert get_config() is Config()

    def test_defaults(self):
        config = get_config()

        assert config.log_level == DefaultConfig.LOG_LEVEL
        assert config.max_selection_size == DefaultConfig.MAX_SELECTION_SIZE
        assert config.max_graph_size == DefaultConfig.MAX_GRAPH_SIZE
        assert config.allow_partial_selection is False
        assert config.mermaid_max_nodes == DefaultConfig.MERMAID_MAX_NODES

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MIGRATIONGRAPH_LOG_LEVEL", "debug")
        monkeypatch.setenv("MIGRATIONGRAPH_MAX_SELECTION_SIZE", "10")
        monkeypatch.setenv("MIGRATIONGRAPH_ALLOW_PARTIAL_SELECTION", "yes")
        monkeypatch.setenv("MIGRATIONGRAPH_AUTO_LOG_ENABLED", "false")

        config = reload_config()

        assert config.log_level == "DEBUG"
        assert config.max_selection_size == 10
        assert config.allow_partial_selection is True
        assert config.auto_log_enabled is False
        assert config.cache_dir == str(tmp_path / "cache")

    def test_invalid_int_falls_back(self, monkeypatch):
        monkeypatch.setenv("MIGRATIONGRAPH_MAX_GRAPH_SIZE", "lots")

        assert reload_config().max_graph_size == DefaultConfig.MAX_GRAPH_SIZE

    @pytest.mark.parametrize("key,value", [
        ("MIGRATIONGRAPH_LOG_LEVEL", "LOUD"),
        ("MIGRATIONGRAPH_MAX_SELECTION_SIZE", "0"),
        ("MIGRATIONGRAPH_MAX_GRAPH_SIZE", "-1"),
        ("MIGRATIONGRAPH_MERMAID_MAX_NODES", "0"),
    ])
    def test_invalid_values(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)

        with pytest.raises(ValueError):
            reload_config()

    def test_concurrent_access_single_instance(self):
        Config.reset_instance()
        instances = []

        def worker():
            instances.append(Config.get_instance())

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(i) for i in instances}) == 1

    def test_repr(self):
        assert "Config(output_dir=" in repr(get_config())
