import importlib

import pytest

import backend.app.config as app_config


@pytest.fixture()
def reload_config(monkeypatch):
    def _reload():
        return importlib.reload(app_config)

    yield _reload

    monkeypatch.undo()
    importlib.reload(app_config)


def test_defaults_apply_without_environment(reload_config, monkeypatch):
    monkeypatch.delenv("CREDGRAPH_CRED_ALPHA", raising=False)
    monkeypatch.delenv("CREDGRAPH_NODE_LIST_LIMIT", raising=False)

    config = reload_config().AppConfig()

    assert config.params.alpha == 0.05
    assert config.node_list_limit == 100
    assert config.credgraph.solver.max_iterations == 1000


def test_environment_overrides_defaults(reload_config, monkeypatch):
    monkeypatch.setenv("CREDGRAPH_CRED_ALPHA", "0.3")
    monkeypatch.setenv("CREDGRAPH_NODE_LIST_LIMIT", "7")
    monkeypatch.setenv("CREDGRAPH_INTERVAL_CALENDAR", "month")

    config = reload_config().AppConfig()

    assert config.params.alpha == pytest.approx(0.3)
    assert config.node_list_limit == 7
    assert config.credgraph.intervals.calendar == "month"
    assert config.app_name == "credgraph-backend"
