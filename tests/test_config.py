"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from dartvs_services.config import DartVSConfig, load_config
from dartvs_services.errors import DartVSConfigError


def test_defaults_without_file():
    assert load_config(environ={}) == DartVSConfig()


def test_loads_yaml_file(tmp_path):
    path = tmp_path / "dartvs.yaml"
    path.write_text("host: analyzer.local\nport: 9100\nresponse_timeout: 3\n", encoding="utf-8")

    config = load_config(path, environ={})

    assert config.host == "analyzer.local"
    assert config.port == 9100
    assert config.response_timeout == 3.0
    assert config.loading_text == "Loading..."


def test_path_from_environment(tmp_path):
    path = tmp_path / "dartvs.yaml"
    path.write_text("loading_text: Thinking...\n", encoding="utf-8")

    config = load_config(environ={"DARTVS_CONFIG": str(path)})

    assert config.loading_text == "Thinking..."


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "dartvs.yaml"
    path.write_text("port: 9100\n", encoding="utf-8")

    config = load_config(path, environ={"DARTVS_LSP_PORT": "9200", "DARTVS_LSP_HOST": "10.1.1.1"})

    assert config.port == 9200
    assert config.host == "10.1.1.1"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "dartvs.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, environ={}) == DartVSConfig()


@pytest.mark.parametrize(
    "content",
    [
        "colour: blue\n",
        "port: eighty\n",
        "- just\n- a list\n",
        "host: [unclosed\n",
    ],
)
def test_invalid_files_are_rejected(tmp_path, content):
    path = tmp_path / "dartvs.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(DartVSConfigError):
        load_config(path, environ={})


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(DartVSConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml", environ={})


def test_invalid_port_override():
    with pytest.raises(DartVSConfigError, match="DARTVS_LSP_PORT"):
        load_config(environ={"DARTVS_LSP_PORT": "http"})
