"""Tests for periphery_review/config.py"""

import textwrap
from pathlib import Path

import pytest

from periphery_review.config import Config, ConfigError, generate_template, load


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_config(tmp_path: Path, content: str) -> Path:
    p = tmp_path / "periphery.yaml"
    p.write_text(textwrap.dedent(content), encoding="utf-8")
    return p


VALID_YAML = """\
    periphery:
      binary_path: "/opt/periphery"
      format: json
      timeout: 600
    options:
      project: "App.xcodeproj"
      schemes: ["App", "AppTests"]
      clean_build: true
    """


# ---------------------------------------------------------------------------
# load() — happy path
# ---------------------------------------------------------------------------

def test_load_valid_config(tmp_path):
    config = load(str(write_config(tmp_path, VALID_YAML)))
    assert config.binary_path == "/opt/periphery"
    assert config.format == "json"
    assert config.timeout == 600
    assert config.options == {
        "project": "App.xcodeproj",
        "schemes": ["App", "AppTests"],
        "clean_build": True,
    }


def test_load_defaults_for_missing_sections(tmp_path):
    config = load(str(write_config(tmp_path, "")))
    assert config == Config()


def test_option_order_is_preserved(tmp_path):
    config = load(str(write_config(tmp_path, VALID_YAML)))
    assert list(config.options) == ["project", "schemes", "clean_build"]


def test_null_timeout_disables_it(tmp_path):
    p = write_config(tmp_path, """\
        periphery:
          timeout: null
        """)
    assert load(str(p)).timeout is None


# ---------------------------------------------------------------------------
# load() — errors
# ---------------------------------------------------------------------------

def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load(str(tmp_path / "no-such-file.yaml"))


def test_load_malformed_yaml(tmp_path):
    p = write_config(tmp_path, "options: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load(str(p))


def test_load_non_mapping_root(tmp_path):
    p = write_config(tmp_path, "- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load(str(p))


def test_load_options_must_be_mapping(tmp_path):
    p = write_config(tmp_path, "options: [clean_build]\n")
    with pytest.raises(ConfigError, match="options"):
        load(str(p))


@pytest.mark.parametrize("value", ["soon", 0, -5, True])
def test_load_invalid_timeout(tmp_path, value):
    p = write_config(tmp_path, f"periphery:\n  timeout: {str(value).lower()}\n")
    with pytest.raises(ConfigError, match="timeout"):
        load(str(p))


# ---------------------------------------------------------------------------
# load() — environment variable overrides
# ---------------------------------------------------------------------------

def test_env_binary_overrides_config(tmp_path, monkeypatch):
    monkeypatch.setenv("PERIPHERY_BINARY", "/usr/local/bin/periphery")
    config = load(str(write_config(tmp_path, VALID_YAML)))
    assert config.binary_path == "/usr/local/bin/periphery"


def test_env_format_overrides_config(tmp_path, monkeypatch):
    monkeypatch.setenv("PERIPHERY_FORMAT", "checkstyle")
    config = load(str(write_config(tmp_path, VALID_YAML)))
    assert config.format == "checkstyle"


# ---------------------------------------------------------------------------
# generate_template()
# ---------------------------------------------------------------------------

def test_generate_template_creates_loadable_file(tmp_path):
    out = tmp_path / "periphery.yaml"
    generate_template(str(out))
    config = load(str(out))
    assert config.format == "checkstyle"
    assert config.options["clean_build"] is True


def test_generate_template_refuses_to_overwrite(tmp_path):
    out = tmp_path / "periphery.yaml"
    out.write_text("existing content")
    with pytest.raises(ConfigError, match="already exists"):
        generate_template(str(out))
