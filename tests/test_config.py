"""
Tests for Configuration
=======================
Tests for GeneratorConfig and the settings loader.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storykit.config import GeneratorConfig, current_time_seed
from storykit.settings import APP_CONFIG_PATH, config_path, get_setting, resolve_path


class TestSettings:
    """Tests for app.yaml lookups."""

    def test_dotted_lookup(self):
        assert get_setting("generation.chain_length") == 2
        assert get_setting("batch.output_words") == 100

    def test_missing_setting_default(self):
        assert get_setting("generation.nope", 7) == 7
        assert get_setting("nope.deeper") is None

    def test_resolve_relative_path(self, tmp_path):
        assert resolve_path("stories", base=tmp_path) == (tmp_path / "stories").resolve()

    def test_resolve_absolute_path(self, tmp_path):
        assert resolve_path(str(tmp_path)) == tmp_path

    def test_resolve_none(self):
        with pytest.raises(ValueError):
            resolve_path(None)

    def test_bundled_config_path(self, monkeypatch):
        monkeypatch.delenv("STORYKIT_CONFIG", raising=False)
        assert config_path() == APP_CONFIG_PATH
        assert APP_CONFIG_PATH.name == "app.yaml"

    def test_config_override(self, tmp_path, monkeypatch):
        """STORYKIT_CONFIG points at another app.yaml."""
        path = tmp_path / "custom.yaml"
        path.write_text("generation:\n  chain_length: 3\n  output_words: 9\n  output_width: 30\n")
        monkeypatch.setenv("STORYKIT_CONFIG", str(path))
        assert get_setting("generation.chain_length") == 3
        config = GeneratorConfig()
        assert (config.chain_length, config.output_words, config.output_width) == (3, 9, 30)

    def test_missing_config_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORYKIT_CONFIG", str(tmp_path / "absent.yaml"))
        with pytest.raises(FileNotFoundError):
            get_setting("generation.chain_length")


class TestGeneratorConfig:
    """Tests for GeneratorConfig defaults and validation."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.chain_length == 2
        assert config.output_words == 500
        assert config.output_width == 70
        assert isinstance(config.random_seed, int)

    def test_seed_defaults_to_time(self):
        before = current_time_seed()
        config = GeneratorConfig()
        after = current_time_seed()
        assert before <= config.random_seed <= after

    def test_overrides(self):
        config = GeneratorConfig(chain_length=3, output_words=10, output_width=40, random_seed=5)
        assert (config.chain_length, config.output_words, config.output_width, config.random_seed) == (3, 10, 40, 5)

    @pytest.mark.parametrize("kwargs", [
        {"chain_length": 0},
        {"output_words": -1},
        {"output_width": 0},
        {"max_overrun_words": -5},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            GeneratorConfig(**kwargs)

    def test_make_rng_reproducible(self):
        config = GeneratorConfig(random_seed=42)
        assert config.make_rng().random() == config.make_rng().random()

    def test_missing_settings(self, monkeypatch):
        """Generation defaults must come from somewhere."""
        monkeypatch.setattr("storykit.config.get_setting", lambda path, default=None: default)
        with pytest.raises(ValueError, match="chain_length"):
            GeneratorConfig()

    def test_overrun_cap_disabled_by_null(self, tmp_path, monkeypatch):
        """A null max_overrun_words in app.yaml removes the cap."""
        path = tmp_path / "custom.yaml"
        path.write_text(
            "generation:\n  chain_length: 2\n  output_words: 9\n"
            "  output_width: 30\n  max_overrun_words: null\n"
        )
        monkeypatch.setenv("STORYKIT_CONFIG", str(path))
        assert GeneratorConfig().max_overrun_words is None

    def test_overrun_cap_default(self):
        assert GeneratorConfig().max_overrun_words == 5000
