"""Tests for chirp_static.config — durations and StaticConfig validation."""

from pathlib import Path

import pytest

from chirp_static.config import MAX_MAX_AGE_MS, AppConfig, StaticConfig, parse_duration
from chirp_static.errors import ConfigurationError


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, 0),
            (1500, 1500),
            (2.5, 2),
            ("250", 250),
            ("500ms", 500),
            ("30s", 30_000),
            ("10m", 600_000),
            ("2h", 7_200_000),
            ("1d", 86_400_000),
            ("1w", 604_800_000),
            ("1.5s", 1500),
            (" 1D ", 86_400_000),
        ],
    )
    def test_values(self, value, expected) -> None:
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "soon", "1 fortnight", "-5s", -1, True, None])
    def test_invalid(self, value) -> None:
        with pytest.raises(ConfigurationError):
            parse_duration(value)


class TestAppConfig:
    def test_defaults(self) -> None:
        assert AppConfig().debug is False

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.debug = True  # type: ignore[misc]


class TestStaticConfigBuild:
    def test_defaults(self, tmp_path) -> None:
        config = StaticConfig.build(tmp_path)
        assert config.root == str(tmp_path.resolve())
        assert config.fallthrough is True
        assert config.redirect is True
        assert config.set_headers is None
        assert config.max_age == 0
        assert config.prefer_precompressed is False
        assert config.index == ("index.html",)
        assert config.dotfiles == "ignore"
        assert config.extensions == ()

    def test_relative_root_resolved(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        config = StaticConfig.build("public")
        assert config.root == str(Path(tmp_path, "public").resolve())

    def test_max_age_duration_string(self, tmp_path) -> None:
        assert StaticConfig.build(tmp_path, max_age="2h").max_age == 7_200_000

    def test_maxage_alias(self, tmp_path) -> None:
        assert StaticConfig.build(tmp_path, maxage=1000).max_age == 1000

    def test_max_age_wins_over_alias(self, tmp_path) -> None:
        assert StaticConfig.build(tmp_path, max_age=10, maxage=20).max_age == 10

    def test_max_age_capped_at_one_year(self, tmp_path) -> None:
        assert StaticConfig.build(tmp_path, max_age="5y").max_age == MAX_MAX_AGE_MS

    def test_single_index_name(self, tmp_path) -> None:
        assert StaticConfig.build(tmp_path, index="home.htm").index == ("home.htm",)

    def test_index_disabled(self, tmp_path) -> None:
        assert StaticConfig.build(tmp_path, index=False).index == ()

    def test_extensions_normalized(self, tmp_path) -> None:
        config = StaticConfig.build(tmp_path, extensions=[".html", "htm"])
        assert config.extensions == ("html", "htm")

    def test_frozen(self, tmp_path) -> None:
        config = StaticConfig.build(tmp_path)
        with pytest.raises(AttributeError):
            config.redirect = False  # type: ignore[misc]


class TestStaticConfigValidation:
    def test_missing_root(self) -> None:
        with pytest.raises(ConfigurationError, match="root path required"):
            StaticConfig.build(None)

    def test_non_string_root(self) -> None:
        with pytest.raises(ConfigurationError, match="root path must be a string"):
            StaticConfig.build(["/srv"])  # type: ignore[arg-type]

    def test_unknown_option(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Unknown option"):
            StaticConfig.build(tmp_path, preferPrecompressed=True)

    def test_non_bool_flag(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="fallthrough must be a bool"):
            StaticConfig.build(tmp_path, fallthrough="yes")

    def test_set_headers_must_be_callable(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="set_headers must be callable"):
            StaticConfig.build(tmp_path, set_headers=42)

    def test_bad_dotfiles(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="dotfiles"):
            StaticConfig.build(tmp_path, dotfiles="hide")

    def test_bad_duration(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid duration"):
            StaticConfig.build(tmp_path, max_age="forever")

    def test_empty_index_name(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="index"):
            StaticConfig.build(tmp_path, index=[""])
