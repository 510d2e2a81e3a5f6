import pytest

from pkgfixture.config import get_settings, validate_settings
from pkgfixture.errors import ConfigError


def test_defaults_are_valid() -> None:
    settings = get_settings()
    assert settings.seed == 1664
    assert settings.test_branch == "test"
    assert settings.switch == "system"
    validate_settings(settings)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PKGFIXTURE_SEED", "12")
    monkeypatch.setenv("PKGFIXTURE_OPAM_BIN", "/opt/opam/bin/opam")
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.seed == 12
    assert settings.opam_bin == "/opt/opam/bin/opam"


def test_validate_settings_lists_every_invalid_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PKGFIXTURE_SEED", "-1")
    monkeypatch.setenv("PKGFIXTURE_COMMAND_TIMEOUT_SECONDS", "0")
    monkeypatch.setenv("PKGFIXTURE_TEST_BRANCH", " ")
    get_settings.cache_clear()
    with pytest.raises(ConfigError) as info:
        validate_settings(get_settings())
    message = str(info.value)
    assert "PKGFIXTURE_SEED" in message
    assert "PKGFIXTURE_COMMAND_TIMEOUT_SECONDS" in message
    assert "PKGFIXTURE_TEST_BRANCH" in message
