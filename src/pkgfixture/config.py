"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pkgfixture.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    seed: int = Field(alias="PKGFIXTURE_SEED", default=1664)
    test_branch: str = Field(alias="PKGFIXTURE_TEST_BRANCH", default="test")
    switch: str = Field(alias="PKGFIXTURE_SWITCH", default="system")
    dump_contents: int = Field(alias="PKGFIXTURE_DUMP_CONTENTS", default=1)

    git_bin: str = Field(alias="PKGFIXTURE_GIT_BIN", default="git")
    git_author_name: str = Field(alias="PKGFIXTURE_GIT_AUTHOR_NAME", default="pkgfixture")
    git_author_email: str = Field(
        alias="PKGFIXTURE_GIT_AUTHOR_EMAIL", default="pkgfixture@localhost"
    )
    opam_bin: str = Field(alias="PKGFIXTURE_OPAM_BIN", default="opam")
    opam_debug: int = Field(alias="PKGFIXTURE_OPAM_DEBUG", default=0)
    command_timeout_seconds: float = Field(
        alias="PKGFIXTURE_COMMAND_TIMEOUT_SECONDS", default=120.0
    )


def validate_settings(settings: Settings) -> None:
    invalid: list[str] = []
    if settings.seed < 0:
        invalid.append("PKGFIXTURE_SEED(must be >= 0)")
    if settings.command_timeout_seconds <= 0:
        invalid.append("PKGFIXTURE_COMMAND_TIMEOUT_SECONDS(must be > 0)")
    required_non_empty = {
        "PKGFIXTURE_TEST_BRANCH": settings.test_branch,
        "PKGFIXTURE_SWITCH": settings.switch,
        "PKGFIXTURE_GIT_BIN": settings.git_bin,
        "PKGFIXTURE_OPAM_BIN": settings.opam_bin,
        "PKGFIXTURE_GIT_AUTHOR_NAME": settings.git_author_name,
        "PKGFIXTURE_GIT_AUTHOR_EMAIL": settings.git_author_email,
    }
    for key, value in required_non_empty.items():
        if not value.strip():
            invalid.append(key)

    if invalid:
        keys = ", ".join(sorted(set(invalid)))
        raise ConfigError(f"invalid configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
