"""structlog wiring for fixture runs: console output for drivers, JSON in production."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from pkgfixture.config import Settings
from pkgfixture.ids import PackageId

HANDLER_NAME = "pkgfixture"


def stringify_fixture_values(
    _logger: WrappedLogger, _method: str, event_dict: EventDict
) -> EventDict:
    """Render bound paths and package identities as plain text."""
    for key, value in event_dict.items():
        if isinstance(value, (Path, PackageId)):
            event_dict[key] = str(value)
    return event_dict


def shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        stringify_fixture_values,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def build_formatter(json_output: bool, *, colors: bool = False) -> logging.Formatter:
    if json_output:
        renderer: Processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        # Sync reports span several lines; the console renderer keeps them intact.
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    level: str,
    json_output: bool | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install the pkgfixture handler on the root logger and return it.

    Args:
        level: Log level name; unknown names fall back to INFO.
        json_output: Force JSON lines. If None, JSON only when APP_ENV=prod.
        stream: Destination, stderr by default.

    A handler installed by an earlier call is replaced; handlers owned by
    anything else stay attached.
    """
    if json_output is None:
        json_output = os.environ.get("APP_ENV", "dev") == "prod"
    stream = stream or sys.stderr

    structlog.configure(
        processors=[
            *shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(build_formatter(json_output, colors=stream.isatty()))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def configure_from_settings(settings: Settings) -> logging.Handler:
    return configure_logging(settings.log_level, json_output=settings.app_env == "prod")


def bind_scenario(
    *, repo: Path | None = None, nv: PackageId | None = None, **extra: object
) -> None:
    """Bind the scenario's repository and current package to every later log line."""
    values: dict[str, object] = dict(extra)
    if repo is not None:
        values["repo"] = repo
    if nv is not None:
        values["nv"] = nv
    structlog.contextvars.bind_contextvars(**values)


def clear_scenario() -> None:
    structlog.contextvars.clear_contextvars()
