"""Logging helpers for the exporter process."""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "trojan_go_exporter"


class ExporterFormatter(logging.Formatter):
    """Formatter that strips the common 'trojan_go_exporter.' prefix."""

    PREFIX = f"{PACKAGE_LOGGER}."

    def format(self, record: logging.LogRecord) -> str:
        original_name = record.name
        if original_name.startswith(self.PREFIX):
            record.name = original_name[len(self.PREFIX):]
        try:
            return super().format(record)
        finally:
            record.name = original_name


def configure_logging(level_name: str) -> int:
    """Install a single stream handler on the root logger and return the level."""

    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {level_name!r}")

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        ExporterFormatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    logging.getLogger(PACKAGE_LOGGER).info(
        "Logging configured at level %s", logging.getLevelName(level)
    )
    return level
