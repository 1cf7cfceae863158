"""Logging utilities for glyphcompose."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_HANDLER_TAG = "_glyphcompose_handler"


@dataclass
class AcceptStats:
    """Statistics from an accept run."""

    positioned_count: int = 0
    cascaded_count: int = 0
    fused_count: int = 0
    kerned_count: int = 0
    skipped_count: int = 0
    skipped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def resolved_count(self) -> int:
        """Pairs that received a cache entry in this run."""
        return self.positioned_count + self.cascaded_count + self.kerned_count


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging to the console and, optionally, a file.

    Handlers installed by an earlier call are replaced, so the CLI can be
    invoked repeatedly in one process.

    Args:
        log_file: Path to log file (console only if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(console_handler, _HANDLER_TAG, True)
    root_logger.addHandler(console_handler)
    root_level = console_handler.level

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        setattr(file_handler, _HANDLER_TAG, True)
        root_logger.addHandler(file_handler)
        root_level = min(root_level, file_handler.level)

    root_logger.setLevel(root_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphcompose")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file is not None else None,
        level=file_level,
    )

    return logger


class AcceptLogger:
    """Logger for tracking accept progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("glyphcompose.accept")
        self._stats = AcceptStats()

    def log_positioned(self, base: str, mark: str, x: float, y: float, fused: bool) -> None:
        """Log a newly accepted mark offset."""
        self._logger.debug(
            "Pair positioned",
            base=base,
            mark=mark,
            x=round(x, 2),
            y=round(y, 2),
            fused=fused,
        )
        self._stats.positioned_count += 1
        if fused:
            self._stats.fused_count += 1

    def log_cascaded(self, base: str, mark: str, source: str) -> None:
        """Log an offset copied to an attachment-class sibling."""
        self._logger.debug("Offset cascaded", base=base, mark=mark, source=source)
        self._stats.cascaded_count += 1

    def log_fused(self, target: str) -> None:
        """Log a baked outline that did not come with a fresh position."""
        self._logger.debug("Outline fused", target=target)
        self._stats.fused_count += 1

    def log_kerned(self, left: str, right: str, value: int) -> None:
        """Log a newly accepted kerning value."""
        self._logger.debug("Pair kerned", left=left, right=right, value=value)
        self._stats.kerned_count += 1

    def log_skipped(self, target: str, reason: str) -> None:
        """Log a pair that could not be resolved yet."""
        self._logger.debug("Pair skipped", target=target, reason=reason)
        self._stats.skipped_count += 1
        self._stats.skipped.append((target, reason))

    def log_summary(self) -> None:
        """Log the totals of the run."""
        self._logger.info(
            "Accept complete",
            positioned=self._stats.positioned_count,
            cascaded=self._stats.cascaded_count,
            fused=self._stats.fused_count,
            kerned=self._stats.kerned_count,
            skipped=self._stats.skipped_count,
        )

    @property
    def stats(self) -> AcceptStats:
        """Get current accept statistics."""
        return self._stats
