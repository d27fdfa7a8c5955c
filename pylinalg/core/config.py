"""
Process-wide settings.

Settings are held in a single frozen dataclass. Changing a value swaps in
a new Settings instance, so a reader never observes a half-applied update.

Usage:
    from pylinalg.core.config import configure, settings_context

    configure(display_precision=3)

    with settings_context(parallel_threshold=1024):
        big.to_array()
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Iterator, Literal

from pylinalg.core.exceptions import ValidationError


@dataclass(frozen=True)
class Settings:
    """
    Tunable library settings.

    Attributes:
        max_display_rows: Rows shown by str() before eliding
        max_display_columns: Columns shown by str() before eliding
        display_precision: Significant digits in previews
        parallel_threshold: Element count at which bulk loops fan out to threads
        max_workers: Thread pool size (None lets the executor decide)
        provider: Preferred execution provider ('cpu', 'gpu' or 'auto')
    """
    max_display_rows: int = 8
    max_display_columns: int = 6
    display_precision: int = 6
    parallel_threshold: int = 65536
    max_workers: int | None = None
    provider: Literal['cpu', 'gpu', 'auto'] = 'cpu'

    def __post_init__(self) -> None:
        for name in ('max_display_rows', 'max_display_columns', 'display_precision'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValidationError(f"{name}: must be a positive integer, got {value!r}")
        if not isinstance(self.parallel_threshold, int) or self.parallel_threshold < 1:
            raise ValidationError(
                f"parallel_threshold: must be a positive integer, got {self.parallel_threshold!r}"
            )
        if self.max_workers is not None and (
            not isinstance(self.max_workers, int) or self.max_workers < 1
        ):
            raise ValidationError(
                f"max_workers: must be None or a positive integer, got {self.max_workers!r}"
            )
        if self.provider not in ('cpu', 'gpu', 'auto'):
            raise ValidationError(
                f"provider: must be 'cpu', 'gpu' or 'auto', got {self.provider!r}"
            )


_lock = threading.Lock()
_settings = Settings()
_FIELD_NAMES = frozenset(f.name for f in fields(Settings))


def get_settings() -> Settings:
    """Return the current settings."""
    return _settings


def configure(**changes: Any) -> Settings:
    """
    Replace individual settings.

    Returns:
        The new Settings instance

    Raises:
        ValidationError: If a key is unknown or a value is invalid
    """
    global _settings
    unknown = set(changes) - _FIELD_NAMES
    if unknown:
        raise ValidationError(f"configure: unknown settings {sorted(unknown)}")
    with _lock:
        _settings = replace(_settings, **changes)
        return _settings


@contextmanager
def settings_context(**changes: Any) -> Iterator[Settings]:
    """Apply settings for the duration of a with-block, then restore."""
    global _settings
    previous = _settings
    try:
        yield configure(**changes)
    finally:
        with _lock:
            _settings = previous
