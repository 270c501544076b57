"""Defaults for user-triggered list imports."""

from __future__ import annotations

import os
from dataclasses import dataclass

from kioku.domain.model import ImportMethod

from .errors import ConfigurationError

DEFAULT_IMPORT_METHOD = ImportMethod.LATEST


@dataclass(frozen=True, slots=True)
class ImportConfig:
    default_method: ImportMethod = DEFAULT_IMPORT_METHOD


def get_import_config() -> ImportConfig:
    """Read ``KIOKU_IMPORT_METHOD`` (override, keep or latest)."""

    raw = os.getenv("KIOKU_IMPORT_METHOD", "").strip().lower()
    if not raw:
        return ImportConfig()
    try:
        return ImportConfig(default_method=ImportMethod(raw))
    except ValueError as exc:
        choices = ", ".join(method.value for method in ImportMethod)
        raise ConfigurationError(
            f"KIOKU_IMPORT_METHOD must be one of {choices}, got {raw!r}"
        ) from exc
