"""Runtime settings for the merge pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

LOGGER = logging.getLogger("combinepdf.config")

ENV_PREFIX = "COMBINEPDF_"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    LOGGER.warning("Ignoring unrecognised value %r for %s%s", value, ENV_PREFIX, name)
    return default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        LOGGER.warning("Ignoring non-integer value %r for %s%s", value, ENV_PREFIX, name)
        return default


@dataclass(frozen=True)
class MergeSettings:
    """Options controlling how documents are merged and written.

    Attributes:
        pdf_version: Header version written to the merged file.
        compress: Flate-encode unfiltered streams before saving.
        copy_metadata: Carry the first input's ``/Info`` dictionary over.
        prune: Drop objects unreachable from the trailer before renumbering.
        workers: Number of threads used to load inputs.
    """

    pdf_version: str = "1.5"
    compress: bool = True
    copy_metadata: bool = True
    prune: bool = False
    workers: int = 1

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError("workers must be at least 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MergeSettings":
        """Build settings from ``COMBINEPDF_*`` environment variables."""

        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            pdf_version=env.get(ENV_PREFIX + "PDF_VERSION", defaults.pdf_version).strip(),
            compress=_env_flag(env, "COMPRESS", defaults.compress),
            copy_metadata=_env_flag(env, "COPY_METADATA", defaults.copy_metadata),
            prune=_env_flag(env, "PRUNE", defaults.prune),
            workers=max(1, _env_int(env, "WORKERS", defaults.workers)),
        )

    def with_updates(self, **overrides: Any) -> "MergeSettings":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


__all__ = ["MergeSettings", "ENV_PREFIX"]
