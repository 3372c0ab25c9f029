"""Serialization of song tables to delimited text and to pandas pickles.

Two formats are supported:

- **text** (CSV): header row plus one record per line. Factors are written as their
  plain labels; level sequences and codes are lost on the way back.
- **structured** (pickle): preserves the frame exactly, including factor level
  sequences, codes, null markers, dtypes and row order.

Write failures and read failures are not caught here; they abort the caller.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import pandas as pd

from .compare import FrameComparison, compare_frames


logger = logging.getLogger(__name__)

Format = Literal["text", "structured"]


class RoundTripError(ValueError):
    """Raised when a lossless round trip produces a frame that differs from the original."""


@dataclass(frozen=True)
class RoundTripResult:
    """Outcome of writing a frame and reading it back.

    Attributes:
        path: File the frame was written to.
        fmt: Format used for the round trip.
        restored: Frame read back from ``path``.
        comparison: Structural comparison of the original against ``restored``.
    """

    path: Path
    fmt: Format
    restored: pd.DataFrame
    comparison: FrameComparison

    @property
    def lossless(self) -> bool:
        return self.comparison.equal


def _prepare_path(path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def write_text(df: pd.DataFrame, path: str | Path) -> Path:
    """Write ``df`` as comma-separated text with a header row and no index column."""
    path = _prepare_path(path)
    df.to_csv(path, index=False)
    logger.info("Wrote %d rows as text to %s", len(df), path)
    return path


def read_text(path: str | Path) -> pd.DataFrame:
    """Read a comma-separated file with pandas' best-effort type inference."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Text file not found at: {path}")
    return pd.read_csv(path)


def write_structured(df: pd.DataFrame, path: str | Path) -> Path:
    """Pickle ``df`` so that it can be restored exactly."""
    path = _prepare_path(path)
    df.to_pickle(path)
    logger.info("Wrote %d rows (structured) to %s", len(df), path)
    return path


def read_structured(path: str | Path) -> pd.DataFrame:
    """Restore a frame written by :func:`write_structured`.

    Only read files this toolbox wrote: unpickling runs arbitrary code.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Structured file not found at: {path}")
    restored = pd.read_pickle(path)
    if not isinstance(restored, pd.DataFrame):
        msg = f"Expected a pickled DataFrame in {path}, got {type(restored).__name__}."
        raise TypeError(msg)
    return restored


_WRITERS = {"text": write_text, "structured": write_structured}
_READERS = {"text": read_text, "structured": read_structured}


def round_trip(df: pd.DataFrame, path: str | Path, fmt: Format) -> RoundTripResult:
    """Write ``df`` in the given format, read it back and compare against the original."""
    if fmt not in _WRITERS:
        msg = f"Invalid fmt='{fmt}'. Use 'text' or 'structured'."
        raise ValueError(msg)

    path = _WRITERS[fmt](df, path)
    restored = _READERS[fmt](path)
    comparison = compare_frames(df, restored)
    logger.info("%s round trip via %s: %s", fmt, path.name, comparison.summary())
    return RoundTripResult(path=path, fmt=fmt, restored=restored, comparison=comparison)


def assert_lossless(df: pd.DataFrame, path: str | Path) -> RoundTripResult:
    """Run a structured round trip and fail loudly if anything changed.

    Raises:
        RoundTripError: If the restored frame differs from ``df``.
    """
    result = round_trip(df, path, "structured")
    if not result.lossless:
        msg = f"Structured round trip through {result.path} is not lossless: {result.comparison.summary()}"
        raise RoundTripError(msg)
    return result
