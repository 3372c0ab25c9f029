from pathlib import Path
from typing import Literal


__all__ = ["get_data_dir", "get_dataset_path", "get_output_dir"]


_DATASET_MAP: dict[str, str] = {
    "songs": "songs.csv",
}


def get_data_dir() -> Path:
    """Get the path to the data directory.

    Returns:
        Path to the ``_data`` directory at the project root
    """
    data_dir = (Path(__file__).parents[2] / "_data").resolve()
    if not data_dir.exists():
        raise FileNotFoundError(f"Data directory not found at {data_dir}")
    return data_dir


def get_dataset_path(filename: Literal["songs"] | str) -> Path:  # noqa: PYI051
    """Get the full path to a dataset file in the data directory.

    Args:
        filename: Key to known dataset or custom filename

    Returns:
        Full path to the dataset file relative to the data directory of the project

    Supported: songs.csv
    """
    data_dir = get_data_dir()
    ds_path = data_dir / _DATASET_MAP.get(filename, filename)
    if not ds_path.exists():
        raise FileNotFoundError(f"Dataset file '{filename}' not found at {ds_path}")

    return ds_path


def get_output_dir(create: bool = True) -> Path:
    """Get the directory pipeline outputs are written to (``_output`` at the project root)."""
    out_dir = (Path(__file__).parents[2] / "_output").resolve()
    if create:
        out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir
