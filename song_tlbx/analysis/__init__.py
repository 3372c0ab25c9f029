"""Analysis modules for checks over song datasets."""

from .base_analyser import BaseAnalyser
from .coordinate_uniqueness import CoordinateUniquenessChecker, CoordinateUniquenessResult, first_locations


__all__ = [
    "BaseAnalyser",
    "CoordinateUniquenessChecker",
    "CoordinateUniquenessResult",
    "first_locations",
]
