"""Base analyzer class for all analysis components in the toolbox."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAnalyser(ABC):
    """Abstract base class for data analysis components.

    All analyzers must:
    1. Accept a DatasetView in their constructor
    2. Implement fit() to perform the analysis and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    ### Adding a New Analyzer

    **1. Create analyzer class** (in `analysis/my_analyzer.py`):

    ```python
    @dataclass(frozen=True)
    class MyAnalysisResult:
        summary: pd.DataFrame

    class MyAnalyzer(BaseAnalyser):
        def __init__(self, view: DatasetView):
            self._view = view
            self._fitted = False

        def fit(self) -> "MyAnalyzer":
            # ... computation logic ...
            self._fitted = True
            return self

        def result(self) -> MyAnalysisResult:
            self._check_fitted()
            return MyAnalysisResult(...)
    ```

    **2. Add a factory method** (``make_my_analyzer``) to `BaseDataset` that builds the view.
    """

    _fitted: bool = False

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Fit the analyzer to the data.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return analysis results as a frozen dataclass instance.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...

    def _check_fitted(self) -> None:
        if not self._fitted:
            raise ValueError(f"{type(self).__name__} is not fitted. Call fit() first.")
