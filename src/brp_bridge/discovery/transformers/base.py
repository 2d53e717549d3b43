"""Base class for format transformers."""

from abc import ABC, abstractmethod
from typing import Any

from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import ErrorPattern

# A corrected value plus a human-readable hint describing the change
type Transformation = tuple[Any, str]


class FormatTransformer(ABC):
    """A correction strategy for one family of error patterns."""

    name: str = "transformer"

    @abstractmethod
    def can_handle(self, pattern: ErrorPattern) -> bool:
        """Return True if this transformer knows how to fix ``pattern``."""

    @abstractmethod
    def transform(self, value: Any) -> Transformation | None:
        """Apply the generic correction for this transformer's family."""

    def transform_with_error(
        self, value: Any, error: BrpError
    ) -> Transformation | None:
        """Apply a correction using the error text for context."""
        return self.transform(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
