"""Ordered registry of format transformers.

Lookup is a first-match linear scan, so registration order decides which
transformer wins when several can handle the same pattern.
"""

import logging
from typing import Any

from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import ErrorPattern

from .base import FormatTransformer, Transformation
from .enum_variant import EnumVariantTransformer
from .math_type import MathTypeTransformer
from .string_type import StringTypeTransformer
from .tuple_struct import TupleStructTransformer

log = logging.getLogger(__name__)


class TransformerRegistry:
    """Registry of transformers consulted by deterministic discovery."""

    def __init__(self, transformers: list[FormatTransformer] | None = None) -> None:
        """Initialize with an optional initial list, kept in order."""
        self._transformers: list[FormatTransformer] = list(transformers or [])

    @classmethod
    def with_defaults(cls) -> "TransformerRegistry":
        """Return a registry holding the built-in transformers.

        Order: math types, strings, tuple structs, enum variants.
        """
        return cls(
            [
                MathTypeTransformer(),
                StringTypeTransformer(),
                TupleStructTransformer(),
                EnumVariantTransformer(),
            ]
        )

    def register(self, transformer: FormatTransformer) -> None:
        """Append ``transformer``; it is consulted after existing ones."""
        self._transformers.append(transformer)

    @property
    def names(self) -> tuple[str, ...]:
        """Transformer names in registration order."""
        return tuple(t.name for t in self._transformers)

    def __len__(self) -> int:
        return len(self._transformers)

    def find_transformer(self, pattern: ErrorPattern) -> FormatTransformer | None:
        """Return the first transformer that can handle ``pattern``."""
        for transformer in self._transformers:
            if transformer.can_handle(pattern):
                return transformer
        return None

    def transform(
        self, value: Any, pattern: ErrorPattern, error: BrpError
    ) -> Transformation | None:
        """Correct ``value`` with the matching transformer, if any."""
        transformer = self.find_transformer(pattern)
        if transformer is None:
            log.debug("No transformer registered for %r", pattern)
            return None
        result = transformer.transform_with_error(value, error)
        log.debug(
            "Transformer %s %s for %r",
            transformer.name,
            "produced a value" if result is not None else "declined",
            pattern,
        )
        return result
