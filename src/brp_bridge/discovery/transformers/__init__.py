"""Format transformers and their registry."""

from .base import FormatTransformer, Transformation
from .enum_variant import EnumVariantTransformer
from .math_type import MathTypeTransformer
from .registry import TransformerRegistry
from .string_type import StringTypeTransformer
from .tuple_struct import TupleStructTransformer

__all__ = [
    "EnumVariantTransformer",
    "FormatTransformer",
    "MathTypeTransformer",
    "StringTypeTransformer",
    "Transformation",
    "TransformerRegistry",
    "TupleStructTransformer",
]
