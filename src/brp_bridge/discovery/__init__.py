"""Format discovery building blocks: classification, locations, repairs."""

from .detection import ErrorPattern, analyze_error_pattern, classify_message
from .locations import apply_corrections, extract_type_items, get_parameter_location
from .probes import (
    FallbackHint,
    ProbeContext,
    ProbeSpec,
    default_fallback_probes,
    default_serialization_probes,
    fallback_hint,
    run_probes,
)
from .transformers import FormatTransformer, TransformerRegistry

__all__ = [
    "ErrorPattern",
    "FallbackHint",
    "FormatTransformer",
    "ProbeContext",
    "ProbeSpec",
    "TransformerRegistry",
    "analyze_error_pattern",
    "apply_corrections",
    "classify_message",
    "default_fallback_probes",
    "default_serialization_probes",
    "extract_type_items",
    "fallback_hint",
    "get_parameter_location",
    "run_probes",
]
