"""Where type-keyed values live inside a method's parameters.

Batch methods (``bevy/spawn``, ``bevy/insert``) carry a ``components`` map of
type name to value. Single-value methods name the type in a ``component`` or
``resource`` field and carry the value in ``value``. These helpers read items
out of either shape and write corrected items back without touching the
caller's data.
"""

from collections.abc import Iterable, Mapping
import copy
from typing import Any

from brp_bridge.constants import (
    BRP_METHOD_INSERT_RESOURCE,
    BRP_METHOD_MUTATE_COMPONENT,
    BRP_METHOD_MUTATE_RESOURCE,
    PARAM_COMPONENTS,
    PARAM_VALUE,
)
from brp_bridge.core.types import (
    BatchMap,
    ParameterLocation,
    SingleNamedValue,
    ValueKind,
)

_SINGLE_VALUE_METHODS: dict[str, ValueKind] = {
    BRP_METHOD_MUTATE_COMPONENT: ValueKind.COMPONENT,
    BRP_METHOD_INSERT_RESOURCE: ValueKind.RESOURCE,
    BRP_METHOD_MUTATE_RESOURCE: ValueKind.RESOURCE,
}


def get_parameter_location(method: str) -> ParameterLocation:
    """Return where ``method`` keeps its type items; total over all names."""
    kind = _SINGLE_VALUE_METHODS.get(method)
    if kind is None:
        return BatchMap()
    return SingleNamedValue(kind)


def extract_type_items(
    params: Any, location: ParameterLocation
) -> list[tuple[str, Any]]:
    """Return ``(type_name, value)`` pairs found at ``location``.

    Missing or malformed shapes yield an empty list rather than an error.
    """
    if not isinstance(params, Mapping):
        return []

    if isinstance(location, SingleNamedValue):
        name = params.get(location.kind.value)
        if not isinstance(name, str) or PARAM_VALUE not in params:
            return []
        return [(name, params[PARAM_VALUE])]

    components = params.get(PARAM_COMPONENTS)
    if not isinstance(components, Mapping):
        return []
    return [(str(name), value) for name, value in components.items()]


def apply_corrections(
    params: Any,
    location: ParameterLocation,
    corrected_items: Iterable[tuple[str, Any]],
) -> Any:
    """Return a deep copy of ``params`` with ``corrected_items`` written back.

    For a batch map the whole ``components`` map is replaced by exactly the
    given items, so anything not passed in is dropped; params without a
    ``components`` map are left alone when there is nothing to write. For a
    single value only ``value`` is replaced, using the first item.
    """
    updated = copy.deepcopy(params)
    if not isinstance(updated, dict):
        return updated

    items = list(corrected_items)
    if isinstance(location, SingleNamedValue):
        if items:
            updated[PARAM_VALUE] = copy.deepcopy(items[0][1])
    elif items or isinstance(updated.get(PARAM_COMPONENTS), Mapping):
        updated[PARAM_COMPONENTS] = {
            name: copy.deepcopy(value) for name, value in items
        }
    return updated
