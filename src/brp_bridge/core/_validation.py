"""Small guard helpers used by the frozen data records."""

from __future__ import annotations

import typing


def _is_tuple_of(value: object, typ: type | tuple[type, ...]) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, typ) for v in value)


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _freeze_items(
    items: typing.Iterable[tuple[str, typing.Any]] | None,
) -> tuple[tuple[str, typing.Any], ...]:
    """Return ``(name, value)`` pairs as a tuple, validating their shape."""
    if items is None:
        return ()
    frozen = tuple(items)
    for pair in frozen:
        _require(
            condition=isinstance(pair, tuple)
            and len(pair) == 2
            and isinstance(pair[0], str),
            message="must contain (str, value) pairs",
            field_name="items",
            exc=TypeError,
        )
    return frozen
