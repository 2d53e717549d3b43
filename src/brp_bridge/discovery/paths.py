"""Named-field to tuple-index path mapping.

Color enums and math types are tuple structs on the remote side: a path such
as ``.LinearRgba.red`` must be written ``.0.0``. These helpers translate the
common named-field spellings into positional paths.
"""

_RGB_TYPES = frozenset({"LinearRgba", "Srgba", "Xyza"})
_LAB_TYPES = frozenset({"Laba", "Oklaba"})
_LCH_TYPES = frozenset({"Lcha", "Oklcha"})
_COLOR_TYPES = _RGB_TYPES | _LAB_TYPES | _LCH_TYPES | {"Hsla", "Hsva", "Hwba"}

MATH_TYPES = frozenset(
    f"{prefix}{name}"
    for prefix in ("", "I", "U", "D")
    for name in ("Vec2", "Vec3", "Vec4")
) | {"Quat"}

# Per color space: field spelling -> component index inside the tuple variant
_COLOR_FIELD_INDEX: dict[str, dict[str, int]] = {
    **{
        t: {"red": 0, "r": 0, "green": 1, "g": 1, "blue": 2, "b": 2}
        for t in _RGB_TYPES
    },
    **{t: {"lightness": 0, "l": 0, "a": 1, "b": 2} for t in _LAB_TYPES},
    **{
        t: {"lightness": 0, "l": 0, "chroma": 1, "c": 1, "hue": 2, "h": 2}
        for t in _LCH_TYPES
    },
    "Hsla": {"hue": 0, "h": 0, "saturation": 1, "s": 1, "lightness": 2, "l": 2},
    "Hsva": {"hue": 0, "h": 0, "saturation": 1, "s": 1, "value": 2, "v": 2},
    "Hwba": {"hue": 0, "h": 0, "whiteness": 1, "w": 1, "blackness": 2},
}

_MATH_FIELD_INDEX = {"x": 0, "y": 1, "z": 2, "w": 3}

_GENERIC_FIELD_INDEX = {
    **dict.fromkeys(("red", "r", "hue", "h", "lightness", "l", "x"), 0),
    **dict.fromkeys(
        ("green", "g", "saturation", "s", "y", "whiteness", "chroma", "c"), 1
    ),
    **dict.fromkeys(("blue", "b", "value", "v", "z", "blackness"), 2),
    **dict.fromkeys(("alpha", "w"), 3),
}

_SIMPLE_FIELD_PATHS = {".x": ".0", ".y": ".1", ".z": ".2"}


def is_enum_variant(name: str) -> bool:
    """Variant names start with an uppercase ASCII letter."""
    return bool(name) and name[0].isascii() and name[0].isupper()


def map_typed_field_path(path: str) -> str | None:
    """Map ``.<KnownType>.<field>`` to ``.0.<index>``; ``None`` if unknown."""
    parts = path.split(".")
    if len(parts) < 3 or parts[0] != "":
        return None
    type_name, field = parts[1], parts[2].lower()

    if type_name in _COLOR_TYPES:
        if field == "alpha" or (field == "a" and type_name not in _LAB_TYPES):
            return ".0.3"
        index = _COLOR_FIELD_INDEX[type_name].get(field)
    elif type_name in MATH_TYPES:
        index = _MATH_FIELD_INDEX.get(field)
    else:
        return None
    return None if index is None else f".0.{index}"


def map_enum_field_path(path: str) -> str | None:
    """Map ``.<Variant>.<field>[...]`` for any variant-looking name."""
    parts = path.split(".")
    if len(parts) < 3 or parts[0] != "" or not parts[1] or not parts[2]:
        return None
    variant, field = parts[1], parts[2]
    if not is_enum_variant(variant):
        return None

    if field == "a":
        return ".0.1" if "Lab" in variant else ".0.3"
    index = _GENERIC_FIELD_INDEX.get(field)
    if index is not None:
        return f".0.{index}"
    return ".0." + ".".join(parts[2:])


def fix_tuple_struct_path(path: str) -> str:
    """Rewrite a named-field path into tuple-index form.

    Unrecognized paths are returned unchanged.

    Example:
        fix_tuple_struct_path(".LinearRgba.red")  # ".0.0"
        fix_tuple_struct_path(".x")  # ".0"
    """
    typed = map_typed_field_path(path)
    if typed is not None:
        return typed
    if path in _SIMPLE_FIELD_PATHS:
        return _SIMPLE_FIELD_PATHS[path]
    generic = map_enum_field_path(path)
    return generic if generic is not None else path
