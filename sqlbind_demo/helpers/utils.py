from collections.abc import Iterable, Mapping


def is_list_like(value):
    """
    True for values that expand into several IN-clause placeholders.

    Strings, bytes and mappings are iterable but bind as a single value.
    """
    if isinstance(value, (str, bytes, bytearray, memoryview, Mapping)):
        return False
    return isinstance(value, Iterable)


def preview(args, limit=5):
    """Short repr of bound values for debug logging."""
    args = list(args)
    shown = ", ".join(repr(a) for a in args[:limit])
    if len(args) > limit:
        shown += f", ... (+{len(args) - limit})"
    return f"[{shown}]"
