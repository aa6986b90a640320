"""Canonical encoding for JSON values, where 1 == 1.0 but 1 != True."""

import json
import math
import platform
from typing import Any, Dict, Iterable, List, Union

# Mypy does not (yet!) support recursive type definitions.
PYTHON_IMPLEMENTATION = platform.python_implementation()
JSONType = Union[None, bool, float, str, list, Dict[str, Any]]

if PYTHON_IMPLEMENTATION != "PyPy":
    from json.encoder import _make_iterencode, encode_basestring_ascii  # type: ignore
else:  # pragma: no cover
    _make_iterencode = None
    encode_basestring_ascii = None


def _floatstr(o: float) -> str:
    # Integer-valued floats are encoded as integers, so that equal numbers
    # always have equal encodings.
    if not math.isfinite(o):
        raise TypeError(f"{o!r} is not a JSON number")
    if o == int(o):
        return repr(int(o))
    return repr(o)


class CanonicalisingJsonEncoder(json.JSONEncoder):
    if PYTHON_IMPLEMENTATION == "PyPy":  # pragma: no cover

        def _JSONEncoder__floatstr(self, o: float) -> str:
            return _floatstr(o)

    else:

        def iterencode(self, o: Any, _one_shot: bool = False) -> Any:  # noqa
            """Replace a stdlib method, so we encode integer-valued floats as ints."""
            return _make_iterencode(
                {},
                self.default,
                encode_basestring_ascii,
                self.indent,
                _floatstr,
                self.key_separator,
                self.item_separator,
                self.sort_keys,
                self.skipkeys,
                _one_shot,
            )(o, 0)


def encode_canonical_json(value: JSONType) -> str:
    """Canonical form serialiser, for equality and uniqueness testing."""
    return json.dumps(value, sort_keys=True, cls=CanonicalisingJsonEncoder)


def json_equal(value1: JSONType, value2: JSONType) -> bool:
    """Deep equality with JSON semantics.

    Unlike ``==``, this distinguishes booleans from numbers (``True != 1``),
    and unlike a plain ``json.dumps`` comparison it ignores key order and
    treats ``1`` and ``1.0`` as the same number.
    """
    if value1 is value2:
        return True
    return encode_canonical_json(value1) == encode_canonical_json(value2)


def is_primitive(value: JSONType) -> bool:
    return not isinstance(value, (list, dict))


def union_unique(values1: Iterable[JSONType], values2: Iterable[JSONType]) -> List:
    """Concatenate two arrays, skipping values of the second already in the first.

    The order of the first array is preserved and new values from the second
    are appended in their original order.
    """
    out = list(values1)
    seen = {encode_canonical_json(v) for v in out}
    for v in values2:
        enc = encode_canonical_json(v)
        if enc not in seen:
            seen.add(enc)
            out.append(v)
    return out
