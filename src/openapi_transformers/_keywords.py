"""
Intersection of individual keyword values.

Each function here takes the values of one keyword from two schemas and
returns a single value which is satisfied exactly when both are, or raises
EmptyIntersectionError if no instance could satisfy both.  They never look
at other keywords, and never modify their arguments.  Keywords whose values
are themselves schemas are handled in _intersect, since they recurse.
"""

import math
from fractions import Fraction
from typing import Any, Callable, Dict, List, Union

from ._encode import JSONType, encode_canonical_json, is_primitive, union_unique
from ._errors import EmptyIntersectionError, IntersectNotSupportedError

KeywordIntersection = Callable[[Any, Any], JSONType]

# Table marker for keywords where differing values are dropped silently,
# keeping whichever value the merged schema already has.
IGNORE = object()


def is_number(value: Any) -> bool:
    # bool is a subclass of int, but true is not a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_list(value: Any, name: str) -> None:
    if not isinstance(value, list):
        raise TypeError(f"{name} must be an array, got {value!r}")


def _check_number(value: Any, name: str) -> None:
    if not is_number(value):
        raise TypeError(f"{name} must be a number, got {value!r}")


def intersect_all_of(all_of1: List, all_of2: List) -> List:
    _check_list(all_of1, "allOf")
    _check_list(all_of2, "allOf")
    return union_unique(all_of1, all_of2)


def intersect_const(const1: JSONType, const2: JSONType) -> JSONType:
    # Only called when the values differ, and no value equals two others.
    raise EmptyIntersectionError("const", const1, const2)


def intersect_enum(enum1: List, enum2: List) -> List:
    _check_list(enum1, "enum")
    _check_list(enum2, "enum")
    # TODO: compare array and object members structurally, so that these
    # enums can be intersected instead of rejected.
    if not all(map(is_primitive, enum1 + enum2)):
        raise IntersectNotSupportedError(
            "enum", enum1, enum2, "array/object enum values are not supported"
        )
    allowed = {encode_canonical_json(v) for v in enum2}
    out = [v for v in enum1 if encode_canonical_json(v) in allowed]
    if not out:
        raise EmptyIntersectionError("enum", enum1, enum2)
    return out


def intersect_description(text1: str, text2: str) -> str:
    """Describe the intersection, for cosmetic keywords like title."""
    if not isinstance(text1, str) or not isinstance(text2, str):
        raise TypeError(f"Expected strings, got {text1!r} and {text2!r}")
    t1 = f"({text1})" if " " in text1 else text1
    t2 = f"({text2})" if " " in text2 else text2
    return f"Intersection of {t1} and {t2}"


def intersect_examples(examples1: List, examples2: List) -> List:
    """Concatenate examples.

    This is an approximation: an example of one schema need not satisfy
    the other, so some of the results may not be valid for the intersection.
    """
    _check_list(examples1, "examples")
    _check_list(examples2, "examples")
    return union_unique(examples1, examples2)


def intersect_max(max1: float, max2: float) -> float:
    _check_number(max1, "Upper bound")
    _check_number(max2, "Upper bound")
    return min(max1, max2)


def intersect_min(min1: float, min2: float) -> float:
    _check_number(min1, "Lower bound")
    _check_number(min2, "Lower bound")
    return max(min1, min2)


def _as_fraction(value: float) -> Fraction:
    # Use the shortest decimal repr for floats, so that 0.1 is 1/10 rather
    # than the exact value of the nearest binary fraction.
    return Fraction(value) if isinstance(value, int) else Fraction(repr(value))


def intersect_multiple_of(
    multiple_of1: Union[int, float], multiple_of2: Union[int, float]
) -> Union[int, float]:
    for mul in (multiple_of1, multiple_of2):
        if not is_number(mul) or not mul > 0:
            raise TypeError(f"multipleOf must be a positive number, got {mul!r}")
    x, y = _as_fraction(multiple_of1), _as_fraction(multiple_of2)
    if (x / y).denominator == 1:
        return multiple_of1
    if (y / x).denominator == 1:
        return multiple_of2
    # The least common multiple of reduced fractions a/b and c/d is
    # lcm(a, c) / gcd(b, d).
    num = x.numerator * y.numerator // math.gcd(x.numerator, y.numerator)
    lcm = Fraction(num, math.gcd(x.denominator, y.denominator))
    if lcm.denominator == 1:
        return lcm.numerator
    return float(lcm)


def intersect_pattern(pattern1: str, pattern2: str) -> str:
    if not isinstance(pattern1, str) or not isinstance(pattern2, str):
        raise TypeError(f"pattern must be a string, got {pattern1!r} and {pattern2!r}")
    # Patterns are not implicitly anchored, so each lookahead may skip any
    # prefix unless the pattern is already anchored at the start.
    assert1 = pattern1 if pattern1.startswith("^") else f".*{pattern1}"
    assert2 = pattern2 if pattern2.startswith("^") else f".*{pattern2}"
    # Anchor the assertions so they are only tried at the start of the string.
    return f"^(?={assert1})(?={assert2})"


def intersect_required(required1: List[str], required2: List[str]) -> List[str]:
    _check_list(required1, "required")
    _check_list(required2, "required")
    return union_unique(required1, required2)


def intersect_dependent_required(
    dependent_required1: Dict[str, List[str]],
    dependent_required2: Dict[str, List[str]],
) -> Dict[str, List[str]]:
    for dep in (dependent_required1, dependent_required2):
        if not isinstance(dep, dict):
            raise TypeError(f"dependentRequired must be an object, got {dep!r}")

    out = dict(dependent_required1)
    for name, required2 in dependent_required2.items():
        if required2 is None:
            continue
        _check_list(required2, f"dependentRequired[{name!r}]")
        required1 = dependent_required1.get(name)
        if required1 is not None:
            _check_list(required1, f"dependentRequired[{name!r}]")
        if not required1:
            out[name] = required2
        else:
            out[name] = intersect_required(required1, required2)
    return out


def _type_list(type_: Any) -> List[str]:
    types = type_ if isinstance(type_, list) else [type_]
    for t in types:
        if not isinstance(t, str):
            raise TypeError(f"type must be a string or array of strings, got {type_!r}")
    return types


def intersect_type(
    type1: Union[str, List[str]], type2: Union[str, List[str]]
) -> Union[str, List[str]]:
    types1 = _type_list(type1)
    types2 = set(_type_list(type2))
    out: List[str] = []
    for t in types1:
        if t in types2:
            match = t
        elif t == "integer" and "number" in types2:
            match = "integer"
        elif t == "number" and "integer" in types2:
            # every integer is a number, but not every number an integer
            match = "integer"
        else:
            continue
        if match not in out:
            out.append(match)
    if not out:
        raise EmptyIntersectionError("type", type1, type2)
    return out[0] if len(out) == 1 else out


def intersect_boolean(value1: bool, value2: bool) -> bool:
    if not isinstance(value1, bool) or not isinstance(value2, bool):
        raise TypeError(f"Expected booleans, got {value1!r} and {value2!r}")
    return value1 or value2


KEYWORD_INTERSECTIONS: Dict[str, Union[KeywordIntersection, object]] = {
    "allOf": intersect_all_of,
    "const": intersect_const,
    "dependentRequired": intersect_dependent_required,
    # deprecated is handled after all other keywords have been merged
    "deprecated": IGNORE,
    "description": intersect_description,
    "enum": intersect_enum,
    "example": IGNORE,
    "examples": intersect_examples,
    "exclusiveMaximum": intersect_max,
    "exclusiveMinimum": intersect_min,
    "maxItems": intersect_max,
    "maxLength": intersect_max,
    "maxProperties": intersect_max,
    "maximum": intersect_max,
    "minItems": intersect_min,
    "minLength": intersect_min,
    "minProperties": intersect_min,
    "minimum": intersect_min,
    "multipleOf": intersect_multiple_of,
    "pattern": intersect_pattern,
    "readOnly": intersect_boolean,
    "required": intersect_required,
    "title": intersect_description,
    "type": intersect_type,
    "uniqueItems": intersect_boolean,
    "writeOnly": intersect_boolean,
}
