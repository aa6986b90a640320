"""Errors raised by the schema intersection engine."""

from typing import Optional

from ._encode import JSONType


class _KeywordIntersectionError(ValueError):
    keyword: str
    value1: JSONType
    value2: JSONType

    def __init__(
        self, keyword: str, value1: JSONType, value2: JSONType, message: str
    ) -> None:
        super().__init__(message)
        self.keyword = keyword
        self.value1 = value1
        self.value2 = value2


class EmptyIntersectionError(_KeywordIntersectionError):
    """The intersection of two keyword values is empty.

    This is an expected outcome rather than a bug: no instance can satisfy
    both schemas, so their intersection is equivalent to ``False``.
    """

    def __init__(self, keyword: str, value1: JSONType, value2: JSONType) -> None:
        super().__init__(
            keyword,
            value1,
            value2,
            f"Intersection of {keyword} {value1!r} and {value2!r} is empty",
        )


class IntersectNotSupportedError(_KeywordIntersectionError):
    """Intersecting the two keyword values is not supported.

    Callers should leave the original schemas alone rather than use an
    approximation.
    """

    def __init__(
        self,
        keyword: str,
        value1: JSONType,
        value2: JSONType,
        message: Optional[str] = None,
    ) -> None:
        msg = f"Unable to intersect {keyword} {value1!r} and {value2!r}"
        if message:
            msg += f": {message}"
        super().__init__(keyword, value1, value2, msg)


class IntersectDepthError(RecursionError):
    """Schemas are nested more deeply than the configured limit."""

    def __init__(self) -> None:
        super().__init__(
            "Schemas are nested too deeply to intersect; is the input cyclic?"
        )
