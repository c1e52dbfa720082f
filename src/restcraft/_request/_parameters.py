"""Value model for path, query and header parameters.

Each parameter keeps its raw value together with the way it should be turned
into strings. Nothing is filtered when a parameter is created: ``None`` values
are only excluded when the parameter is flattened into key/value pairs, so the
flattened output always reflects the value at dispatch time.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from ..models.enums import (
    BodySerializationMethod,
    PathSerializationMethod,
    QuerySerializationMethod,
)

if TYPE_CHECKING:
    from ..serializers import RequestQueryParamSerializer
    from ._request_info import RequestInfo

KeyValuePair = Tuple[str, str]


def format_value(value: Any) -> str:
    """Returns the locale independent string form of a scalar value.

    >>> format_value(True)
    'true'
    >>> format_value(datetime(2024, 1, 2, 3, 4, 5))
    '2024-01-02T03:04:05'
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_value(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def is_sequence(value: Any) -> bool:
    """Whether a value expands into one pair per element.

    Strings, bytes and mappings are treated as scalars.
    """
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Iterable)


def _expand(key: str, value: Any) -> Iterator[KeyValuePair]:
    if value is None:
        return
    if is_sequence(value):
        for item in value:
            # None elements inside a collection are dropped, like scalar Nones
            if item is not None:
                yield key, format_value(item)
    else:
        yield key, format_value(value)


def _materialize(value: Any) -> Any:
    # one-shot iterators would make flattening non restartable
    if is_sequence(value) and not isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return value


@dataclass
class QueryParameter:
    """A single query parameter.

    ``key`` may be None, meaning the name is implicit: the declared
    ``parameter_name`` is used when the parameter is flattened.
    """

    key: Optional[str]
    value: Any
    method: QuerySerializationMethod = QuerySerializationMethod.TO_STRING
    parameter_name: Optional[str] = None

    def __post_init__(self) -> None:
        self.value = _materialize(self.value)

    @property
    def resolved_key(self) -> str:
        key = self.key if self.key is not None else self.parameter_name
        if key is None:
            raise ValueError(
                "Query parameter has neither an explicit key nor a parameter name"
            )
        return key

    def serialize(
        self,
        query_serializer: Optional["RequestQueryParamSerializer"] = None,
        request_info: Optional["RequestInfo"] = None,
    ) -> Iterator[KeyValuePair]:
        """Flattens the parameter into key/value pairs.

        Every call returns a new generator, so the result can be iterated any
        number of times.

        Args:
            query_serializer: Serializer used by the SERIALIZED method.
            request_info: The request this parameter belongs to, passed on to
                the serializer.

        Returns:
            Iterator[tuple[str, str]]: Zero, one or many pairs, all sharing the
                resolved key when produced by TO_STRING.
        """
        if self.method == QuerySerializationMethod.SERIALIZED:
            return _serialize_with(
                query_serializer, self.resolved_key, self.value, request_info
            )
        return _expand(self.resolved_key, self.value)


def _serialize_with(
    query_serializer: Optional["RequestQueryParamSerializer"],
    key: str,
    value: Any,
    request_info: Optional["RequestInfo"],
) -> Iterator[KeyValuePair]:
    if value is None:
        return
    if query_serializer is None:
        raise ValueError(
            f"Query parameter '{key}' requires a query serializer but none is configured"
        )
    yield from query_serializer.serialize_query_param(key, value, request_info)


QueryMapSource = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


@dataclass
class QueryMapParameter:
    """A bulk source of query parameters.

    The source is either a mapping or an iterable of ``(key, value)`` pairs;
    values may be scalars or sequences of scalars.
    """

    source: QueryMapSource
    method: QuerySerializationMethod = QuerySerializationMethod.TO_STRING

    def __post_init__(self) -> None:
        if not isinstance(self.source, Mapping):
            self.source = [(key, _materialize(value)) for key, value in self.source]

    def items(self) -> Iterator[Tuple[str, Any]]:
        if isinstance(self.source, Mapping):
            return iter(self.source.items())
        return iter(self.source)

    def serialize(
        self,
        query_serializer: Optional["RequestQueryParamSerializer"] = None,
        request_info: Optional["RequestInfo"] = None,
    ) -> Iterator[KeyValuePair]:
        for key, value in self.items():
            if self.method == QuerySerializationMethod.SERIALIZED:
                yield from _serialize_with(
                    query_serializer, str(key), value, request_info
                )
            else:
                yield from _expand(str(key), value)


@dataclass
class HeaderParameter:
    """A header value bound to a name.

    Header values are never expanded per key: the non-None elements of a
    sequence are joined into a single comma separated value.
    """

    key: str
    value: Any

    def serialize(self) -> Iterator[KeyValuePair]:
        if self.value is None:
            return iter(())
        if is_sequence(self.value):
            value = ", ".join(
                format_value(item) for item in self.value if item is not None
            )
        else:
            value = format_value(self.value)
        return iter(((self.key, value),))


@dataclass
class PathParameter:
    name: str
    value: Any
    method: PathSerializationMethod = PathSerializationMethod.TO_STRING
    url_encode: bool = True


@dataclass
class BodyParameter:
    value: Any
    method: BodySerializationMethod = BodySerializationMethod.SERIALIZED
