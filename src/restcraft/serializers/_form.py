from typing import Any, List, Mapping, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel

from .._request._parameters import format_value, is_sequence
from ..models.exceptions import InvalidBodyTypeError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def form_fields(body: Any) -> List[Tuple[str, str]]:
    """Returns the form fields of a URL encoded body.

    Raises:
        InvalidBodyTypeError: If the body is neither a mapping nor a pydantic model.
    """
    if isinstance(body, BaseModel):
        body = body.model_dump(by_alias=True, mode="json")
    if not isinstance(body, Mapping):
        raise InvalidBodyTypeError(type(body))

    fields: List[Tuple[str, str]] = []
    for key, value in body.items():
        if value is None:
            continue
        if is_sequence(value):
            fields.extend(
                (str(key), format_value(item)) for item in value if item is not None
            )
        else:
            fields.append((str(key), format_value(value)))
    return fields


def form_url_encode(body: Any) -> bytes:
    return urlencode(form_fields(body)).encode("ascii")
