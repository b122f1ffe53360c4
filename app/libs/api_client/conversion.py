import json
import logging
from enum import StrEnum
from functools import lru_cache
from typing import Any, get_origin

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from exceptions.api import ConversionError, SerializationError
from libs.api_client.models import OPAQUE, ApiResponse

logger = logging.getLogger(__name__)


class ConversionPolicy(StrEnum):
    PASS_THROUGH = "pass_through"
    STRICT = "strict"


def is_opaque(result_type: Any) -> bool:
    return result_type is OPAQUE or result_type is object or result_type is None


@lru_cache(maxsize=256)
def _type_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def _type_name(result_type: Any) -> str:
    return getattr(result_type, "__name__", None) or repr(result_type)


def decode_body(raw: bytes, result_type: Any = OPAQUE, status_code: int | None = None) -> Any:
    """
    Decode a raw response body into ``result_type``.

    :param raw: the response content
    :param result_type: target type, ``OPAQUE`` keeps whatever JSON value the body holds
    :param status_code: only used to enrich the error
    :return: the decoded body, ``None`` for an empty body
    """
    if not raw:
        return None

    if is_opaque(result_type):
        try:
            return json.loads(raw)
        except ValueError:
            return raw.decode("utf-8", errors="replace")

    if result_type is bytes:
        return raw

    text = raw.decode("utf-8", errors="replace")
    if result_type is str:
        # a JSON string literal loses its quotes, anything else stays raw text
        try:
            return _type_adapter(str).validate_json(raw, strict=True)
        except ValidationError:
            return text

    try:
        return _type_adapter(result_type).validate_json(raw)
    except (ValidationError, PydanticUserError) as e:
        logger.error(f"Failed to decode response body as {_type_name(result_type)}: {e}")
        raise SerializationError(
            f"Failed to decode response body as {_type_name(result_type)}",
            status_code=status_code,
            body=text,
            cause=e,
        )


def cast_body(body: Any, target_type: Any) -> Any:
    """
    Checked cast without coercion. Raises ``TypeError`` or ``ValueError`` when
    the body does not already have the target shape.
    """
    if body is None or is_opaque(target_type):
        return body

    if get_origin(target_type) is None and isinstance(target_type, type):
        if isinstance(body, target_type):
            return body
        raise TypeError(f"{type(body).__name__} is not {target_type.__name__}")

    try:
        return _type_adapter(target_type).validate_python(body, strict=True)
    except PydanticUserError as e:
        raise TypeError(str(e)) from e


def convert_response(
    response: ApiResponse[Any],
    target_type: Any,
    policy: ConversionPolicy = ConversionPolicy.PASS_THROUGH,
) -> ApiResponse[Any]:
    """
    Reinterpret an already decoded response as ``target_type``.

    With ``PASS_THROUGH`` a failed cast returns the original response as is,
    so the body may not match ``target_type``. ``STRICT`` raises instead.
    """
    try:
        converted = cast_body(response.body, target_type)
    except (TypeError, ValueError) as e:
        if policy == ConversionPolicy.STRICT:
            raise ConversionError(
                f"Could not convert response to {_type_name(target_type)}",
                status_code=response.status_code,
                body=response.body_text(),
                cause=e,
            )
        logger.warning(
            f"Could not convert response to {_type_name(target_type)}, returning it unchanged"
        )
        return response

    return response.with_body(converted)
