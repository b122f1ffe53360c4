import logging
from typing import Optional

import pytest
from pydantic import BaseModel

from exceptions.api import ConversionError, SerializationError
from libs.api_client.conversion import ConversionPolicy, cast_body, convert_response, decode_body
from libs.api_client.models import OPAQUE, ApiResponse


class User(BaseModel):
    id: int
    name: str


class TestDecodeBody:
    def test_empty_body_is_none(self):
        assert decode_body(b"", User) is None
        assert decode_body(b"", OPAQUE) is None

    def test_opaque_json(self):
        assert decode_body(b'{"id": 1, "name": "Ana"}') == {"id": 1, "name": "Ana"}
        assert decode_body(b"[1, 2]", object) == [1, 2]

    def test_opaque_non_json_is_text(self):
        assert decode_body(b"plain text", OPAQUE) == "plain text"

    def test_bytes_and_str(self):
        assert decode_body(b'{"a": 1}', bytes) == b'{"a": 1}'
        assert decode_body(b'{"a": 1}', str) == '{"a": 1}'

    def test_str_unquotes_json_string(self):
        assert decode_body(b'"hello"', str) == "hello"
        assert decode_body(b"plain text", str) == "plain text"
        assert decode_body(b"42", str) == "42"

    def test_typed_decode(self):
        assert decode_body(b'{"id": 1, "name": "Ana"}', User) == User(id=1, name="Ana")
        assert decode_body(b"[1, 2, 3]", list[int]) == [1, 2, 3]
        assert decode_body(b"99", int) == 99

    def test_invalid_body_raises_serialization_error(self):
        with pytest.raises(SerializationError) as exc_info:
            decode_body(b'{"id": "not-a-number"}', User, status_code=200)

        assert exc_info.value.status_code == 200
        assert exc_info.value.body == '{"id": "not-a-number"}'
        assert exc_info.value.cause is not None


class TestCastBody:
    def test_isinstance_cast(self):
        user = User(id=1, name="Ana")
        assert cast_body(user, User) is user
        assert cast_body({"a": 1}, dict) == {"a": 1}

    def test_no_coercion_for_classes(self):
        with pytest.raises(TypeError):
            cast_body("42", int)
        with pytest.raises(TypeError):
            cast_body({"id": 1, "name": "Ana"}, User)

    def test_generic_alias_is_checked_strictly(self):
        assert cast_body([1, 2], list[int]) == [1, 2]
        with pytest.raises(ValueError):
            cast_body(["1", "2"], list[int])

    def test_none_and_opaque_pass(self):
        assert cast_body(None, int) is None
        assert cast_body("anything", OPAQUE) == "anything"
        assert cast_body(3, Optional[int]) == 3


class TestConvertResponse:
    def test_successful_cast_returns_new_response(self):
        response = ApiResponse(status_code=200, headers={"X-Id": "1"}, body={"orderId": 99})
        converted = convert_response(response, dict)

        assert converted is not response
        assert converted == ApiResponse(status_code=200, headers={"x-id": "1"}, body={"orderId": 99})

    def test_failed_cast_returns_original_unchanged(self, caplog):
        response = ApiResponse(status_code=200, body="42")
        with caplog.at_level(logging.WARNING):
            converted = convert_response(response, int)

        assert converted is response
        assert isinstance(converted.body, str)
        assert converted.body == "42"
        assert any("returning it unchanged" in record.getMessage() for record in caplog.records)

    def test_strict_policy_raises(self):
        response = ApiResponse(status_code=200, body="42")
        with pytest.raises(ConversionError) as exc_info:
            convert_response(response, int, ConversionPolicy.STRICT)

        assert exc_info.value.status_code == 200
        assert exc_info.value.body == "42"
        assert isinstance(exc_info.value, SerializationError)
