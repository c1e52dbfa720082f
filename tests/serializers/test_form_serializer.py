import pytest
from pydantic import BaseModel, Field

from restcraft import InvalidBodyTypeError
from restcraft.serializers import form_fields, form_url_encode


class Login(BaseModel):
    user_name: str = Field(alias="userName")
    remember: bool = False


class TestFormUrlEncode:
    def test_mapping(self):
        assert form_url_encode({"a": "b c", "d": 1}) == b"a=b+c&d=1"

    def test_none_values_are_skipped(self):
        assert form_fields({"a": None, "b": "x"}) == [("b", "x")]

    def test_sequence_values_repeat_key(self):
        assert form_fields({"tag": ["x", None, "y"]}) == [("tag", "x"), ("tag", "y")]

    def test_model_is_dumped_by_alias(self):
        assert form_fields(Login(userName="jane")) == [
            ("userName", "jane"),
            ("remember", "false"),
        ]

    @pytest.mark.parametrize("body", ["text", 42, ["a", "b"]])
    def test_non_mapping_body_raises(self, body):
        with pytest.raises(InvalidBodyTypeError) as exc_info:
            form_url_encode(body)

        assert exc_info.value.body_type is type(body)
        assert isinstance(exc_info.value, TypeError)
