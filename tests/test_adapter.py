import base64

import pytest

from sheetrelay.adapter import form_fields, from_event, normalize_body
from sheetrelay.models.relay import OperationRequest


class TestNormalizeBody:
    def test_object_is_serialized_compactly(self):
        assert normalize_body({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_string_passes_through(self):
        assert normalize_body('{"a": 1}') == '{"a": 1}'

    def test_bytes_are_decoded(self):
        assert normalize_body(b'{"a":1}') == '{"a":1}'

    @pytest.mark.parametrize("body", [None, "", {}, []])
    def test_empty_is_absent(self, body):
        assert normalize_body(body) is None

    def test_unserializable_falls_back_to_raw(self):
        raw = {"when": object()}
        assert normalize_body(raw) is raw


class TestFromEvent:
    def test_basic_event(self):
        request = from_event({
            "httpMethod": "get",
            "headers": {"origin": "https://forms.example.com"},
            "queryStringParameters": {"spreadsheetId": "sheet123"},
        })
        assert request.method == "GET"
        assert request.headers == {"origin": "https://forms.example.com"}
        assert request.query_param("spreadsheetId") == "sheet123"
        assert request.body is None

    def test_missing_query_is_none(self):
        request = from_event({"httpMethod": "POST", "queryStringParameters": None})
        assert request.query is None
        assert request.query_param("spreadsheetId") is None

    def test_parsed_body_is_reserialized(self):
        request = from_event({"httpMethod": "POST", "body": {"sheetName": "Contact"}})
        assert request.body == '{"sheetName":"Contact"}'

    def test_base64_body_is_decoded(self):
        encoded = base64.b64encode(b'{"rowIndex":2}').decode()
        request = from_event({"httpMethod": "POST", "body": encoded, "isBase64Encoded": True})
        assert request.body == '{"rowIndex":2}'

    def test_non_string_header_and_query_values_are_stringified(self):
        request = from_event({
            "httpMethod": "GET",
            "headers": {"content-length": 12, "x-forwarded-for": None},
            "queryStringParameters": {"spreadsheetId": "sheet123", "page": 2},
        })
        assert request.headers == {"content-length": "12", "x-forwarded-for": ""}
        assert request.query == {"spreadsheetId": "sheet123", "page": "2"}

    def test_request_is_immutable(self):
        request = from_event({"httpMethod": "POST"})
        with pytest.raises(Exception):
            request.method = "GET"


class TestOperationRequest:
    def test_preflight(self):
        assert OperationRequest(method="OPTIONS").is_preflight
        assert not OperationRequest(method="POST").is_preflight


class TestFormFields:
    def test_repeated_keys_collect_into_a_list(self):
        assert form_fields("a=1&a=2&b=3") == {"a": ["1", "2"], "b": "3"}

    def test_blank_values_are_kept(self):
        assert form_fields("name=&email=a%40b.c") == {"name": "", "email": "a@b.c"}
