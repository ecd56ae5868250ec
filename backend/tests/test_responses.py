"""
Notes API: Response Envelope Tests
======================================

What:  Tests for the envelope builders in notes_api.responses.
"""

import json

from notes_api import responses


def _body(response):
    return json.loads(response.body)


class TestSuccessEnvelopes:

    def test_success_list_counts_items(self):
        response = responses.success_list(items=[{"a": 1}, {"a": 2}], item_name="notes")

        assert response.status_code == 200
        assert _body(response) == {"notes": [{"a": 1}, {"a": 2}], "count": 2}

    def test_success_list_explicit_count(self):
        response = responses.success_list(items=[], item_name="notes", count=7)
        assert _body(response)["count"] == 7

    def test_created(self):
        response = responses.created({"id": "1"})
        assert response.status_code == 201
        assert response.headers["content-type"] == "application/json"

    def test_no_content(self):
        response = responses.no_content()

        assert response.status_code == 204
        assert response.body == b""
        assert response.media_type == "application/json"

    def test_health_check_merges_extra(self):
        response = responses.health_check("notes-api", additional_info={"version": "1.0.0"})
        body = _body(response)

        assert body["status"] == "healthy"
        assert body["service"] == "notes-api"
        assert body["version"] == "1.0.0"
        assert body["timestamp"].endswith("Z")


class TestErrorEnvelopes:

    def test_error_omits_empty_details(self):
        response = responses.error("Boom", code="INTERNAL_SERVER_ERROR")

        assert response.status_code == 500
        assert _body(response) == {"error": {"code": "INTERNAL_SERVER_ERROR", "message": "Boom"}}

    def test_validation_error_details(self):
        response = responses.validation_error("Title is required", field="title", value="  ")

        assert response.status_code == 400
        assert _body(response)["error"]["details"] == {"field": "title", "value": "  "}

    def test_not_found_details(self):
        response = responses.not_found("Note not found", resource_id="abc")

        assert response.status_code == 404
        assert _body(response)["error"]["details"] == {"id": "abc"}

    def test_method_not_allowed_sets_allow_header(self):
        response = responses.method_not_allowed("PATCH", ["GET", "PUT", "OPTIONS"])

        assert response.status_code == 405
        assert response.headers["allow"] == "GET, PUT, OPTIONS"
        assert _body(response)["error"]["message"] == "Method PATCH not allowed"

    def test_internal_server_error_default_message(self):
        body = _body(responses.internal_server_error())
        assert body["error"]["message"] == "Internal server error"
