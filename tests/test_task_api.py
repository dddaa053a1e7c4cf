"""Tests for the task store REST client (no network)."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from taskboard.config import Settings
from taskboard.errors import TransportError
from taskboard.integrations.task_api import (
    TaskApiClient,
    category_name,
    decode_envelope,
    error_message,
)
from taskboard.models.task import TaskPatch, TaskPayload


def _response(status_code=200, body=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    return response


@pytest.fixture
def client():
    return TaskApiClient(Settings(api_base_url="https://tasks.example.com/api/"))


class TestDecodeEnvelope:
    """The envelope decoder tries a bare list, then each named key in order."""

    def test_bare_list(self):
        assert decode_envelope([1, 2], ("items",)) == [1, 2]

    def test_first_matching_key_wins(self):
        assert decode_envelope({"items": [1], "tasks": [2]}, ("items", "tasks")) == [1]
        assert decode_envelope({"tasks": [2]}, ("items", "tasks")) == [2]

    def test_empty_list_under_first_key_still_wins(self):
        assert decode_envelope({"items": [], "tasks": [2]}, ("items", "tasks")) == []

    def test_non_list_values_are_skipped(self):
        assert decode_envelope({"items": "x", "tasks": [3]}, ("items", "tasks")) == [3]

    @pytest.mark.parametrize("data", [None, "text", 5, {"other": [1]}])
    def test_unrecognized_shapes_decode_to_empty(self, data):
        assert decode_envelope(data, ("items", "tasks")) == []


class TestHelpers:
    def test_category_name(self):
        assert category_name(" Work ") == "Work"
        assert category_name({"name": "Home"}) == "Home"
        assert category_name({"category": "Garden"}) == "Garden"
        assert category_name({"name": "", "category": "Garden"}) == "Garden"
        assert category_name(7) == ""
        assert category_name(None) == ""

    def test_error_message(self):
        assert error_message({"message": "Nope"}, 400) == "Nope"
        assert error_message({"error": "Broken"}, 500) == "Broken"
        assert error_message({"detail": "x"}, 404) == "HTTP 404"
        assert error_message("Bad gateway", 502) == "HTTP 502"
        assert error_message(None, 503) == "HTTP 503"


class TestUrls:
    def test_base_url_trailing_slash_is_stripped(self, client):
        assert client.api_url("/tasks") == "https://tasks.example.com/api/tasks"

    def test_category_is_percent_encoded(self, client):
        assert client.tasks_path("Home & Garden") == "/tasks?category=Home%20%26%20Garden"
        assert client.tasks_path("") == "/tasks"

    def test_id_is_percent_encoded(self, client):
        assert client.task_by_id_path("a/b c") == "/tasks/a%2Fb%20c"

    def test_custom_path_templates(self):
        client = TaskApiClient(Settings(
            api_base_url="http://h",
            tasks_path="/v2/todo",
            task_by_id_path="/v2/todo/item/{id}",
            categories_path="/v2/cats",
        ))
        assert client.task_by_id_path("9") == "/v2/todo/item/9"
        assert client.categories_path() == "/v2/cats"


class TestRequests:
    def test_fetch_tasks_with_envelope(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(body={"tasks": [{"id": "1"}]})) as mock_request:
            rows = client.fetch_tasks("Work")

        assert rows == [{"id": "1"}]
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://tasks.example.com/api/tasks?category=Work")
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["data"] is None
        assert kwargs["timeout"] == 10.0

    def test_fetch_categories_mixed_entries(self, client):
        body = {"categories": ["Work", {"name": "Home"}, {"category": " Garden "}, {}, "", 3]}
        with patch("taskboard.integrations.task_api.requests.request", return_value=_response(body=body)):
            assert client.fetch_categories() == ["Work", "Home", "Garden"]

    def test_create_sends_label_status(self, client):
        payload = TaskPayload(title="A", category="Work", status="IN_PROGRESS")
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(status_code=201, body={"id": "9"})) as mock_request:
            assert client.create_task(payload) == {"id": "9"}

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://tasks.example.com/api/tasks")
        assert json.loads(kwargs["data"])["status"] == "In Progress"

    def test_update_with_patch(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(body={"id": "5"})) as mock_request:
            client.update_task("5", TaskPatch(status="DONE"))

        args, kwargs = mock_request.call_args
        assert args == ("PUT", "https://tasks.example.com/api/tasks/5")
        assert json.loads(kwargs["data"]) == {"status": "Done"}

    def test_delete_with_empty_body(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(status_code=204)) as mock_request:
            assert client.delete_task("5") is None
        assert mock_request.call_args[0][0] == "DELETE"

    def test_non_json_body_is_returned_as_text(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(text="ok")):
            assert client.get_task("1") == "ok"

    def test_error_message_from_body(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(status_code=400, body={"message": "Title is required."})):
            with pytest.raises(TransportError) as exc_info:
                client.create_task(TaskPayload(title="", category=""))

        assert str(exc_info.value) == "Title is required."
        assert exc_info.value.status_code == 400

    def test_error_falls_back_to_status(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   return_value=_response(status_code=500, text="<html>boom</html>")):
            with pytest.raises(TransportError, match="HTTP 500"):
                client.fetch_tasks()

    def test_network_failure_becomes_transport_error(self, client):
        with patch("taskboard.integrations.task_api.requests.request",
                   side_effect=requests.ConnectionError("connection refused")):
            with pytest.raises(TransportError, match="connection refused") as exc_info:
                client.fetch_categories()
        assert exc_info.value.status_code is None
