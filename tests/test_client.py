"""
Tests for TasksClient: request construction and result normalization
"""
from datetime import datetime, timezone

import pytest

from gtasks.integrations.base_exceptions import AuthenticationException
from gtasks.integrations.google_tasks.client import (
    NO_TOKEN_ERROR,
    TasksClient,
    build_task_body,
    clean_query,
)
from gtasks.integrations.google_tasks.http import TransportResponse
from gtasks.integrations.google_tasks.results import Failure, Success

BASE = "https://tasks.googleapis.com/tasks/v1"


# ============================================
# BODY / QUERY HELPERS
# ============================================

class TestBuildTaskBody:
    """Test task body construction"""

    def test_fields_coerced_to_strings(self):
        body = build_task_body(title="Buy milk", notes=42, position="00001")
        assert body == {"title": "Buy milk", "notes": "42", "position": "00001"}

    def test_absent_fields_omitted(self):
        assert build_task_body(title="x", notes="", due=None) == {"title": "x"}

    def test_zero_is_kept(self):
        assert build_task_body(title="x", position=0) == {"title": "x", "position": "0"}

    def test_full_task_wins_over_fields(self):
        task = {"id": "t1", "title": "Full", "links": [{"type": "email"}]}
        assert build_task_body(task=task, title="ignored", notes="ignored") is task

    def test_due_datetime_rendered_rfc3339(self):
        due = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert build_task_body(title="x", due=due)["due"] == "2026-03-01T09:30:00+00:00"

    def test_due_naive_datetime_taken_as_utc(self):
        assert build_task_body(title="x", due=datetime(2026, 3, 1))["due"] == "2026-03-01T00:00:00Z"


class TestCleanQuery:
    """Test query sanitizing"""

    def test_drops_none_and_empty(self):
        assert clean_query({"a": None, "b": "", "c": "x", "d": 0, "e": False}) == {"c": "x", "d": 0, "e": False}

    def test_all_empty_is_none(self):
        assert clean_query({"a": None, "b": ""}) is None
        assert clean_query(None) is None
        assert clean_query({}) is None


# ============================================
# REQUEST FUNNEL
# ============================================

class TestApiRequest:
    """Test the central request funnel"""

    @pytest.mark.asyncio
    async def test_no_token_fails_locally(self, client, token_provider, transport):
        token_provider.configured = False

        result = await client.list_tasklists()

        assert isinstance(result, Failure)
        assert result.error == NO_TOKEN_ERROR
        assert result.status is None
        assert token_provider.token_requests == 0
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_auth_exception_becomes_failure(self, client, token_provider, transport):
        token_provider.error = AuthenticationException("refresh rejected: invalid_grant", service_name="GoogleTasks")

        result = await client.list_tasklists()

        assert result.ok is False
        assert result.error == "refresh rejected: invalid_grant"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_headers_carry_bearer_and_content_type(self, client, transport):
        await client.list_tasklists()

        assert transport.last["headers"] == {
            "Content-Type": "application/json",
            "Authorization": "Bearer test-token",
        }
        assert transport.last["method"] == "GET"
        assert transport.last["body_obj"] is None

    @pytest.mark.asyncio
    async def test_empty_query_emits_no_question_mark(self, client, transport):
        await client.list_tasklists(max_results=None, page_token="", show_hidden=None)

        assert transport.last["url"] == f"{BASE}/users/me/lists"
        assert "?" not in transport.last["url"]

    @pytest.mark.asyncio
    async def test_query_drops_empty_values(self, client, transport):
        await client.list_tasklists(max_results=5, page_token="", show_hidden=True)

        assert transport.last["url"] == f"{BASE}/users/me/lists?maxResults=5&showHidden=true"

    @pytest.mark.asyncio
    async def test_success_normalized(self, client, transport):
        transport.queue(TransportResponse(status=200, json={"items": []}))

        result = await client.list_tasklists()

        assert isinstance(result, Success)
        assert result.to_dict() == {"ok": True, "data": {"items": []}, "status": 200}

    @pytest.mark.asyncio
    async def test_raw_payload_used_when_not_json(self, client, transport):
        transport.queue(TransportResponse(status=200, json=None, raw="plain text"))

        result = await client.list_tasklists()

        assert result.ok is True
        assert result.data == "plain text"

    @pytest.mark.asyncio
    async def test_empty_response_has_null_data(self, client, transport):
        transport.queue(TransportResponse(status=204))

        result = await client.delete_tasklist("L1")

        assert result == Success(data=None, status=204)

    @pytest.mark.asyncio
    async def test_http_404_normalized(self, client, transport):
        body = {"error": {"code": 404, "message": "Not Found"}}
        transport.queue(TransportResponse(status=404, json=body))

        result = await client.get_tasklist("missing")

        assert result.to_dict() == {"ok": False, "error": "Not Found", "status": 404, "body": body}

    @pytest.mark.asyncio
    async def test_http_error_without_message(self, client, transport):
        transport.queue(TransportResponse(status=503, raw=None))

        result = await client.list_tasklists()

        assert result == Failure(error="HTTP 503", status=503, body=None)

    @pytest.mark.asyncio
    async def test_transport_error_becomes_failure(self, client, transport):
        transport.queue(TransportResponse(error="request failed: connection refused"))

        result = await client.list_tasklists()

        assert result.ok is False
        assert result.error == "request failed: connection refused"
        assert result.status is None

    @pytest.mark.asyncio
    async def test_debug_flag_forwarded(self, client, transport):
        await client.get_tasklist("L1", debug=True)
        assert transport.last["debug"] is True


# ============================================
# CONFIGURATION
# ============================================

class TestConfigure:
    """Test client configuration"""

    @pytest.mark.asyncio
    async def test_user_id_scopes_list_paths(self, client, transport):
        client.configure({"userId": "123"})

        await client.list_tasklists()
        assert transport.last["url"] == f"{BASE}/users/123/lists"

        await client.get_tasklist("L1")
        assert transport.last["url"] == f"{BASE}/users/123/lists/L1"

    def test_user_id_coerced_to_string(self, client):
        client.configure({"user_id": 42})
        assert client.user_id == "42"

    def test_options_forwarded_to_token_provider(self, client, token_provider):
        options = {"user_id": "u", "refresh_token": "r", "client_id": "c"}
        client.configure(options)
        assert token_provider.configure_calls == [options]

    def test_non_mapping_is_noop(self, client, token_provider):
        client.configure(None)
        client.configure("user")
        assert client.user_id == "me"
        assert token_provider.configure_calls == []

    @pytest.mark.asyncio
    async def test_path_segments_encoded(self, client, transport):
        client.configure({"user_id": "a/b"})
        await client.list_tasklists()
        assert transport.last["url"] == f"{BASE}/users/a%2Fb/lists"

    @pytest.mark.asyncio
    async def test_custom_base_url(self, token_provider, transport):
        client = TasksClient(token_provider, transport, base_url="http://localhost:9000/tasks/v1/")
        await client.list_tasklists()
        assert transport.last["url"] == "http://localhost:9000/tasks/v1/users/me/lists"


# ============================================
# TASK LISTS
# ============================================

class TestTasklistOperations:
    """Test task list operations"""

    @pytest.mark.asyncio
    async def test_create_tasklist(self, client, transport):
        await client.create_tasklist("Groceries")

        assert transport.last["method"] == "POST"
        assert transport.last["url"] == f"{BASE}/users/me/lists"
        assert transport.last["body_obj"] == {"title": "Groceries"}

    @pytest.mark.asyncio
    async def test_create_tasklist_requires_title(self, client, transport):
        result = await client.create_tasklist("")
        assert result == Failure("missing title")
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_delete_tasklist(self, client, transport):
        await client.delete_tasklist("L1")
        assert transport.last["method"] == "DELETE"
        assert transport.last["url"] == f"{BASE}/users/me/lists/L1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", [None, "", 123])
    async def test_tasklist_id_required(self, client, token_provider, transport, bad_id):
        for op in (client.get_tasklist, client.delete_tasklist, client.list_tasks):
            result = await op(bad_id)
            assert result.ok is False
            assert result.error == "missing tasklistId"
            assert result.status is None
        assert token_provider.token_requests == 0
        assert transport.calls == []


# ============================================
# TASKS
# ============================================

class TestTaskOperations:
    """Test task operations"""

    @pytest.mark.asyncio
    async def test_list_tasks_query(self, client, transport):
        await client.list_tasks(
            "L1",
            show_completed=False,
            due_max=datetime(2026, 1, 31, tzinfo=timezone.utc),
            page_token=None,
        )

        assert transport.last["url"] == (
            f"{BASE}/lists/L1/tasks?showCompleted=false&dueMax=2026-01-31T00%3A00%3A00%2B00%3A00"
        )

    @pytest.mark.asyncio
    async def test_get_task(self, client, transport):
        await client.get_task("L1", "T1")
        assert transport.last["method"] == "GET"
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks/T1"

    @pytest.mark.asyncio
    async def test_create_task_with_title(self, client, transport):
        await client.create_task("L1", title="Buy milk")

        assert transport.last["method"] == "POST"
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks"
        assert transport.last["body_obj"] == {"title": "Buy milk"}

    @pytest.mark.asyncio
    async def test_create_task_requires_title(self, client, token_provider, transport):
        result = await client.create_task("L1")

        assert result.ok is False
        assert "title" in result.error
        assert result.status is None
        assert token_provider.token_requests == 0
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_create_task_from_full_object(self, client, transport):
        task = {"title": "From object", "notes": "n", "due": "2026-02-01T00:00:00.000Z"}
        await client.create_task("L1", task=task, title="ignored")
        assert transport.last["body_obj"] == task

    @pytest.mark.asyncio
    async def test_update_task_passes_full_object_through(self, client, transport):
        task = {"id": "T1", "title": "Keep", "status": "needsAction", "etag": "\"abc\"", "links": []}

        await client.update_task("L1", "T1", task=task)

        assert transport.last["method"] == "PUT"
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks/T1"
        assert transport.last["body_obj"] is task

    @pytest.mark.asyncio
    async def test_patch_task_fields(self, client, transport):
        await client.patch_task("L1", "T1", notes="call first")

        assert transport.last["method"] == "PATCH"
        assert transport.last["body_obj"] == {"notes": "call first"}

    @pytest.mark.asyncio
    async def test_complete_task_default_body(self, client, transport):
        await client.complete_task("L1", "T1")

        assert transport.last["method"] == "PATCH"
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks/T1"
        assert transport.last["body_obj"] == {"status": "completed"}

    @pytest.mark.asyncio
    async def test_complete_task_with_timestamp(self, client, transport):
        await client.complete_task("L1", "T1", completed="2026-01-02T03:04:05.000Z")
        assert transport.last["body_obj"] == {"status": "completed", "completed": "2026-01-02T03:04:05.000Z"}

    @pytest.mark.asyncio
    async def test_delete_task(self, client, transport):
        await client.delete_task("L1", "T1")
        assert transport.last["method"] == "DELETE"
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks/T1"

    @pytest.mark.asyncio
    async def test_move_task_uses_query(self, client, transport):
        await client.move_task("L1", "T1", parent="P1", previous="S1")

        assert transport.last["method"] == "POST"
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks/T1/move?parent=P1&previous=S1"
        assert transport.last["body_obj"] is None

    @pytest.mark.asyncio
    async def test_move_task_without_targets(self, client, transport):
        await client.move_task("L1", "T1")
        assert transport.last["url"] == f"{BASE}/lists/L1/tasks/T1/move"

    @pytest.mark.asyncio
    async def test_task_id_required(self, client, token_provider, transport):
        ops = [
            client.get_task,
            client.update_task,
            client.patch_task,
            client.complete_task,
            client.delete_task,
            client.move_task,
        ]
        for op in ops:
            result = await op("L1", None)
            assert result == Failure("missing taskId")
        assert token_provider.token_requests == 0
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_operations_callable_without_ids(self, client, transport):
        assert (await client.get_tasklist()).error == "missing tasklistId"
        assert (await client.create_tasklist()).error == "missing title"
        assert (await client.create_task()).error == "missing tasklistId"
        assert (await client.move_task("L1")).error == "missing taskId"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_tasklist_id_checked_before_task_id(self, client):
        result = await client.get_task(None, None)
        assert result.error == "missing tasklistId"


class TestClientLifecycle:
    """Test async context manager support"""

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, token_provider, transport):
        async with TasksClient(token_provider, transport) as client:
            await client.list_tasklists()
        assert transport.closed is True
