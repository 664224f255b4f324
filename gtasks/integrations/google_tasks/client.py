"""
Google Tasks Client
Thin async wrapper over the Google Tasks REST API (task lists and tasks).

Every operation returns a ``Result``:
    Success(data, status)          HTTP status < 400
    Failure(error, status, body)   local precondition failure or HTTP error

Nothing here raises for request-level or auth-level problems; only
``self_test`` raises, since it exists for startup/health checks.
"""
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from ...utils.config import ConfigDefaults, TasksSettings
from ...utils.logger import setup_logger
from ..base_exceptions import IntegrationServiceException, SelfTestFailedException
from .auth import GoogleTokenProvider
from .http import JsonTransport, bearer, encode_query
from .results import Failure, Result, Success, api_error

logger = setup_logger(__name__)

NO_TOKEN_ERROR = "no access token (configure gauth)"
SELF_TEST_SKIPPED = "skipped: missing gauth config"

TimestampLike = Union[str, datetime, date]


def _segment(value: str) -> str:
    """Percent-encode a single path segment."""
    return quote(str(value), safe="")


def _timestamp(value: TimestampLike) -> str:
    """RFC 3339 text for datetimes (naive ones are taken as UTC), plain ``str()`` otherwise."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.isoformat() + "Z"
        return value.isoformat()
    if isinstance(value, date):
        return f"{value.isoformat()}T00:00:00.000Z"
    return str(value)


def clean_query(query: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop None / empty-string values; None when nothing is left."""
    if not query or not isinstance(query, Mapping):
        return None
    out = {k: v for k, v in query.items() if v is not None and v != ""}
    return out or None


def build_task_body(
    task: Optional[Mapping[str, Any]] = None,
    title: Optional[str] = None,
    notes: Optional[str] = None,
    due: Optional[TimestampLike] = None,
    status: Optional[str] = None,
    parent: Optional[str] = None,
    position: Optional[str] = None
) -> Dict[str, Any]:
    """
    Request body for task create/update/patch.

    A full ``task`` mapping takes precedence and is used verbatim. Otherwise
    the body holds only the provided fields, each coerced to a string.
    None and empty strings count as absent; ``0`` does not.
    """
    if isinstance(task, Mapping):
        return task

    fields = {
        "title": title,
        "notes": notes,
        "due": _timestamp(due) if due not in (None, "") else None,
        "status": status,
        "parent": parent,
        "position": position,
    }
    return {k: str(v) for k, v in fields.items() if v is not None and v != ""}


def _require_tasklist_id(tasklist_id: Any) -> Optional[Failure]:
    if not tasklist_id or not isinstance(tasklist_id, str):
        return Failure("missing tasklistId")
    return None


def _require_task_id(task_id: Any) -> Optional[Failure]:
    if not task_id or not isinstance(task_id, str):
        return Failure("missing taskId")
    return None


class TasksClient:
    """
    Google Tasks API client

    Provides:
    - Task lists: list, get, create, delete
    - Tasks: list, get, create, update, patch, complete, delete, move
    - self_test() for startup/health checks

    The active user id scopes the task-list collection paths
    (``/users/{user_id}/lists``); it defaults to ``"me"`` and changes only
    through ``configure()``.
    """

    def __init__(
        self,
        token_provider: Optional[GoogleTokenProvider] = None,
        transport: Optional[JsonTransport] = None,
        user_id: str = ConfigDefaults.TASKS_USER_ID,
        base_url: str = ConfigDefaults.TASKS_BASE_URL
    ):
        """
        Initialize Google Tasks client

        Args:
            token_provider: Object with configure / to_json / get_access_token
            transport: Object with an async ``json(url, method, headers, body_obj, debug)``
            user_id: Active user id for per-user paths
            base_url: API root; every path is relative to it
        """
        self.token_provider = token_provider if token_provider is not None else GoogleTokenProvider()
        self.transport = transport if transport is not None else JsonTransport()
        self.user_id = str(user_id)
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: TasksSettings) -> "TasksClient":
        """Build provider, transport and client from loaded settings."""
        return cls(
            token_provider=GoogleTokenProvider.from_settings(settings),
            transport=JsonTransport(timeout=settings.timeout),
            user_id=settings.user_id,
            base_url=settings.base_url,
        )

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "TasksClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ===================================================================
    # CONFIGURATION & AUTH
    # ===================================================================

    def configure(self, options: Optional[Mapping[str, Any]]) -> None:
        """
        Update the active user id and forward ``options`` to the token provider.

        Non-mapping input is ignored.
        """
        if not options or not isinstance(options, Mapping):
            return
        user_id = options.get("user_id") or options.get("userId")
        if user_id:
            self.user_id = str(user_id)
        self.token_provider.configure(options)

    def _is_configured(self) -> bool:
        status = self.token_provider.to_json()
        return bool(status and status.get("configured"))

    async def get_token(self) -> Optional[str]:
        """Current access token, or None when the provider is not configured."""
        if not self._is_configured():
            return None
        return await self.token_provider.get_access_token()

    # ===================================================================
    # REQUEST FUNNEL
    # ===================================================================

    async def api_request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        debug: bool = False
    ) -> Result:
        """
        Perform one authenticated API call and normalize the outcome.

        Args:
            path: Path relative to the API root, e.g. ``/lists/abc/tasks``
            method: HTTP verb
            body: JSON body (sent only when not None)
            query: Query parameters; None / "" values are dropped
            debug: Ask the transport to log request and response

        Returns:
            Success or Failure; never raises for HTTP or auth failures
        """
        try:
            token = await self.get_token()
        except IntegrationServiceException as e:
            logger.warning(f"[TASKS_CLIENT] No access token for {path}: {e.message}")
            return Failure(e.message)
        if not token:
            return Failure(NO_TOKEN_ERROR)

        params = clean_query(query)
        url = self.base_url + path + (("?" + encode_query(params)) if params else "")
        headers = {"Content-Type": "application/json", **bearer(token)}

        response = await self.transport.json(
            url=url, method=method, headers=headers, body_obj=body, debug=bool(debug)
        )

        if response.error and response.status is None:
            return Failure(response.error)

        data = response.json if response.json is not None else (response.raw or None)
        status = response.status
        if status and status >= 400:
            logger.info(f"[TASKS_CLIENT] {method} {path} failed with HTTP {status}")
            return api_error(data, status)
        return Success(data=data, status=status)

    def _lists_path(self, tasklist_id: Optional[str] = None) -> str:
        path = "/users/" + _segment(self.user_id) + "/lists"
        if tasklist_id is not None:
            path += "/" + _segment(tasklist_id)
        return path

    @staticmethod
    def _tasks_path(tasklist_id: str, task_id: Optional[str] = None) -> str:
        path = "/lists/" + _segment(tasklist_id) + "/tasks"
        if task_id is not None:
            path += "/" + _segment(task_id)
        return path

    # ===================================================================
    # TASK LISTS
    # ===================================================================

    async def list_tasklists(
        self,
        max_results: Optional[int] = None,
        page_token: Optional[str] = None,
        show_hidden: Optional[bool] = None,
        debug: bool = False
    ) -> Result:
        return await self.api_request(
            self._lists_path(),
            query={"maxResults": max_results, "pageToken": page_token, "showHidden": show_hidden},
            debug=debug,
        )

    async def get_tasklist(self, tasklist_id: Optional[str] = None, debug: bool = False) -> Result:
        err = _require_tasklist_id(tasklist_id)
        if err:
            return err
        return await self.api_request(self._lists_path(tasklist_id), debug=debug)

    async def create_tasklist(self, title: Optional[str] = None, debug: bool = False) -> Result:
        if not title:
            return Failure("missing title")
        return await self.api_request(
            self._lists_path(), method="POST", body={"title": str(title)}, debug=debug
        )

    async def delete_tasklist(self, tasklist_id: Optional[str] = None, debug: bool = False) -> Result:
        err = _require_tasklist_id(tasklist_id)
        if err:
            return err
        return await self.api_request(self._lists_path(tasklist_id), method="DELETE", debug=debug)

    # ===================================================================
    # TASKS
    # ===================================================================

    async def list_tasks(
        self,
        tasklist_id: Optional[str] = None,
        max_results: Optional[int] = None,
        page_token: Optional[str] = None,
        show_completed: Optional[bool] = None,
        show_deleted: Optional[bool] = None,
        show_hidden: Optional[bool] = None,
        due_min: Optional[TimestampLike] = None,
        due_max: Optional[TimestampLike] = None,
        completed_min: Optional[TimestampLike] = None,
        completed_max: Optional[TimestampLike] = None,
        updated_min: Optional[TimestampLike] = None,
        debug: bool = False
    ) -> Result:
        """
        List tasks in a task list.

        Timestamp filters accept RFC 3339 strings or datetimes.
        """
        err = _require_tasklist_id(tasklist_id)
        if err:
            return err

        def ts(value: Optional[TimestampLike]) -> Optional[str]:
            return _timestamp(value) if value not in (None, "") else None

        query = {
            "maxResults": max_results,
            "pageToken": page_token,
            "showCompleted": show_completed,
            "showDeleted": show_deleted,
            "showHidden": show_hidden,
            "dueMin": ts(due_min),
            "dueMax": ts(due_max),
            "completedMin": ts(completed_min),
            "completedMax": ts(completed_max),
            "updatedMin": ts(updated_min),
        }
        return await self.api_request(self._tasks_path(tasklist_id), query=query, debug=debug)

    async def get_task(
        self,
        tasklist_id: Optional[str] = None,
        task_id: Optional[str] = None,
        debug: bool = False
    ) -> Result:
        err = _require_tasklist_id(tasklist_id) or _require_task_id(task_id)
        if err:
            return err
        return await self.api_request(self._tasks_path(tasklist_id, task_id), debug=debug)

    async def create_task(
        self,
        tasklist_id: Optional[str] = None,
        task: Optional[Mapping[str, Any]] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
        due: Optional[TimestampLike] = None,
        status: Optional[str] = None,
        parent: Optional[str] = None,
        position: Optional[str] = None,
        debug: bool = False
    ) -> Result:
        err = _require_tasklist_id(tasklist_id)
        if err:
            return err
        body = build_task_body(task, title, notes, due, status, parent, position)
        if not body.get("title"):
            return Failure("missing task title")
        return await self.api_request(
            self._tasks_path(tasklist_id), method="POST", body=body, debug=debug
        )

    async def update_task(
        self,
        tasklist_id: Optional[str] = None,
        task_id: Optional[str] = None,
        task: Optional[Mapping[str, Any]] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
        due: Optional[TimestampLike] = None,
        status: Optional[str] = None,
        parent: Optional[str] = None,
        position: Optional[str] = None,
        debug: bool = False
    ) -> Result:
        """Replace a task (PUT). Pass the full ``task`` to avoid clearing fields."""
        err = _require_tasklist_id(tasklist_id) or _require_task_id(task_id)
        if err:
            return err
        body = build_task_body(task, title, notes, due, status, parent, position)
        return await self.api_request(
            self._tasks_path(tasklist_id, task_id), method="PUT", body=body, debug=debug
        )

    async def patch_task(
        self,
        tasklist_id: Optional[str] = None,
        task_id: Optional[str] = None,
        task: Optional[Mapping[str, Any]] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
        due: Optional[TimestampLike] = None,
        status: Optional[str] = None,
        parent: Optional[str] = None,
        position: Optional[str] = None,
        debug: bool = False
    ) -> Result:
        err = _require_tasklist_id(tasklist_id) or _require_task_id(task_id)
        if err:
            return err
        body = build_task_body(task, title, notes, due, status, parent, position)
        return await self.api_request(
            self._tasks_path(tasklist_id, task_id), method="PATCH", body=body, debug=debug
        )

    async def complete_task(
        self,
        tasklist_id: Optional[str] = None,
        task_id: Optional[str] = None,
        completed: Optional[TimestampLike] = None,
        debug: bool = False
    ) -> Result:
        """Mark a task completed, optionally stamping the completion time."""
        err = _require_tasklist_id(tasklist_id) or _require_task_id(task_id)
        if err:
            return err
        body: Dict[str, Any] = {"status": "completed"}
        if completed:
            body["completed"] = _timestamp(completed)
        return await self.api_request(
            self._tasks_path(tasklist_id, task_id), method="PATCH", body=body, debug=debug
        )

    async def delete_task(
        self,
        tasklist_id: Optional[str] = None,
        task_id: Optional[str] = None,
        debug: bool = False
    ) -> Result:
        err = _require_tasklist_id(tasklist_id) or _require_task_id(task_id)
        if err:
            return err
        return await self.api_request(
            self._tasks_path(tasklist_id, task_id), method="DELETE", debug=debug
        )

    async def move_task(
        self,
        tasklist_id: Optional[str] = None,
        task_id: Optional[str] = None,
        parent: Optional[str] = None,
        previous: Optional[str] = None,
        destination: Optional[str] = None,
        debug: bool = False
    ) -> Result:
        """
        Move a task under another parent, after a sibling, or to another list.

        All three targets travel as query parameters; none set moves the task
        to the top level, first position.
        """
        err = _require_tasklist_id(tasklist_id) or _require_task_id(task_id)
        if err:
            return err
        return await self.api_request(
            self._tasks_path(tasklist_id, task_id) + "/move",
            method="POST",
            query={"parent": parent, "previous": previous, "destination": destination},
            debug=debug,
        )

    # ===================================================================
    # DIAGNOSTICS
    # ===================================================================

    async def self_test(self) -> str:
        """
        Live check: list one task list.

        Returns:
            "ok", or a "skipped: ..." string when OAuth is not configured

        Raises:
            SelfTestFailedException: the verification call did not succeed
        """
        if not self._is_configured():
            logger.info("[TASKS_CLIENT] Self-test skipped: OAuth not configured")
            return SELF_TEST_SKIPPED

        result = await self.list_tasklists(max_results=1)
        if not result.ok:
            logger.error(f"[TASKS_CLIENT] Self-test failed: {result.error} (status={result.status})")
            raise SelfTestFailedException(
                message="selfTest failed",
                service_name="GoogleTasks",
                details=result.to_dict()
            )
        logger.info("[TASKS_CLIENT] Self-test passed")
        return "ok"
