"""
Result types returned by every Tasks client operation.

Operations never raise for request-level failures. They return either a
``Success`` or a ``Failure``; callers branch on ``result.ok`` (or match on
the class).
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Success:
    """Request completed with a status below 400."""
    data: Any = None
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "data": self.data, "status": self.status}


@dataclass(frozen=True)
class Failure:
    """
    Request failed locally (missing id, missing title, no token) or remotely.

    Local precondition failures carry no ``status``; remote failures carry the
    HTTP status and the response body.
    """
    error: str
    status: Optional[int] = None
    body: Any = None

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ok": False, "error": self.error}
        if self.status is not None:
            out["status"] = self.status
        out["body"] = self.body
        return out


Result = Union[Success, Failure]


def error_message(body: Any, status: Optional[int]) -> str:
    """
    Best-effort error message for an HTTP error response.

    Google APIs return ``{"error": {"message": ...}}``; the OAuth endpoints
    return ``{"error": "...", "error_description": "..."}``.
    """
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if body.get("error_description"):
            return str(body["error_description"])
        if err:
            return str(err)
    if status:
        return f"HTTP {status}"
    return "request failed"


def api_error(body: Any, status: Optional[int]) -> Failure:
    """Normalize an HTTP error response into a ``Failure``."""
    return Failure(error=error_message(body, status), status=status, body=body)
