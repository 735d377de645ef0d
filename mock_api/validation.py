"""
Validation for POST /api/data.

Checks run in a fixed order and the first failure wins:
content type, JSON structure, presence of ``users``, its type, then every
user's ``login``.
"""
import json
import math
from typing import Any, Dict, List, Optional


class SubmissionRejected(Exception):
    """A client error found while validating a data submission"""

    def __init__(self, status_code: int, error: str, message: str, reason: str, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.reason = reason
        self.detail = detail

    def log_line(self, request_id: str) -> str:
        line = f"🚨 {self.reason} {request_id}"
        if self.detail is not None:
            line += f": {self.detail}"
        return line

    def payload(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


def _bad_request(message: str, reason: str, detail: Optional[str] = None) -> SubmissionRejected:
    return SubmissionRejected(400, "Bad Request", message, reason, detail)


def check_content_type(content_type: Optional[str]) -> None:
    if not content_type or "application/json" not in content_type:
        raise SubmissionRejected(
            415,
            "Unsupported Media Type",
            "Content-Type must be application/json",
            "INVALID CONTENT-TYPE",
            str(content_type),
        )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def loads_strict(raw: bytes) -> Any:
    """json.loads without NaN or infinite numbers, which cannot be sent back out."""
    return json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)


def decode_body(raw: bytes) -> Any:
    """Decode the body; only objects and arrays count as structured."""
    try:
        body = loads_strict(raw)
    except ValueError:
        body = None
    if not isinstance(body, (dict, list)):
        raise _bad_request("Invalid JSON body", "INVALID BODY", "Body is not JSON object")
    return body


def check_users(body: Any) -> List[Any]:
    users = body.get("users") if isinstance(body, dict) else None
    # null, false, 0 and "" count as missing; empty containers are present
    if not users and not isinstance(users, (list, dict)):
        raise _bad_request("Missing required field: users", "MISSING USERS FIELD")

    if not isinstance(users, list):
        raise _bad_request("Users must be an array", "INVALID USERS FORMAT", "users is not array")

    for i, user in enumerate(users):
        login = user.get("login") if isinstance(user, dict) else None
        if not login or not isinstance(login, str):
            raise _bad_request(
                f"User at index {i} missing required field: login",
                "INVALID USER",
                f"user[{i}] missing login",
            )
    return users


def validate_submission(content_type: Optional[str], raw: bytes) -> Any:
    """Run every check and return the decoded body, or raise SubmissionRejected."""
    check_content_type(content_type)
    body = decode_body(raw)
    check_users(body)
    return body
