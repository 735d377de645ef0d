import json
import logging
import random
import string
import time
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import MockServerConfig
from .delay import simulate_delay
from .lifecycle import lifespan
from .request_log import RequestLog, utc_now_iso
from .response_config import ResponseConfigStore
from .validation import SubmissionRejected, loads_strict, validate_submission

logger = logging.getLogger(__name__)

router = APIRouter()

# Statuses that must go out without a body
BODYLESS_STATUSES = {204, 304}

# Reason phrases that differ between Python versions
ERROR_NAMES = {413: "Payload Too Large"}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def make_request_id(prefix: str) -> str:
    """Correlation id for log lines, e.g. req_1718000000000_k3x9qa. Not guaranteed unique."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def to_json(value: Any, indent: Optional[int] = None) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False)


def response_status(value: Any) -> int:
    # Form-encoded control updates store digits as strings
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or not 100 <= value <= 599:
        raise ValueError(f"Configured status code is not a valid HTTP status: {value!r}")
    return value


async def read_body(request: Request) -> bytes:
    body = await request.body()
    max_bytes = request.app.state.config.MAX_BODY_BYTES
    if len(body) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Request body exceeds {max_bytes} bytes")
    return body


async def read_control_update(request: Request) -> Dict[str, Any]:
    """Decode the control body from JSON or form fields. Anything else means "no change"."""
    raw = await read_body(request)
    content_type = request.headers.get("content-type", "")
    if not raw.strip():
        return {}

    if FORM_CONTENT_TYPE in content_type:
        form = await request.form()
        return dict(form)

    if "application/json" not in content_type:
        return {}

    try:
        update = loads_strict(raw)
    except ValueError:
        update = None
    if not isinstance(update, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    return update


# Main data endpoint
@router.post("/api/data")
async def receive_data(request: Request):
    request_log: RequestLog = request.app.state.request_log
    store: ResponseConfigStore = request.app.state.response_config
    request_id = make_request_id("req")

    raw = await read_body(request)
    try:
        body = validate_submission(request.headers.get("content-type"), raw)
    except SubmissionRejected as e:
        await request_log.append(e.log_line(request_id))
        return JSONResponse(status_code=e.status_code, content=e.payload())

    await request_log.append_many([
        f"📥 VALID REQUEST {request_id}:",
        f"   Headers: {to_json(dict(request.headers))}",
        f"   Body: {to_json(body, indent=2)}",
    ])

    current = store.get()
    await simulate_delay(current.response_delay, request_log)

    await request_log.append(
        f"📤 RESPONSE {request_id}: Status {current.status_code}, Body: {to_json(current.response_body)}"
    )

    status_code = response_status(current.status_code)
    if status_code in BODYLESS_STATUSES:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=current.response_body)


# Endpoint to change how the mock answers
@router.post("/mock/control")
async def update_mock(request: Request):
    request_log: RequestLog = request.app.state.request_log
    store: ResponseConfigStore = request.app.state.response_config

    update = await read_control_update(request)

    # statusCode and responseBody only apply when truthy, so 0 and {} are ignored
    status_code = update.get("statusCode")
    response_body = update.get("responseBody")
    store.set(
        status_code=status_code if status_code else None,
        response_body=response_body if response_body else None,
        response_delay=update.get("responseDelay"),
    )

    config = store.as_payload()
    await request_log.append(f"🎛️ MOCK CONTROL UPDATED: {to_json(config)}")

    return {"message": "Mock configuration updated", "config": config}


@router.get("/mock/status")
async def mock_status(request: Request):
    store: ResponseConfigStore = request.app.state.response_config
    return {
        "status": "running",
        "timestamp": utc_now_iso(),
        "config": store.as_payload(),
    }


@router.get("/mock/logs")
async def read_logs(request: Request):
    request_log: RequestLog = request.app.state.request_log
    try:
        logs = await request_log.read_all()
    except FileNotFoundError:
        return JSONResponse(status_code=404, content={"error": "Log file not found"})
    return PlainTextResponse(logs)


@router.delete("/mock/logs")
async def clear_logs(request: Request):
    request_log: RequestLog = request.app.state.request_log
    try:
        await request_log.clear()
    except OSError as e:
        logger.error(f"❌ Error clearing request log: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Failed to clear logs"})
    return {"message": "Logs cleared successfully"}


# Any other GET: answer and log the visit in the background
@router.get("/{full_path:path}")
async def catch_all(request: Request, background_tasks: BackgroundTasks):
    request_log: RequestLog = request.app.state.request_log
    path = request.url.path
    background_tasks.add_task(request_log.append, f"🔍 GET REQUEST: {path}")
    return {
        "message": "Mock API is running",
        "path": path,
        "timestamp": utc_now_iso(),
    }


async def limit_body_size(request: Request, call_next):
    """Reject bodies whose declared length is over the limit before routing."""
    max_bytes = request.app.state.config.MAX_BODY_BYTES
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_bytes:
        return JSONResponse(
            status_code=413,
            content={"error": ERROR_NAMES[413], "message": f"Request body exceeds {max_bytes} bytes"},
        )
    return await call_next(request)


async def error_boundary(request: Request, call_next):
    """Turn any exception escaping a handler into a 500 with a correlation id."""
    try:
        return await call_next(request)
    except Exception as e:
        request_id = make_request_id("err")
        logger.exception(f"❌ Unhandled error {request_id} on {request.method} {request.url.path}")

        url = request.url.path
        if request.url.query:
            url += f"?{request.url.query}"
        await request.app.state.request_log.append_many([
            f"🚨 UNHANDLED ERROR {request_id}:",
            f"   Message: {str(e)}",
            f"   URL: {request.method} {url}",
            f"   Headers: {to_json(dict(request.headers))}",
        ])
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "requestId": request_id},
        )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error = ERROR_NAMES.get(exc.status_code) or HTTPStatus(exc.status_code).phrase
    content = {"error": error}
    if exc.detail and exc.detail != error:
        content["message"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def create_app(config: Optional[MockServerConfig] = None) -> FastAPI:
    """Build the mock API with its own request log and response configuration."""
    config = config or MockServerConfig()

    app = FastAPI(title="Simple Mock API", lifespan=lifespan)
    app.state.config = config
    app.state.request_log = RequestLog(config.LOG_FILE)
    app.state.response_config = ResponseConfigStore(config)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.middleware("http")(limit_body_size)
    app.middleware("http")(error_boundary)
    app.include_router(router)
    return app
