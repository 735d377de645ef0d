# =====================================
# PROCESS LIFECYCLE
# =====================================
# Console logging setup, startup banner, shutdown entry and crash hooks.

import asyncio
import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import Callable

import uvicorn
from fastapi import FastAPI

from .config import MockServerConfig
from .request_log import RequestLog
from .response_config import ResponseConfigStore

logger = logging.getLogger(__name__)

SHUTDOWN_MESSAGE = "🛑 Server shutdown"


def setup_logging(config: MockServerConfig) -> None:
    logging.basicConfig(level=config.CONSOLE_LOG_LEVEL, format=config.CONSOLE_LOG_FORMAT)


def print_banner(config: MockServerConfig, store: ResponseConfigStore) -> None:
    current = store.get()
    print(f"🚀 Simple Mock API Server running on {config.PORT}")
    print(f"📝 Log file: {config.LOG_FILE}")
    print("\n📋 Available endpoints:")
    print("📥 POST   /api/data        - Main data endpoint")
    print("🎛️  POST   /mock/control     - Update mock response")
    print("📊 GET    /mock/status      - Check mock status")
    print("📄 GET    /mock/logs        - View logs")
    print("🧹 DELETE /mock/logs        - Clear logs")
    print("\n⚙️  Default configuration:")
    print(f"Status: {current.status_code}")
    print(f"Delay: {current.response_delay}ms")


class MockServer(uvicorn.Server):
    """uvicorn server that prints the endpoint banner once the port is bound."""

    def __init__(self, app: FastAPI, config: MockServerConfig):
        super().__init__(uvicorn.Config(app, host=config.HOST, port=config.PORT))
        self.mock_config = config
        self.store: ResponseConfigStore = app.state.response_config

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        # uvicorn leaves started unset when binding fails
        if self.started:
            print_banner(self.mock_config, self.store)


def install_crash_hooks(request_log: RequestLog, loop: asyncio.AbstractEventLoop) -> Callable[[], None]:
    """Record errors nobody handled in the request log.

    Covers exceptions reaching ``sys.excepthook`` and failures of tasks that
    were never awaited. The previous handlers still run afterwards.
    Returns a callable that puts the previous handlers back.
    """
    previous_excepthook = sys.excepthook
    previous_loop_handler = loop.get_exception_handler()

    def excepthook(exc_type, exc, tb):
        request_log.append_now(f"💀 UNCAUGHT EXCEPTION: {exc}")
        request_log.append_now(f"   Stack: {''.join(traceback.format_exception(exc_type, exc, tb))}")
        previous_excepthook(exc_type, exc, tb)

    def loop_exception_handler(loop, context):
        reason = context.get("exception") or context.get("message")
        request_log.append_now(f"🤯 UNHANDLED REJECTION: {reason}")
        if previous_loop_handler is not None:
            previous_loop_handler(loop, context)
        else:
            loop.default_exception_handler(context)

    sys.excepthook = excepthook
    loop.set_exception_handler(loop_exception_handler)

    def restore() -> None:
        sys.excepthook = previous_excepthook
        loop.set_exception_handler(previous_loop_handler)

    return restore


@asynccontextmanager
async def lifespan(app: FastAPI):
    request_log: RequestLog = app.state.request_log
    restore = install_crash_hooks(request_log, asyncio.get_running_loop())
    logger.info(f"✅ Mock API ready, logging requests to {request_log.path}")
    try:
        yield
    finally:
        await request_log.append(SHUTDOWN_MESSAGE)
        print("\n🛑 Mock server stopped")
        restore()
