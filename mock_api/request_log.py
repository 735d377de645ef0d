"""
Append-only request log.

Every entry is one line of the form ``[<UTC ISO-8601 timestamp>] message``.
File operations run in Starlette's threadpool so handlers only suspend on them.
"""
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Union

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

CLEAR_MARKER = "🧹 LOGS CLEARED"


def utc_now_iso() -> str:
    """Return current UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def format_entry(message: str) -> str:
    return f"[{utc_now_iso()}] {message}\n"


class RequestLog:
    """Line-oriented log file shared by all request handlers"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _write(self, text: str, mode: str) -> None:
        with self.path.open(mode, encoding="utf-8", errors="backslashreplace") as f:
            f.write(text)

    def _read(self) -> str:
        with self.path.open("r", encoding="utf-8", errors="replace") as f:
            return f.read()

    def append_now(self, message: str) -> None:
        """Blocking append for callers outside the event loop.

        Write failures go to the console only.
        """
        try:
            self._write(format_entry(message), "a")
            logger.info(f"📝 log: {message}")
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error writing request log {self.path}: {str(e)}")

    async def append(self, message: str) -> None:
        await run_in_threadpool(self.append_now, message)

    async def append_many(self, messages: Iterable[str]) -> None:
        for message in messages:
            await self.append(message)

    async def read_all(self) -> str:
        """Return the whole log. Raises FileNotFoundError if nothing was logged yet."""
        return await run_in_threadpool(self._read)

    async def clear(self) -> None:
        """Truncate the log, then record that it was cleared.

        Raises OSError if the file cannot be truncated.
        """
        await run_in_threadpool(self._write, "", "w")
        await self.append(CLEAR_MARKER)
