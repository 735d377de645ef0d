import asyncio
import math
from typing import Any

from .request_log import RequestLog


def delay_ms(value: Any) -> float:
    """Configured delay as a positive number of milliseconds, else 0.

    Numeric strings count, since form-encoded control updates arrive as text.
    """
    if isinstance(value, bool):
        return 0
    try:
        ms = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(ms) or ms <= 0:
        return 0
    return ms


async def simulate_delay(value: Any, request_log: RequestLog) -> float:
    """Log and wait out the configured delay. Returns the milliseconds waited."""
    ms = delay_ms(value)
    if ms > 0:
        shown = int(ms) if ms.is_integer() else ms
        await request_log.append(f"   ⏳ Delaying response by {shown}ms")
        await asyncio.sleep(ms / 1000)
    return ms
