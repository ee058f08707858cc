"""
Resilience Infrastructure.

Structured retry event logging for tenacity-driven retry loops.

Usage:
    from tenacity import AsyncRetrying, stop_after_attempt, wait_chain, wait_fixed
    from nicenote.backend.core.resilience import log_retry

    retrying = AsyncRetrying(
        stop=stop_after_attempt(3),
        wait=wait_chain(wait_fixed(1), wait_fixed(2)),
        before_sleep=log_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            await client.patch(url, json=body)

Retry events can be filtered out of the JSONL log with:
    jq 'select(.resilience_event != null)' logs/system.jsonl
"""

from typing import Any

from nicenote.backend.core.logging import get_logger

logger = get_logger(__name__)


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Pass this as `before_sleep=log_retry` to any tenacity retry loop.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    next_sleep = None
    if retry_state.next_action is not None:
        next_sleep = retry_state.next_action.sleep

    fn_name = getattr(retry_state.fn, "__name__", None) or "operation"

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "next_sleep_s": next_sleep,
            "error": error,
        },
    )
