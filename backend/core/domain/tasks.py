"""
core.domain.tasks — Fire-and-forget side-channel jobs.

Side-channel work (currently the admin mailbox email) must never block,
fail, or roll back the primary write.  ``fire_and_forget`` therefore:

1. Defers the job until the surrounding transaction commits
   (``transaction.on_commit``), so nothing is sent for a rolled-back write.
2. Runs it on a small background thread pool when
   ``settings.ADMIN_ALERT_ASYNC`` is true, inline otherwise (tests,
   management commands).
3. Logs and swallows every exception the job raises.

The public API stays the same if the transport is later moved to a real
task queue.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from django.conf import settings
from django.db import close_old_connections, transaction

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=2,
            thread_name_prefix="side-channel",
        )
    return _executor


def _run_safely(fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
    try:
        fn(*args, **kwargs)
    except Exception:
        logger.exception("Side-channel job %s failed", getattr(fn, "__name__", fn))


def _run_in_worker(fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
    # Worker threads own their DB connections.
    close_old_connections()
    try:
        _run_safely(fn, args, kwargs)
    finally:
        close_old_connections()


def fire_and_forget(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Schedule ``fn(*args, **kwargs)`` to run after commit, best-effort."""

    def _dispatch() -> None:
        if getattr(settings, "ADMIN_ALERT_ASYNC", False):
            _get_executor().submit(_run_in_worker, fn, args, kwargs)
        else:
            _run_safely(fn, args, kwargs)

    transaction.on_commit(_dispatch)
