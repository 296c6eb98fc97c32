"""
Task execution: runs import work inline or on a background thread.
"""

import logging
import threading
from typing import Any, Callable, Union

from django.core.exceptions import ImproperlyConfigured
from django.db import close_old_connections, connections, transaction
from django.utils.module_loading import import_string

from .config import SUPPORTED_BACKENDS, get_task_settings

logger = logging.getLogger(__name__)

TaskTarget = Union[str, Callable[..., Any]]


def _resolve_callable(target: TaskTarget) -> Callable[..., Any]:
    if callable(target):
        return target
    return import_string(target)


def _task_name(target: TaskTarget) -> str:
    if isinstance(target, str):
        return target
    return f"{getattr(target, '__module__', '')}.{getattr(target, '__qualname__', repr(target))}"


def _execute_task(target: TaskTarget, args: tuple, kwargs: dict[str, Any]) -> Any:
    logger.debug("Running task %s", _task_name(target))
    return _resolve_callable(target)(*args, **kwargs)


def _run_in_thread(target: TaskTarget, args: tuple, kwargs: dict[str, Any], close_connections: bool) -> None:
    close_old_connections()
    try:
        _execute_task(target, args, kwargs)
    except Exception:
        logger.exception("Background task %s raised", _task_name(target))
    finally:
        if close_connections:
            connections.close_all()


def schedule_task(target: TaskTarget, *args: Any, **kwargs: Any) -> None:
    """
    Run ``target(*args, **kwargs)`` with the configured backend.

    ``target`` is a callable or a dotted import path. The ``sync`` backend runs
    the task before returning and propagates its exceptions; the ``thread``
    backend starts a daemon thread once the current transaction commits.
    """
    task_settings = get_task_settings()
    backend = task_settings.backend
    if backend not in SUPPORTED_BACKENDS:
        raise ImproperlyConfigured(
            f"Unknown task backend '{backend}'. Supported backends: "
            f"{', '.join(sorted(SUPPORTED_BACKENDS))}"
        )

    if backend == "sync":
        _execute_task(target, args, kwargs)
        return

    def _start() -> None:
        thread = threading.Thread(
            target=_run_in_thread,
            args=(target, args, kwargs, task_settings.close_connections),
            name=f"task:{_task_name(target)}",
            daemon=True,
        )
        thread.start()

    transaction.on_commit(_start)
