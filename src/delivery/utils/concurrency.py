"""Bounded execution of provider calls.

Provider adapters may block on the network. Every provider gets its own
small thread pool, owned by the provider registry, so a provider that hangs
can only exhaust its own workers. Callers stop waiting after a deadline; a
call that overruns keeps its thread until it returns, but nobody waits on it
and queued work behind it is cancelled.
"""

from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

# Concurrent calls allowed per provider
PROVIDER_WORKERS = 8


def provider_executor(provider_id: str, max_workers: int = PROVIDER_WORKERS) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=f"provider-{provider_id}")


def completed(value: Any) -> Future:
    """A future that already holds ``value``."""
    future: Future = Future()
    future.set_result(value)
    return future


def call_with_timeout(executor: ThreadPoolExecutor, fn: Callable[..., Any], *args: Any, timeout: float) -> Any:
    """Run ``fn(*args)`` on ``executor`` and return its result.

    Raises ``TimeoutError`` once ``timeout`` seconds pass, and re-raises
    whatever ``fn`` raised.
    """
    future = executor.submit(fn, *args)
    try:
        return future.result(timeout=timeout)
    except TimeoutError:
        future.cancel()
        raise


def gather(futures: Mapping[str, Future], timeout: float) -> Mapping[str, Future]:
    """Wait up to ``timeout`` for every future and cancel the stragglers.

    Callers inspect ``done()`` to tell finished calls from overrunning ones.
    """
    if futures:
        _, pending = wait(list(futures.values()), timeout=timeout)
        for future in pending:
            future.cancel()
    return futures
