"""
Parallel join.

Runs independent zero-argument callables concurrently and hands their
results to a continuation in submission order, or the first failure to
an error continuation.
"""

import concurrent.futures
from typing import Any, Callable, List, Optional, Sequence

Task = Callable[[], Any]


def join(
    tasks: Sequence[Task],
    on_success: Callable[[List[Any]], Any],
    on_error: Optional[Callable[[BaseException], Any]] = None,
) -> Any:
    """
    Run tasks concurrently and join on a single wait point.

    Args:
        tasks: Callables taking no arguments; a return value is success,
            a raised exception is failure
        on_success: Called once with results in submission order
        on_error: Called once with the first observed failure. If omitted
            the failure is re-raised.

    Returns:
        Whatever the invoked continuation returns

    Once a failure is observed on_success is never called. Tasks still
    running are left to finish on their own; their outcomes are dropped.
    """
    if not tasks:
        return on_success([])

    executor = concurrent.futures.ThreadPoolExecutor(max_workers=len(tasks))
    try:
        futures = [executor.submit(task) for task in tasks]
        done, _ = concurrent.futures.wait(
            futures, return_when=concurrent.futures.FIRST_EXCEPTION
        )

        # Ties between failures already done are broken by submission order
        failed = [f for f in futures if f in done and f.exception() is not None]
        if failed:
            error = failed[0].exception()
            for future in futures:
                future.cancel()
            if on_error is None:
                raise error
            return on_error(error)

        results = [future.result() for future in futures]
    finally:
        executor.shutdown(wait=False)

    return on_success(results)


def gather(tasks: Sequence[Task]) -> List[Any]:
    """Run tasks concurrently and return their results in submission order."""
    return join(tasks, on_success=lambda results: results)
