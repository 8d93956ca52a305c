"""Fixed-size thread pool fan-out with an index-addressed result buffer."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from tqdm import tqdm

from ..config import default_threads
from ..exceptions import ConfigError, TaskError
from .logging_utils import get_logger, log_tqdm_summary

logger = get_logger(__name__)


@dataclass
class TaskFailure:
    index: int
    item: Any
    error: BaseException


def run_tasks(
    func: Callable[[Any], Any],
    items: Sequence[Any],
    threads: Optional[int] = None,
    desc: str = "Processing",
    unit: str = "task",
    progress: bool = True,
) -> List[Any]:
    """
    Run ``func(item)`` for every item on a thread pool and return the results
    in submission order.

    Each task writes only to its own slot of a pre-sized result list, so the
    output order never depends on completion order. Exceptions raised by a
    task are collected; once every task has finished they are logged and
    raised together as a single TaskError.
    """
    if threads is None:
        threads = default_threads()
    if threads < 1:
        raise ConfigError(f"Thread count must be at least 1, got {threads}")

    results: List[Any] = [None] * len(items)
    failures: List[TaskFailure] = []
    if not items:
        return results

    with ThreadPoolExecutor(max_workers=threads) as executor:
        futures = {executor.submit(func, item): i for i, item in enumerate(items)}

        with tqdm(total=len(futures), desc=desc, unit=unit, disable=not progress) as pbar:
            for future in as_completed(futures):
                i = futures[future]
                try:
                    results[i] = future.result()
                except Exception as e:
                    failures.append(TaskFailure(index=i, item=items[i], error=e))
                pbar.update(1)
        if progress:
            log_tqdm_summary(pbar, logger)

    if failures:
        failures.sort(key=lambda failure: failure.index)
        for failure in failures:
            logger.error(f"Task {failure.index} failed: {failure.error}")
        raise TaskError(failures)

    return results
