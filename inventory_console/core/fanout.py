"""Параллельное выполнение независимых вызовов API (fan-out / join)."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from core.envelope import ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class FanOutReport:
    """
    Итог пачки независимых вызовов.

    Порядок results совпадает с порядком вызовов. Частичный отказ
    не откатывается и не повторяется: он только подсчитывается.
    """

    results: List[ApiResponse] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failures(self) -> List[ApiResponse]:
        return [result for result in self.results if not result.success]

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return self.failed_count == 0

    @property
    def failure_messages(self) -> List[str]:
        return [result.message for result in self.failures]


def fan_out(
    calls: Sequence[Callable[[], ApiResponse]],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> FanOutReport:
    """
    Выполнить вызовы параллельно и дождаться всех.

    Args:
        calls: Функции без аргументов, каждая возвращает ApiResponse
        max_workers: Максимальное количество потоков

    Returns:
        FanOutReport с результатами в порядке calls
    """
    if not calls:
        return FanOutReport()

    workers = max(1, min(max_workers, len(calls)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(call) for call in calls]
        results = [future.result() for future in futures]

    report = FanOutReport(results=results)
    if report.failed_count:
        logger.warning(f"[FANOUT] {report.failed_count}/{report.total} calls failed")
    else:
        logger.info(f"[FANOUT] All {report.total} calls succeeded")
    return report
