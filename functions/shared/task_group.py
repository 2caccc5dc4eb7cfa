# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Bounded fan-out over independent units of work."""

import concurrent.futures
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class TaskOutcome(Generic[T, R]):
    """The result of running one item: either a value or the error it raised."""

    item: T
    value: Optional[R] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_bounded(
    func: Callable[[T], R], items: Iterable[T], max_workers: int
) -> List[TaskOutcome[T, R]]:
    """
    Runs `func` over `items` with at most `max_workers` calls in flight.

    Every item produces exactly one TaskOutcome, returned in input order
    regardless of completion order. An exception raised for one item is
    captured in its outcome and never cancels the others.

    Args:
        func: Called once per item.
        items: The units of work.
        max_workers: Upper bound on concurrent calls.

    Returns:
        List[TaskOutcome]: One outcome per item, in input order.
    """
    items = list(items)
    if not items:
        return []

    outcomes: List[TaskOutcome[T, R]] = []
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(items)))
    ) as executor:
        futures = [executor.submit(func, item) for item in items]
        for item, future in zip(items, futures):
            try:
                outcomes.append(TaskOutcome(item=item, value=future.result()))
            except Exception as e:
                outcomes.append(TaskOutcome(item=item, error=e))
    return outcomes
