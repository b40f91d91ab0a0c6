from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from threading import Lock
from typing import Dict, Iterable, List, Sequence, Union

from evalproxy.core.exceptions.exceptions import InvalidCategoryError

Number = Union[int, float]

CATEGORIES = ("p", "f", "e", "r")


@dataclass(frozen=True)
class WindowUpdate:
    prev_state: List[Number]
    curr_state: List[Number]
    avg: float


def average(values: Sequence[Number]) -> float:
    """Mean rounded to 2 decimals, halves rounded up (not to even)."""
    if not values:
        return 0.0
    mean = Decimal(sum(values) / len(values))
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class WindowBuffer:
    """Fixed-capacity, deduplicated, arrival-ordered window of numbers.

    Oldest values are evicted first once the window is full.
    """

    def __init__(self, capacity: int = 10):
        if capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        self.capacity = capacity
        self._items: List[Number] = []
        self._lock = Lock()

    @property
    def items(self) -> List[Number]:
        return list(self._items)

    def update(self, incoming: Iterable[Number]) -> WindowUpdate:
        with self._lock:
            prev_state = list(self._items)
            seen = set(prev_state)
            new_unique = []
            for value in incoming:
                if value not in seen:
                    new_unique.append(value)
                    seen.add(value)

            curr_state = (prev_state + new_unique)[-self.capacity:]
            self._items = curr_state
            return WindowUpdate(prev_state, list(curr_state), average(curr_state))


class WindowStore:
    """One WindowBuffer per number category."""

    def __init__(self, capacity: int = 10, categories: Sequence[str] = CATEGORIES):
        self.capacity = capacity
        self._buffers: Dict[str, WindowBuffer] = {c: WindowBuffer(capacity) for c in categories}

    def is_valid(self, category: str) -> bool:
        return category in self._buffers

    def buffer(self, category: str) -> WindowBuffer:
        try:
            return self._buffers[category]
        except KeyError:
            raise InvalidCategoryError(category) from None

    def update(self, category: str, incoming: Iterable[Number]) -> WindowUpdate:
        return self.buffer(category).update(incoming)
