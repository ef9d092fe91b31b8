from schemas import Interval

MAX_INTERVALS = 5
FIELDS = ("start", "end")


class IntervalListEditor:
    """Editable list of time-of-day intervals, capped at MAX_INTERVALS entries."""

    def __init__(self):
        self._items: list[Interval] = [Interval()]

    @property
    def items(self) -> list[Interval]:
        return [item.model_copy() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def append(self) -> list[Interval]:
        """Add an empty interval unless the list is full. Returns the new state."""
        if len(self._items) < MAX_INTERVALS:
            self._items.append(Interval())
        return self.items

    def set_field(self, index: int, field: str, value: str) -> list[Interval]:
        """Replace `start` or `end` of the interval at `index`. Returns the new state."""
        if field not in FIELDS:
            raise ValueError(f"Field must be one of: {FIELDS}")
        if index < 0 or index >= len(self._items):
            raise IndexError(f"No interval at position {index}")
        self._items[index] = self._items[index].model_copy(update={field: value})
        return self.items

    def to_persistable(self) -> list[Interval]:
        """Complete intervals only, in original order. Incomplete ones are dropped, not rejected."""
        return [item.model_copy() for item in self._items if item.start and item.end]

    def reset(self) -> list[Interval]:
        self._items = [Interval()]
        return self.items
