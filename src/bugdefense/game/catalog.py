"""Bug pool and the shuffled draw sequence."""

import random
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class BugCategory(Enum):
    """Which gate stops a bug."""
    UNIT = "unit"
    CONTRACT = "contract"
    INTEGRATION = "integration"

    @property
    def gate_name(self) -> str:
        return {
            BugCategory.UNIT: "UNIT TEST",
            BugCategory.CONTRACT: "CONTRACT TEST",
            BugCategory.INTEGRATION: "INTEGRATION",
        }[self]


@dataclass(frozen=True)
class BugDefinition:
    id: str
    label: str
    category: BugCategory


_UNIT_LABELS = [
    "Off-by-one error", "Wrong variable type", "Null pointer in util", "GST calc wrong",
    "Rounding mismatch", "Missing validation", "Incorrect loop bound", "Uninitialized var",
    "Edge-case divide by zero", "Wrong default value", "Wrong comparator",
    "Floating precision bug", "Wrong sign on calculation", "Index out of range",
    "Incorrect accumulator", "Wrong math formula", "Missing unit test",
    "Order of operations bug", "Bad regex logic", "Wrong constant used",
    "Locale number parse bug", "Time-zone handling bug", "Incorrect flag check",
    "State mutation bug", "Callback misuse",
]

_CONTRACT_LABELS = [
    "API contract mismatch", "Missing response field", "Wrong HTTP status",
    "Schema version mismatch", "Field type mismatch", "Unexpected null in response",
    "Header missing", "Wrong content-type", "Response shape changed", "Deprecated field used",
    "Payload key typo", "Missing required param", "Extra field in response",
    "Versioning mismatch", "Incorrect enum value", "Invalid JSON format",
    "Missing validation in schema", "Query param name typo", "Incorrect date format",
    "Wrong pagination format", "Incorrect status code mapping", "Auth header name mismatch",
    "Field maxLength exceeded", "Wrong field encoding", "Trailing comma in response",
]

_INTEGRATION_LABELS = [
    "DB query fails intermittently", "Config missing in CI", "Container env mismatch",
    "Service timeout in cluster", "Race condition across services", "Circuit breaker not set",
    "Retry logic missing", "Downstream API latency", "Wrong endpoint routing",
    "Auth token refresh failure", "Network partition issue", "Load balancer misroute",
    "Session stickiness lost", "Wrong service discovery", "SSL cert mismatch",
    "Timeout too low", "Ordering of messages wrong", "Transaction not rolled back",
    "Cache invalidation bug", "Feature flag not propagated", "Message queue DLQ spike",
    "Throttling misconfigured", "Cross-origin blocked", "DNS propagation issue",
    "Legacy endpoint hit",
]


def _build_pool() -> List[BugDefinition]:
    pool = []
    groups = [
        (BugCategory.UNIT, _UNIT_LABELS),
        (BugCategory.CONTRACT, _CONTRACT_LABELS),
        (BugCategory.INTEGRATION, _INTEGRATION_LABELS),
    ]
    for category, labels in groups:
        for label in labels:
            pool.append(BugDefinition(id=f"b{len(pool)}", label=label, category=category))
    return pool


BUG_POOL: List[BugDefinition] = _build_pool()


def shuffle(items: list, rng: random.Random) -> list:
    """Fisher-Yates shuffle in place. Returns the same list."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class BugCatalog:
    """Endless draw sequence over a fixed pool.

    Each pass through the pool is a fresh uniform permutation; when a pass
    runs out the pool is reshuffled and drawing continues. Repeats across
    a reshuffle boundary are allowed.
    """

    def __init__(
        self,
        pool: Optional[Sequence[BugDefinition]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._pool = list(pool if pool is not None else BUG_POOL)
        if not self._pool:
            raise ValueError("bug pool must not be empty")
        self._rng = rng or random.Random()
        self._queue: List[BugDefinition] = []
        self._reshuffle()

    @property
    def size(self) -> int:
        return len(self._pool)

    def _reshuffle(self) -> None:
        self._queue = shuffle(list(self._pool), self._rng)
        self._queue.reverse()  # pop() from the end keeps draw order
        logger.debug(f"Bug pool reshuffled ({len(self._queue)} entries)")

    def draw(self) -> BugDefinition:
        """Next bug in the sequence."""
        if not self._queue:
            self._reshuffle()
        return self._queue.pop()
