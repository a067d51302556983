"""
Saved calculation history.

The history is an ordered log of TipRecords, oldest first. Every mutation
writes the whole sequence back under a single key; there is no incremental
diff. Reads that fail for any reason yield an empty history.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .calculator import BillInput, Category, calculate, format_currency, format_percent
from .config import HISTORY_KEY, RECENT_WINDOW_DAYS
from .store import KeyValueStore, StorageError
from .validation import validate_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TipRecord:
    """One saved calculation."""
    id: str
    bill_amount: float
    tip_amount: float
    tip_percent: int
    total_amount: float
    timestamp: datetime
    category: Optional[Category] = None

    def describe(self) -> str:
        """One-line summary, e.g. '$50.00 + 20% = $60.00'."""
        return (
            f"{format_currency(self.bill_amount)} + {format_percent(self.tip_percent)}"
            f" = {format_currency(self.total_amount)}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "bill_amount": self.bill_amount,
            "tip_amount": self.tip_amount,
            "tip_percent": self.tip_percent,
            "total_amount": self.total_amount,
            "category": self.category.value if self.category else None,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TipRecord":
        """
        Rebuild a record from its stored form.

        Raises:
            KeyError, TypeError, ValueError: If d is not a stored record
        """
        timestamp = datetime.fromisoformat(d["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        category = d.get("category")
        return cls(
            id=str(d["id"]),
            bill_amount=float(d["bill_amount"]),
            tip_amount=float(d["tip_amount"]),
            tip_percent=int(d["tip_percent"]),
            total_amount=float(d["total_amount"]),
            timestamp=timestamp,
            category=Category(category) if category else None,
        )


class HistoryStore:
    """In-memory history mirrored to a key-value store."""

    def __init__(self, store: Optional[KeyValueStore] = None, key: str = HISTORY_KEY):
        self.store = store or KeyValueStore()
        self.key = key
        self._records: List[TipRecord] = []

    def load_all(self) -> List[TipRecord]:
        """
        Replace the in-memory history with what is persisted.

        Returns:
            Records in append order; empty if nothing usable is stored
        """
        self._records = self._decode()
        logger.info(f"Loaded {len(self._records)} history records")
        return list(self._records)

    def append(self, record: TipRecord) -> None:
        """Add a record and persist the whole history."""
        self._records.append(record)
        self._persist()

    def clear(self) -> None:
        """Drop every record and remove the persisted key."""
        self._records = []
        try:
            self.store.remove(self.key)
        except StorageError as e:
            logger.warning(f"Failed to remove persisted history: {e}")
        logger.info("Cleared history")

    def save(self, bill_input: BillInput, now: Optional[datetime] = None) -> TipRecord:
        """
        Validate the form and record the calculation.

        Args:
            bill_input: Current form fields
            now: Timestamp for the record, defaults to the current UTC time

        Returns:
            The appended TipRecord

        Raises:
            InputError: If the amount is missing or not positive
        """
        validate_amount(bill_input.amount)
        calc = calculate(bill_input)
        record = TipRecord(
            id=uuid.uuid4().hex,
            bill_amount=calc.bill,
            tip_amount=calc.tip_amount,
            tip_percent=calc.tip_percent,
            total_amount=calc.total_amount,
            timestamp=now or datetime.now(timezone.utc),
            category=bill_input.category,
        )
        self.append(record)
        logger.info(
            f"Saved record {record.id}: {record.describe()}",
            extra={"record_id": record.id, "category": bill_input.category and bill_input.category.value},
        )
        return record

    def records(self) -> List[TipRecord]:
        """All records, oldest first."""
        return list(self._records)

    def recent(self, limit: Optional[int] = None) -> List[TipRecord]:
        """Records most recent first, optionally truncated."""
        ordered = self._records[::-1]
        if limit is not None:
            ordered = ordered[:limit]
        return ordered

    def __len__(self) -> int:
        return len(self._records)

    def top_category(self) -> Optional[Category]:
        """Category with the highest summed tip, or None if nothing is categorized."""
        totals: Dict[Category, float] = {}
        for record in self._records:
            if record.category is None:
                continue
            totals[record.category] = totals.get(record.category, 0.0) + record.tip_amount
        if not totals:
            return None
        return max(totals, key=totals.get)

    def last_week_tip_sum(self, now: Optional[datetime] = None) -> float:
        """Sum of tips saved within the last RECENT_WINDOW_DAYS days."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=RECENT_WINDOW_DAYS)
        return sum(r.tip_amount for r in self._records if r.timestamp >= cutoff)

    def _persist(self) -> None:
        try:
            self.store.set(self.key, [r.to_dict() for r in self._records])
        except StorageError as e:
            logger.warning(f"Failed to persist history: {e}")

    def _decode(self) -> List[TipRecord]:
        try:
            raw = self.store.get(self.key)
        except StorageError as e:
            logger.warning(f"Ignoring unreadable history: {e}")
            return []

        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Ignoring history of unexpected type {type(raw).__name__}")
            return []

        try:
            return [TipRecord.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            # Older stores kept preformatted strings; they cannot be rebuilt into records
            logger.warning(f"Ignoring undecodable history ({len(raw)} entries): {e}")
            return []


# Global history store instance
_history_store: Optional[HistoryStore] = None


def get_history_store() -> HistoryStore:
    """Get or create the global history store, loading persisted records on creation."""
    global _history_store
    if _history_store is None:
        _history_store = HistoryStore()
        _history_store.load_all()
    return _history_store
