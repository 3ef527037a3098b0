"""Immutable transaction collection with copy-on-write updates"""

from datetime import date, timedelta
from typing import Iterable, Iterator, Optional, Tuple

from finance_mentor.domain.exceptions import NotFoundError
from finance_mentor.domain.models import Category, Transaction, TransactionType


class TransactionSet:
    """
    Ordered, read-only set of transactions (newest first).

    Every mutation returns a new TransactionSet; the receiver is never
    modified, so a derivation holding a reference always sees a whole set.
    """

    __slots__ = ("_items",)

    def __init__(self, transactions: Iterable[Transaction] = ()):
        # Stable sort keeps insertion order for same-day transactions
        self._items: Tuple[Transaction, ...] = tuple(
            sorted(transactions, key=lambda t: t.date, reverse=True)
        )

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, txn_id: object) -> bool:
        return any(t.id == txn_id for t in self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"TransactionSet({len(self._items)} transactions)"

    def get(self, txn_id: str) -> Transaction:
        for txn in self._items:
            if txn.id == txn_id:
                return txn
        raise NotFoundError(f"Transaction {txn_id} not found")

    def add(self, *transactions: Transaction) -> "TransactionSet":
        return TransactionSet(list(transactions) + list(self._items))

    def extend(self, transactions: Iterable[Transaction]) -> "TransactionSet":
        return self.add(*transactions)

    def remove(self, txn_id: str) -> "TransactionSet":
        if txn_id not in self:
            raise NotFoundError(f"Transaction {txn_id} not found")
        return TransactionSet(t for t in self._items if t.id != txn_id)

    def replace(self, txn_id: str, replacement: Transaction) -> "TransactionSet":
        """Remove then add; transactions are never edited in place"""
        return self.remove(txn_id).add(replacement)

    def filter(
        self,
        search: Optional[str] = None,
        txn_type: Optional[TransactionType] = None,
        category: Optional[Category] = None,
        days: Optional[int] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> "TransactionSet":
        """Narrow the set; every criterion left as None is ignored"""
        items = list(self._items)

        if search:
            needle = search.lower()
            items = [t for t in items if needle in t.description.lower() or needle in t.category.value.lower()]
        if txn_type is not None:
            items = [t for t in items if t.type == txn_type]
        if category is not None:
            items = [t for t in items if t.category == category]
        if days is not None:
            cutoff = (today or date.today()) - timedelta(days=days)
            items = [t for t in items if t.date >= cutoff]
        if min_amount is not None:
            items = [t for t in items if t.amount >= min_amount]
        if max_amount is not None:
            items = [t for t in items if t.amount <= max_amount]
        if start is not None:
            items = [t for t in items if t.date >= start]
        if end is not None:
            items = [t for t in items if t.date <= end]

        return TransactionSet(items)
