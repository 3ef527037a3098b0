"""Normalizer - turns raw delimited text or manual input into Transactions"""

import csv
import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set

from finance_mentor.domain import categorizer
from finance_mentor.domain.exceptions import (
    InvalidTransactionDataError,
    MalformedInputError,
    MissingRequiredColumnsError,
    NoValidRowsError,
    TransactionImportError,
)
from finance_mentor.domain.models import Category, Transaction, TransactionType

DEFAULT_DESCRIPTION = "Imported Transaction"

# Header substrings per column role, first matching header wins
COLUMN_PATTERNS: Dict[str, tuple] = {
    "date": ("date",),
    "amount": ("amount",),
    "description": ("desc", "narr"),
    "type": ("type", "cr/dr"),
    "category": ("cat",),
}

DATE_FORMATS = (
    "%m/%d/%Y",  # 01/30/2025
    "%m/%d/%y",  # 1/30/23
    "%Y/%m/%d",  # 2025/01/30
    "%d.%m.%Y",  # 30.01.2025
    "%b %d, %Y",  # Jan 30, 2025
    "%B %d, %Y",  # January 30, 2025
    "%d %b %Y",  # 30 Jan 2025
)

_AMOUNT_NOISE = re.compile(r"[^0-9.\-]")


@dataclass
class ImportResult:
    """Outcome of one normalize() call"""

    transactions: List[Transaction] = field(default_factory=list)
    skipped_rows: int = 0
    error: Optional[TransactionImportError] = None

    @property
    def success(self) -> bool:
        return self.error is None and bool(self.transactions)


def _clean_cell(cell: str) -> str:
    return cell.replace('"', "").strip()


def detect_columns(header_cells: List[str]) -> Dict[str, int]:
    """Map column roles to header indexes; missing roles are absent from the result"""
    headers = [_clean_cell(h).lower() for h in header_cells]
    columns: Dict[str, int] = {}
    for role, patterns in COLUMN_PATTERNS.items():
        for idx, header in enumerate(headers):
            if any(p in header for p in patterns):
                columns[role] = idx
                break
    return columns


def parse_amount(raw: str) -> Optional[float]:
    """Strip everything but digits, '.' and '-', then parse. None if not numeric or not finite."""
    cleaned = _AMOUNT_NOISE.sub("", raw or "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_date(raw: str) -> Optional[date]:
    """Parse a calendar date from the common bank export formats. None if invalid."""
    text = (raw or "").strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def new_transaction_id(taken: Optional[Set[str]] = None) -> str:
    """Fresh opaque id, avoiding any id already in use"""
    while True:
        candidate = uuid.uuid4().hex[:12]
        if not taken or candidate not in taken:
            return candidate


def parse_transactions(
    raw_text: str,
    existing_transactions: Iterable[Transaction] = (),
    delimiter: str = ",",
) -> ImportResult:
    """
    Parse raw delimited text into a batch of new transactions.

    All-or-nothing at column detection, row-by-row afterwards: rows that are
    too short or carry an unparsable amount/date are skipped and counted.

    Raises:
        MalformedInputError: fewer than two non-blank lines
        MissingRequiredColumnsError: no date or amount column in the header
        NoValidRowsError: every data row was rejected
    """
    lines = [line for line in (raw_text or "").splitlines() if line.strip()]
    if len(lines) < 2:
        raise MalformedInputError("File is empty or missing data rows")

    rows = list(csv.reader(lines, delimiter=delimiter))
    columns = detect_columns(rows[0])
    if "date" not in columns or "amount" not in columns:
        raise MissingRequiredColumnsError("CSV must contain at least 'Date' and 'Amount' columns")

    required_width = max(columns["date"], columns["amount"]) + 1
    taken = {t.id for t in existing_transactions}

    def cell(values: List[str], role: str) -> str:
        idx = columns.get(role)
        if idx is None or idx >= len(values):
            return ""
        return values[idx]

    accepted: List[Transaction] = []
    skipped = 0
    for raw_values in rows[1:]:
        values = [_clean_cell(v) for v in raw_values]
        if len(values) < required_width:
            skipped += 1
            continue

        amount = parse_amount(cell(values, "amount"))
        if amount is None or amount == 0:
            skipped += 1
            continue

        txn_date = parse_date(cell(values, "date"))
        if txn_date is None:
            skipped += 1
            continue

        description = cell(values, "description") or DEFAULT_DESCRIPTION
        category, txn_type = categorizer.resolve(
            cell(values, "category"), cell(values, "type"), description
        )

        txn_id = new_transaction_id(taken)
        taken.add(txn_id)
        accepted.append(
            Transaction(
                id=txn_id,
                date=txn_date,
                amount=abs(amount),
                type=txn_type,
                category=category,
                description=description,
            )
        )

    if not accepted:
        raise NoValidRowsError("No valid transactions found in CSV")

    return ImportResult(transactions=accepted, skipped_rows=skipped)


def normalize(
    raw_text: str,
    existing_transactions: Iterable[Transaction] = (),
    delimiter: str = ",",
) -> ImportResult:
    """Non-raising variant of parse_transactions(); failures land in result.error"""
    try:
        return parse_transactions(raw_text, existing_transactions, delimiter)
    except TransactionImportError as e:
        return ImportResult(error=e)


def create_transaction(
    txn_date: date,
    amount: float,
    txn_type: TransactionType,
    category: Category,
    description: str,
    existing_transactions: Iterable[Transaction] = (),
) -> Transaction:
    """
    Build a manually entered transaction.

    Raises:
        InvalidTransactionDataError: non-positive amount or a category/type mismatch
    """
    if amount is None or not amount > 0:
        raise InvalidTransactionDataError("Amount must be greater than zero")
    if not math.isfinite(amount):
        raise InvalidTransactionDataError("Amount must be a finite number")
    if (category == Category.INCOME) != (txn_type == TransactionType.INCOME):
        raise InvalidTransactionDataError(
            f"Category {category.value} is inconsistent with type {txn_type.value}"
        )

    return Transaction(
        id=new_transaction_id({t.id for t in existing_transactions}),
        date=txn_date,
        amount=float(amount),
        type=txn_type,
        category=category,
        description=description.strip() or DEFAULT_DESCRIPTION,
    )
