"""Build engine inputs from storage records.

The surrounding application stores loans and budgets with decimal columns
serialized as strings and camelCase field names. These helpers accept those
records (or snake_case equivalents) and return the dataclasses the engine
works with. Malformed records raise ``ValueError`` naming the field.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .data_models import SOURCE_TYPES, Loan, MonthlyBudget, Portfolio
from .utils import parse_date, to_decimal

_MISSING = object()


def _snake(name: str) -> str:
    return "".join("_" + ch.lower() if ch.isupper() else ch for ch in name)


def _field(record: Mapping[str, Any], name: str, default: Any = _MISSING) -> Any:
    """Look a field up by its camelCase name, then its snake_case name."""
    if name in record:
        return record[name]
    snake = _snake(name)
    if snake in record:
        return record[snake]
    if default is _MISSING:
        raise ValueError(f"Record is missing required field '{name}'")
    return default


def _amount(record: Mapping[str, Any], name: str):
    value = _field(record, name)
    try:
        amount = to_decimal(value)
    except ValueError as exc:
        raise ValueError(f"Field '{name}' is not a number: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Field '{name}' must be finite; got {value!r}")
    return amount


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def loan_from_record(record: Mapping[str, Any]) -> Loan:
    """Convert one loan row into a :class:`Loan`."""
    loan_id = _field(record, "id")
    try:
        start = parse_date(_field(record, "startDate"))
    except ValueError as exc:
        raise ValueError(f"Loan {loan_id}: {exc}") from exc

    priority = _field(record, "priorityOrder", None)
    if priority is not None:
        try:
            priority = int(priority)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Loan {loan_id}: priorityOrder must be an integer") from exc

    source_type = _field(record, "sourceType", None)
    if source_type is not None and source_type not in SOURCE_TYPES:
        raise ValueError(f"Loan {loan_id}: unknown sourceType {source_type!r}")

    return Loan(
        id=loan_id,
        current_balance=_amount(record, "currentBalance"),
        minimum_payment=_amount(record, "minimumPayment"),
        interest_rate=_amount(record, "interestRate"),
        start_date=start,
        priority_order=priority,
        is_active=_flag(_field(record, "isActive", True)),
        lender_name=str(_field(record, "lenderName", "") or ""),
        source_type=source_type,
        strategy_type=_field(record, "strategyType", None),
    )


def budget_from_record(record: Mapping[str, Any]) -> MonthlyBudget:
    """Convert one budget row into a :class:`MonthlyBudget`."""
    effective = _field(record, "effectiveDate", None)
    return MonthlyBudget(
        monthly_allocation=_amount(record, "monthlyAllocation"),
        effective_date=parse_date(effective) if effective else None,
        is_active=_flag(_field(record, "isActive", True)),
        notes=_field(record, "notes", None),
    )


def active_budget(budgets: Iterable[MonthlyBudget]) -> Optional[MonthlyBudget]:
    """Return the first active budget, or None."""
    for budget in budgets:
        if budget.is_active:
            return budget
    return None


def portfolio_from_dict(data: Mapping[str, Any]) -> Portfolio:
    """Build a :class:`Portfolio` from ``{"loans": [...], "budgets": [...]}``.

    A single ``"budget"`` object is accepted in place of ``"budgets"``.
    """
    loan_rows = data.get("loans")
    if not isinstance(loan_rows, list):
        raise ValueError("Portfolio must contain a 'loans' list")
    loans = [loan_from_record(row) for row in loan_rows]
    seen = set()
    for loan in loans:
        if loan.id in seen:
            raise ValueError(f"Duplicate loan id: {loan.id}")
        seen.add(loan.id)

    budget_rows: List[Mapping[str, Any]] = list(data.get("budgets") or [])
    if data.get("budget"):
        budget_rows.append(data["budget"])
    return Portfolio(loans=loans, budgets=[budget_from_record(row) for row in budget_rows])


def load_portfolio(path: Path) -> Portfolio:
    """Read a portfolio JSON file."""
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Portfolio file must contain a JSON object")
    return portfolio_from_dict(data)
