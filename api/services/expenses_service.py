"""Expense totals for the accounts page."""

from __future__ import annotations

from collections.abc import Iterable

from api.schemas.metrics import ExpenseSummaryResponse
from innothon.models import Expense

from .revenue import AMOUNT_DECIMALS
from .safety import total_function


def _no_expenses(*args: object, **kwargs: object) -> ExpenseSummaryResponse:
    return ExpenseSummaryResponse(count=0, total_amount=0.0, pending_reimbursement=0.0, needs_stamp=0, reimbursed=0)


@total_function(_no_expenses)
def expense_summary(expenses: Iterable[Expense]) -> ExpenseSummaryResponse:
    """Total spent, still owed to organisers, bills waiting for a stamp, and bills settled.

    A reimbursed bill no longer needs a stamp, whatever its needs_stamp flag says.
    """
    expenses = list(expenses)
    pending = [expense for expense in expenses if not expense.is_reimbursed]
    return ExpenseSummaryResponse(
        count=len(expenses),
        total_amount=round(sum(expense.amount for expense in expenses), AMOUNT_DECIMALS),
        pending_reimbursement=round(sum(expense.amount for expense in pending), AMOUNT_DECIMALS),
        needs_stamp=sum(1 for expense in pending if expense.needs_stamp),
        reimbursed=len(expenses) - len(pending),
    )
