"""Dashboard statistics computed from raw project/invoice/payment collections."""

from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional

from .models import (
    CENTS,
    DashboardStats,
    Invoice,
    InvoiceStatus,
    Payment,
    Project,
    ProjectStatus,
)

# Invoices still owed by the client
OUTSTANDING = frozenset({InvoiceStatus.SENT, InvoiceStatus.OVERDUE})


def sum_amounts(records: Optional[Iterable]) -> Decimal:
    """Sum the ``amount`` of each record with a Decimal accumulator."""
    total = Decimal("0")
    for record in records or ():
        total += Decimal(record.amount or 0)
    return total.quantize(CENTS)


def aggregate(
    projects: Optional[Iterable[Project]],
    invoices: Optional[Iterable[Invoice]],
    payments: Optional[Iterable[Payment]],
) -> DashboardStats:
    """Reduce the three collections to one DashboardStats record.

    A missing collection (failed fetch) counts as empty.
    """
    projects = list(projects or ())
    invoices = list(invoices or ())

    project_status = Counter(p.status for p in projects)
    invoice_status = Counter(i.status for i in invoices)

    return DashboardStats(
        total_projects=len(projects),
        active_projects=project_status[ProjectStatus.ACTIVE],
        completed_projects=project_status[ProjectStatus.COMPLETED],
        total_invoices=len(invoices),
        paid_invoices=invoice_status[InvoiceStatus.PAID],
        total_spent=sum_amounts(payments),
        pending_amount=sum_amounts(i for i in invoices if i.status in OUTSTANDING),
    )
