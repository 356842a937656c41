"""Display values derived from portal records.

Everything here is a pure function of its inputs; nothing is persisted.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Iterable, Optional, TypeVar, Union

from pydantic import BaseModel

from .models import (
    CENTS,
    Client,
    DashboardStats,
    Invoice,
    InvoiceStatus,
    Payment,
    Project,
    ProjectCredentials,
    ProjectStatus,
)

T = TypeVar("T")

RECENT_LIMIT = 5


# ---------------------------------------------------------------------------
# Status tags
# ---------------------------------------------------------------------------


class StatusTag(str, Enum):
    GRAY = "gray"
    BLUE = "blue"
    YELLOW = "yellow"
    GREEN = "green"
    PURPLE = "purple"
    RED = "red"
    MUTED = "muted"  # unknown status


class Palette(str, Enum):
    DASHBOARD = "dashboard"
    PROJECTS = "projects"


_PROJECT_TAGS = {
    Palette.DASHBOARD: {
        ProjectStatus.PLANNING: StatusTag.GRAY,
        ProjectStatus.ACTIVE: StatusTag.BLUE,
        ProjectStatus.ON_HOLD: StatusTag.YELLOW,
        ProjectStatus.COMPLETED: StatusTag.GREEN,
    },
    Palette.PROJECTS: {
        ProjectStatus.PLANNING: StatusTag.BLUE,
        ProjectStatus.ACTIVE: StatusTag.GREEN,
        ProjectStatus.ON_HOLD: StatusTag.YELLOW,
        ProjectStatus.COMPLETED: StatusTag.PURPLE,
    },
}

_INVOICE_TAGS = {
    InvoiceStatus.DRAFT: StatusTag.GRAY,
    InvoiceStatus.SENT: StatusTag.BLUE,
    InvoiceStatus.PAID: StatusTag.GREEN,
    InvoiceStatus.OVERDUE: StatusTag.RED,
}


def status_class(
    status: Union[ProjectStatus, InvoiceStatus, str, None],
    palette: Palette = Palette.DASHBOARD,
) -> StatusTag:
    """Style tag for a project or invoice status; MUTED for anything else."""
    value = status.value if isinstance(status, Enum) else status
    try:
        return _PROJECT_TAGS[palette][ProjectStatus(value)]
    except ValueError:
        pass
    try:
        return _INVOICE_TAGS[InvoiceStatus(value)]
    except ValueError:
        return StatusTag.MUTED


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def progress_badge(progress: Optional[int]) -> str:
    value = max(0, min(100, int(progress or 0)))
    return f"{value}%"


def format_currency(amount: Union[Decimal, int, str, None], symbol: str = "") -> str:
    """Amount with exactly two fraction digits.

    Absent, unparseable, non-finite or unrepresentable amounts show as ``0.00``.
    """
    value = Decimal("0")
    if amount is not None and amount != "":
        try:
            parsed = Decimal(str(amount))
            if parsed.is_finite():
                value = parsed.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            value = Decimal("0")
    return f"{symbol}{value.quantize(CENTS)}"


def format_date(value: Optional[date], fmt: str = "%m/%d/%Y") -> str:
    return value.strftime(fmt) if value else ""


def days_until(due: Optional[date], today: date) -> Optional[int]:
    """Days from today to the due date; negative once it has passed."""
    if due is None:
        return None
    return (due - today).days


def is_past_due(invoice: Invoice, today: date) -> bool:
    """Unpaid invoice whose due date lies before today."""
    if invoice.status in (InvoiceStatus.PAID, InvoiceStatus.DRAFT):
        return False
    remaining = days_until(invoice.due_date, today)
    return remaining is not None and remaining < 0


# ---------------------------------------------------------------------------
# List filters
# ---------------------------------------------------------------------------


def recent(items: Optional[Iterable[T]], limit: int = RECENT_LIMIT) -> list[T]:
    """First ``limit`` items in input order."""
    return list(items or ())[:limit]


def filter_limit(
    items: Optional[Iterable[T]],
    predicate: Callable[[T], bool],
    limit: int = RECENT_LIMIT,
) -> list[T]:
    return recent((item for item in items or () if predicate(item)), limit)


def active_projects(
    projects: Optional[Iterable[Project]], limit: int = RECENT_LIMIT
) -> list[Project]:
    return filter_limit(projects, lambda p: p.status == ProjectStatus.ACTIVE, limit)


# ---------------------------------------------------------------------------
# Rows and cards
# ---------------------------------------------------------------------------


class KpiCard(BaseModel):
    key: str
    title: str
    value: str


class ProjectRow(BaseModel):
    id: str
    name: str
    description: str = ""
    progress: int = 0
    badge: str
    tag: StatusTag


class ProjectCard(BaseModel):
    id: str
    name: str
    status: str
    tag: StatusTag
    description: Optional[str] = None
    progress: int = 0
    badge: str
    budget: Optional[str] = None
    deadline: Optional[str] = None


class InvoiceRow(BaseModel):
    id: str
    invoice_number: str
    due: str
    amount: str
    status: str
    tag: StatusTag
    past_due: bool = False


class PaymentRow(BaseModel):
    id: str
    title: str
    date: str
    amount: str
    notes: Optional[str] = None


def kpi_cards(stats: Optional[DashboardStats], symbol: str = "") -> list[KpiCard]:
    """KPI tiles shown at the top of the client dashboard."""
    stats = stats or DashboardStats()
    return [
        KpiCard(key="total-projects", title="Total Projects", value=str(stats.total_projects)),
        KpiCard(key="active-projects", title="Active Projects", value=str(stats.active_projects)),
        KpiCard(key="completed-projects", title="Completed Projects", value=str(stats.completed_projects)),
        KpiCard(key="total-spent", title="Total Spent", value=format_currency(stats.total_spent, symbol)),
        KpiCard(key="pending-amount", title="Pending Amount", value=format_currency(stats.pending_amount, symbol)),
        KpiCard(key="paid-invoices", title="Paid Invoices", value=str(stats.paid_invoices)),
    ]


def project_row(project: Project) -> ProjectRow:
    return ProjectRow(
        id=project.id,
        name=project.name,
        description=project.description or "",
        progress=project.progress or 0,
        badge=progress_badge(project.progress),
        tag=status_class(project.status),
    )


def project_card(project: Project, symbol: str = "$", date_format: str = "%m/%d/%Y") -> ProjectCard:
    return ProjectCard(
        id=project.id,
        name=project.name,
        status=project.status.value,
        tag=status_class(project.status, Palette.PROJECTS),
        description=project.description or None,
        progress=project.progress or 0,
        badge=progress_badge(project.progress),
        budget=f"{symbol}{project.budget}" if project.budget else None,
        deadline=format_date(project.deadline, date_format) or None,
    )


def invoice_row(
    invoice: Invoice,
    today: date,
    symbol: str = "$",
    date_format: str = "%m/%d/%Y",
) -> InvoiceRow:
    return InvoiceRow(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        due=format_date(invoice.due_date, date_format),
        amount=format_currency(invoice.amount, symbol),
        status=invoice.status.value,
        tag=status_class(invoice.status),
        past_due=is_past_due(invoice, today),
    )


def payment_row(payment: Payment, symbol: str = "$", date_format: str = "%m/%d/%Y") -> PaymentRow:
    return PaymentRow(
        id=payment.id,
        title=f"Payment via {payment.payment_method}",
        date=format_date(payment.payment_date, date_format),
        amount=format_currency(payment.amount, symbol),
        notes=payment.notes or None,
    )


class ClientOption(BaseModel):
    value: str
    label: str


def client_options(clients: Optional[Iterable[Client]]) -> list[ClientOption]:
    """Entries for the project form's client select, sorted by name."""
    options = [ClientOption(value=c.id, label=c.name) for c in clients or []]
    return sorted(options, key=lambda o: o.label.lower())


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class CredentialAction(BaseModel):
    """A copy (and optionally open) affordance for one credential field."""

    kind: str
    label: str
    value: str
    copy_key: str
    can_open: bool


class VideoAction(BaseModel):
    kind: str
    label: str
    url: str


class CredentialCard(BaseModel):
    id: str
    project_name: str
    thumbnail_src: Optional[str] = None
    hosting_platform: Optional[str] = None
    short_description: Optional[str] = None
    links: Optional[list[CredentialAction]] = None
    videos: Optional[list[VideoAction]] = None

    @property
    def is_empty(self) -> bool:
        return not self.links and not self.videos


# (attribute, kind, label, can_open)
CREDENTIAL_LINKS = (
    ("live_link", "live", "Live Website", True),
    ("admin_panel_link", "admin", "Admin Panel", True),
    ("database_url", "db", "Database URL", False),
    ("server_credentials", "server", "Server Credentials", False),
)

CREDENTIAL_VIDEOS = (
    ("short_video_url", "short-video", "Presentable Video"),
    ("full_video_url", "full-video", "Full Features Demo"),
)


def copy_key(kind: str, credential_id: str) -> str:
    """Logical clipboard field id, e.g. ``live-42``."""
    return f"{kind}-{credential_id}"


def thumbnail_src(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    if url.startswith(("http://", "https://", "/")):
        return url
    return f"/{url}"


def render_credential_card(credential: ProjectCredentials) -> CredentialCard:
    """Card with one action per set field; empty groups are None."""
    links = [
        CredentialAction(
            kind=kind,
            label=label,
            value=getattr(credential, attr),
            copy_key=copy_key(kind, credential.id),
            can_open=can_open,
        )
        for attr, kind, label, can_open in CREDENTIAL_LINKS
        if getattr(credential, attr)
    ]
    videos = [
        VideoAction(kind=kind, label=label, url=getattr(credential, attr))
        for attr, kind, label in CREDENTIAL_VIDEOS
        if getattr(credential, attr)
    ]
    return CredentialCard(
        id=credential.id,
        project_name=credential.project_name,
        thumbnail_src=thumbnail_src(credential.thumbnail_url),
        hosting_platform=credential.hosting_platform or None,
        short_description=credential.short_description or None,
        links=links or None,
        videos=videos or None,
    )


def render_credentials_section(
    credentials: Optional[Iterable[ProjectCredentials]],
) -> Optional[list[CredentialCard]]:
    """Credential cards, or None when the section should not be shown."""
    cards = [render_credential_card(c) for c in credentials or ()]
    return cards or None
