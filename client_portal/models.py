"""Pydantic models for the client portal records.

Records travel as camelCase JSON (``invoiceNumber``, ``clientId``) and are
exposed as snake_case attributes. Money is ``Decimal`` throughout.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


CENTS = Decimal("0.01")


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


def to_calendar_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a calendar date.

    Datetimes are truncated to their UTC date. Empty strings become None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if len(text) == 10:
        return date.fromisoformat(text)
    # fromisoformat() only learned the trailing "Z" in 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_calendar_date(datetime.fromisoformat(text))


class PortalModel(BaseModel):
    """Base for records exchanged with the portal API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Client(PortalModel):
    id: str
    name: str


class Project(PortalModel):
    id: str
    client_id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    budget: Optional[str] = None
    progress: int = Field(default=0, ge=0, le=100)
    deadline: Optional[date] = None

    # Delivery metadata
    short_video_url: Optional[str] = None
    full_feature_video_url: Optional[str] = None
    hosting_link: Optional[str] = None
    admin_login_link: Optional[str] = None
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None
    credentials_notes: Optional[str] = None

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline_as_date(cls, value):
        return to_calendar_date(value)

    @field_validator("progress", mode="before")
    @classmethod
    def _progress_default(cls, value):
        return 0 if value is None else value


class Invoice(PortalModel):
    id: str
    project_id: Optional[str] = None
    invoice_number: str
    amount: Decimal = Decimal("0")
    due_date: Optional[date] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_as_date(cls, value):
        return to_calendar_date(value)


class Payment(PortalModel):
    id: str
    invoice_id: Optional[str] = None
    amount: Decimal = Decimal("0")
    payment_date: Optional[date] = None
    payment_method: str = ""
    notes: Optional[str] = None

    @field_validator("payment_date", mode="before")
    @classmethod
    def _paid_as_date(cls, value):
        return to_calendar_date(value)


class ProjectCredentials(PortalModel):
    """Client-visible delivery credentials, authored on the agency side."""

    id: str
    project_name: str
    thumbnail_url: Optional[str] = None
    hosting_platform: Optional[str] = None
    short_description: Optional[str] = None
    live_link: Optional[str] = None
    admin_panel_link: Optional[str] = None
    database_url: Optional[str] = None
    server_credentials: Optional[str] = None
    short_video_url: Optional[str] = None
    full_video_url: Optional[str] = None


class DashboardStats(PortalModel):
    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_invoices: int = 0
    total_spent: Decimal = Decimal("0.00")
    pending_amount: Decimal = Decimal("0.00")
    paid_invoices: int = 0
