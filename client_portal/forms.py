"""Project form state and its mapping to/from the canonical Project record.

The editable form is three groups composed into one ``ProjectForm``:

- details: name, client, description, status, budget, progress, deadline
- videos: short presentation video, full feature demo
- credentials: hosting/admin links, admin login, free-text notes

Loading fills every absent value with its entry in ``FORM_DEFAULTS`` so a
form field always has a defined value. Saving produces a ``ProjectPatch``
ready to be sent as POST/PATCH body.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, Field

from .models import PortalModel, Project, ProjectStatus, to_calendar_date


# Field defaults for a blank (create) form. On load an absent budget is ""
# rather than "0" so that it saves back as absent.
FORM_DEFAULTS = {
    "name": "",
    "client_id": "",
    "description": "",
    "status": ProjectStatus.PLANNING.value,
    "budget": "0",
    "progress": 0,
    "deadline": "",
    "short_video_url": "",
    "full_feature_video_url": "",
    "hosting_link": "",
    "admin_login_link": "",
    "admin_username": "",
    "admin_password": "",
    "credentials_notes": "",
}

TEXT_FIELDS = (
    "name",
    "client_id",
    "description",
    "short_video_url",
    "full_feature_video_url",
    "hosting_link",
    "admin_login_link",
    "admin_username",
    "admin_password",
    "credentials_notes",
)


class ProjectFormError(ValueError):
    """Form input that cannot be turned into a project patch."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        detail = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Invalid project form ({detail})")


# --- Form groups ---


class ProjectDetails(BaseModel):
    name: str = FORM_DEFAULTS["name"]
    client_id: str = FORM_DEFAULTS["client_id"]
    description: str = FORM_DEFAULTS["description"]
    status: str = FORM_DEFAULTS["status"]
    budget: str = FORM_DEFAULTS["budget"]
    progress: Union[int, str] = FORM_DEFAULTS["progress"]
    deadline: str = FORM_DEFAULTS["deadline"]


class ProjectVideos(BaseModel):
    short_video_url: str = FORM_DEFAULTS["short_video_url"]
    full_feature_video_url: str = FORM_DEFAULTS["full_feature_video_url"]


class ProjectCredentialFields(BaseModel):
    hosting_link: str = FORM_DEFAULTS["hosting_link"]
    admin_login_link: str = FORM_DEFAULTS["admin_login_link"]
    admin_username: str = FORM_DEFAULTS["admin_username"]
    admin_password: str = FORM_DEFAULTS["admin_password"]
    credentials_notes: str = FORM_DEFAULTS["credentials_notes"]


class ProjectForm(BaseModel):
    details: ProjectDetails = Field(default_factory=ProjectDetails)
    videos: ProjectVideos = Field(default_factory=ProjectVideos)
    credentials: ProjectCredentialFields = Field(default_factory=ProjectCredentialFields)

    def flat(self) -> dict:
        """All fields of the three groups as one dict."""
        return {
            **self.details.model_dump(),
            **self.videos.model_dump(),
            **self.credentials.model_dump(),
        }


class ProjectPatch(PortalModel):
    """Normalized body for creating or updating a project."""

    client_id: str
    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    budget: Optional[str] = None
    progress: int = Field(default=0, ge=0, le=100)
    deadline: Optional[date] = None
    short_video_url: str = ""
    full_feature_video_url: str = ""
    hosting_link: str = ""
    admin_login_link: str = ""
    admin_username: str = ""
    admin_password: str = ""
    credentials_notes: str = ""


# --- canonical -> editable ---


def empty_project_form() -> ProjectForm:
    """Blank form for the create flow."""
    return ProjectForm()


def load_project_form(project: Project) -> ProjectForm:
    """Project the canonical record onto an editable form.

    Absent optional values become ``""``; the deadline becomes ``YYYY-MM-DD``.
    """
    values = {
        field: getattr(project, field) if getattr(project, field) is not None else ""
        for field in TEXT_FIELDS
    }
    return ProjectForm(
        details=ProjectDetails(
            name=values["name"],
            client_id=values["client_id"],
            description=values["description"],
            status=project.status.value,
            budget=project.budget if project.budget is not None else "",
            progress=project.progress if project.progress is not None else 0,
            deadline=project.deadline.isoformat() if project.deadline else "",
        ),
        videos=ProjectVideos(
            short_video_url=values["short_video_url"],
            full_feature_video_url=values["full_feature_video_url"],
        ),
        credentials=ProjectCredentialFields(
            hosting_link=values["hosting_link"],
            admin_login_link=values["admin_login_link"],
            admin_username=values["admin_username"],
            admin_password=values["admin_password"],
            credentials_notes=values["credentials_notes"],
        ),
    )


# --- editable -> canonical ---


def _normalize_budget(raw: str) -> Optional[str]:
    text = (raw or "").strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"not a number: {raw!r}")
    if not amount.is_finite():
        raise ValueError(f"not a number: {raw!r}")
    return text


def _normalize_progress(raw: Union[int, str]) -> int:
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"not a number: {raw!r}")
        if not value.is_finite():
            raise ValueError(f"not a number: {raw!r}")
        if value != value.to_integral_value():
            raise ValueError(f"not a whole number: {raw!r}")
        raw = int(value)
    if not 0 <= raw <= 100:
        raise ValueError(f"must be between 0 and 100, got {raw}")
    return raw


def save_project_form(form: ProjectForm) -> ProjectPatch:
    """Normalize form state into a canonical project patch.

    Empty text fields are kept as ``""`` so a previously set link or
    credential can be cleared. Raises ProjectFormError on invalid input.
    """
    values = form.flat()
    errors = {}

    try:
        status = ProjectStatus(values["status"])
    except ValueError:
        errors["status"] = f"unknown status {values['status']!r}"
        status = None
    try:
        budget = _normalize_budget(values["budget"])
    except ValueError as e:
        errors["budget"] = str(e)
        budget = None
    try:
        progress = _normalize_progress(values["progress"])
    except ValueError as e:
        errors["progress"] = str(e)
        progress = 0
    try:
        deadline = to_calendar_date(values["deadline"])
    except ValueError:
        errors["deadline"] = f"not a date: {values['deadline']!r}"
        deadline = None

    if errors:
        raise ProjectFormError(errors)

    return ProjectPatch(
        **{field: values[field] for field in TEXT_FIELDS},
        status=status,
        budget=budget,
        progress=progress,
        deadline=deadline,
    )


# --- round trip ---


def apply_patch(project: Project, patch: ProjectPatch) -> Project:
    """Project as it reads after the store accepted ``patch``."""
    return project.model_copy(update=patch.model_dump())


def projects_equivalent(a: Project, b: Project) -> bool:
    """Compare two records by content.

    ``None`` and ``""`` are the same for optional text; dates are compared as
    calendar dates.
    """
    for field in Project.model_fields:
        left, right = getattr(a, field), getattr(b, field)
        if field in TEXT_FIELDS or field == "budget":
            left, right = left or "", right or ""
        if left != right:
            return False
    return True
