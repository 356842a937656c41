"""Client portal core: dashboard statistics, project forms and display views."""

from .clipboard import ClipboardFeedback
from .editor import ProjectEditor
from .forms import ProjectForm, ProjectPatch, load_project_form, save_project_form
from .models import (
    Client,
    DashboardStats,
    Invoice,
    InvoiceStatus,
    Payment,
    Project,
    ProjectCredentials,
    ProjectStatus,
)
from .notices import Notice
from .stats import aggregate
from .views import client_options, status_class

__all__ = [
    'ClipboardFeedback', 'Client', 'DashboardStats', 'Invoice', 'InvoiceStatus',
    'Notice', 'Payment', 'Project', 'ProjectCredentials', 'ProjectEditor',
    'ProjectStatus', 'ProjectForm', 'ProjectPatch', 'aggregate', 'client_options',
    'load_project_form', 'save_project_form', 'status_class',
]
