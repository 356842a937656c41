"""Create/edit session for a single project form."""

import logging
from typing import Awaitable, Callable, Optional, Union

from .client import PortalAPIError, PortalClient
from .forms import (
    ProjectForm,
    ProjectFormError,
    empty_project_form,
    load_project_form,
    save_project_form,
)
from .models import Project
from .notices import Notice

logger = logging.getLogger(__name__)


class ProjectEditor:
    """Holds the open form and submits it through the portal API.

    On failure the editor stays open and the form keeps the user's input.
    ``error`` holds the failure of the last submit, ``saved`` the project
    the server returned for the last successful one.
    """

    def __init__(self, client: PortalClient):
        self.client = client
        self.form: ProjectForm = empty_project_form()
        self.editing_id: Optional[str] = None
        self.is_open = False
        self.on_saved: list[Callable[[Project], Awaitable[None]]] = []
        self.error: Optional[Union[ProjectFormError, PortalAPIError]] = None
        self.saved: Optional[Project] = None

    def open_new(self) -> ProjectForm:
        return self.open_form(empty_project_form())

    def open_edit(self, project: Project) -> ProjectForm:
        return self.open_form(load_project_form(project), project.id)

    def open_form(self, form: ProjectForm, project_id: Optional[str] = None) -> ProjectForm:
        """Open an already filled-in form; ``project_id`` makes it an edit."""
        self.editing_id = project_id
        self.form = form
        self.is_open = True
        self.error = None
        return self.form

    def close(self):
        self.is_open = False
        self.editing_id = None
        self.form = empty_project_form()

    async def submit(self) -> Notice:
        self.error = None
        try:
            patch = save_project_form(self.form)
        except ProjectFormError as e:
            self.error = e
            return Notice.error(str(e))

        try:
            if self.editing_id:
                project = await self.client.update_project(self.editing_id, patch)
                message = "Project updated successfully"
            else:
                project = await self.client.create_project(patch)
                message = "Project created successfully"
        except PortalAPIError as e:
            logger.warning(f"Saving project failed: {e.message}")
            self.error = e
            return Notice.error(e.message)

        self.saved = project
        self.close()
        for callback in self.on_saved:
            await callback(project)
        return Notice.success(message)
