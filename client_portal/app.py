"""Client Portal - view API.

FastAPI service that sits between the browser and the portal REST API:
it renders the client dashboard and project cards, and normalizes project
form submissions before forwarding them.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException

from .client import PortalAPIError, PortalClient
from .config import get_config
from .dashboard import DashboardLoader
from .editor import ProjectEditor
from .forms import ProjectForm, ProjectFormError
from .views import client_options, project_card

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

portal_client: Optional[PortalClient] = None
loader: Optional[DashboardLoader] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the upstream API client on startup."""
    global portal_client, loader
    config = get_config()
    portal_client = PortalClient(config.api)
    loader = DashboardLoader(portal_client)
    logger.info(f"Client Portal v{app.version} started, upstream {config.api.base_url}")
    yield
    await portal_client.aclose()
    logger.info("Shutting down")


app = FastAPI(
    title="Client Portal",
    description="Projects, invoices, payments and delivery credentials for clients",
    version=VERSION,
    lifespan=lifespan,
)


def get_client() -> PortalClient:
    return portal_client


def get_loader() -> DashboardLoader:
    return loader


def _upstream_error(e: PortalAPIError) -> HTTPException:
    status = e.status_code if e.status_code and e.status_code >= 400 else 502
    return HTTPException(status_code=status, detail=e.message)


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "service": "client-portal",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@app.get("/dashboard")
async def dashboard(dashboard_loader: DashboardLoader = Depends(get_loader)):
    """Rendered client dashboard built from freshly fetched collections."""
    snapshot = await dashboard_loader.refresh() or dashboard_loader.snapshot
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Dashboard is refreshing")
    view = snapshot.render(get_config().display)
    view["unavailable"] = list(snapshot.failed)
    return view


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

async def _client_options(client: PortalClient) -> list[dict]:
    """Client select entries; an unavailable client list gives no options."""
    try:
        clients = await client.list_clients()
    except PortalAPIError as e:
        logger.warning(f"Fetching clients failed, showing no options: {e.message}")
        clients = None
    return [o.model_dump() for o in client_options(clients)]


async def _submit(editor: ProjectEditor) -> dict:
    await editor.submit()
    if isinstance(editor.error, ProjectFormError):
        raise HTTPException(status_code=422, detail=editor.error.errors)
    if isinstance(editor.error, PortalAPIError):
        raise _upstream_error(editor.error)
    return editor.saved.to_payload()


@app.get("/clients")
async def list_clients(client: PortalClient = Depends(get_client)):
    try:
        clients = await client.list_clients()
    except PortalAPIError as e:
        raise _upstream_error(e)
    return [o.model_dump() for o in client_options(clients)]


@app.get("/projects")
async def list_projects(client: PortalClient = Depends(get_client)):
    display = get_config().display
    try:
        projects = await client.list_projects()
    except PortalAPIError as e:
        raise _upstream_error(e)
    return [
        project_card(p, display.currency_symbol, display.date_format).model_dump(mode="json")
        for p in projects
    ]


@app.get("/projects/new/form")
async def new_project_form(client: PortalClient = Depends(get_client)):
    """Blank create form with its defaults."""
    form = ProjectEditor(client).open_new()
    return {"form": form.model_dump(), "client_options": await _client_options(client)}


@app.get("/projects/{project_id}/form")
async def edit_project_form(project_id: str, client: PortalClient = Depends(get_client)):
    """Edit form pre-filled from the stored project."""
    try:
        projects = await client.list_projects()
    except PortalAPIError as e:
        raise _upstream_error(e)
    project = next((p for p in projects if p.id == project_id), None)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    form = ProjectEditor(client).open_edit(project)
    return {"form": form.model_dump(), "client_options": await _client_options(client)}


@app.post("/projects", status_code=201)
async def create_project(form: ProjectForm, client: PortalClient = Depends(get_client)):
    editor = ProjectEditor(client)
    editor.open_form(form)
    return await _submit(editor)


@app.patch("/projects/{project_id}")
async def update_project(
    project_id: str,
    form: ProjectForm,
    client: PortalClient = Depends(get_client),
):
    editor = ProjectEditor(client)
    editor.open_form(form, project_id)
    return await _submit(editor)
