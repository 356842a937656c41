"""Async client for the portal REST API.

Handles:
- Collection reads (dashboard stats, projects, invoices, payments,
  client credentials, clients)
- Project create (POST) and partial update (PATCH)
- Session-cookie authentication
"""

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from .config import ApiConfig
from .forms import ProjectPatch
from .models import (
    Client,
    DashboardStats,
    Invoice,
    Payment,
    PortalModel,
    Project,
    ProjectCredentials,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=PortalModel)


class PortalAPIError(Exception):
    """A portal API call that did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    """Server-provided message, falling back to the raw body."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("message", "detail", "error"):
            if data.get(key):
                return str(data[key])
    return resp.text or f"HTTP {resp.status_code}"


class PortalClient:
    """Thin typed wrapper around the portal REST endpoints."""

    def __init__(self, config: ApiConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        cookies = {}
        if config.session_cookie:
            cookies[config.session_cookie_name] = config.session_cookie
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_s,
            cookies=cookies,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None):
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise PortalAPIError(str(e) or e.__class__.__name__) from e
        if resp.is_error:
            message = _error_message(resp)
            logger.error(f"{method} {path} -> {resp.status_code}: {message}")
            raise PortalAPIError(message, status_code=resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"{method} {path} -> {resp.status_code}: body is not JSON")
            raise PortalAPIError("Invalid response from server", status_code=resp.status_code) from e

    @staticmethod
    def _parse(model: Type[M], data) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} payload: {e.error_count()} error(s)")
            raise PortalAPIError(f"Unexpected {model.__name__} data from server") from e

    async def _get_list(self, path: str, model: Type[M]) -> list[M]:
        data = await self._request("GET", path)
        if data is not None and not isinstance(data, list):
            raise PortalAPIError(f"Expected a list from {path}")
        return [self._parse(model, item) for item in data or []]

    # --- Reads ---

    async def get_dashboard_stats(self) -> DashboardStats:
        return self._parse(DashboardStats, await self._request("GET", "/api/dashboard/stats"))

    async def list_projects(self) -> list[Project]:
        return await self._get_list("/api/projects", Project)

    async def list_invoices(self) -> list[Invoice]:
        return await self._get_list("/api/invoices", Invoice)

    async def list_payments(self) -> list[Payment]:
        return await self._get_list("/api/payments", Payment)

    async def list_client_credentials(self) -> list[ProjectCredentials]:
        return await self._get_list("/api/project-credentials/client", ProjectCredentials)

    async def list_clients(self) -> list[Client]:
        return await self._get_list("/api/clients", Client)

    # --- Writes ---

    async def create_project(self, patch: ProjectPatch) -> Project:
        data = await self._request("POST", "/api/projects", json=patch.to_payload())
        project = self._parse(Project, data)
        logger.info(f"Created project {project.id} ({project.name})")
        return project

    async def update_project(self, project_id: str, patch: ProjectPatch) -> Project:
        data = await self._request("PATCH", f"/api/projects/{project_id}", json=patch.to_payload())
        project = self._parse(Project, data)
        logger.info(f"Updated project {project_id}")
        return project
