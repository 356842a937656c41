"""Dashboard loading: fetch every collection, aggregate, render.

Each refresh fetches all collections concurrently and publishes one
immutable snapshot. A collection whose fetch failed is ``None`` ("no data")
and counts as empty for the statistics. A refresh overtaken by a newer one
is dropped instead of being published.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .client import PortalClient
from .config import DisplayConfig
from .models import Client, DashboardStats, Invoice, Payment, Project, ProjectCredentials
from .stats import aggregate
from . import views

logger = logging.getLogger(__name__)

COLLECTIONS = ("server_stats", "projects", "invoices", "payments", "credentials", "clients")


@dataclass(frozen=True)
class DashboardSnapshot:
    generation: int
    stats: DashboardStats
    server_stats: Optional[DashboardStats] = None
    projects: Optional[list[Project]] = None
    invoices: Optional[list[Invoice]] = None
    payments: Optional[list[Payment]] = None
    credentials: Optional[list[ProjectCredentials]] = None
    clients: Optional[list[Client]] = None
    failed: tuple = field(default_factory=tuple)

    def render(self, display: DisplayConfig, today: Optional[date] = None) -> dict:
        """Display-ready dashboard; the credentials key is omitted when empty."""
        today = today or date.today()
        symbol, fmt, limit = display.currency_symbol, display.date_format, display.recent_limit
        view = {
            "kpis": [k.model_dump(mode="json") for k in views.kpi_cards(self.stats, symbol)],
            "active_projects": [
                views.project_row(p).model_dump(mode="json")
                for p in views.active_projects(self.projects, limit)
            ],
            "recent_invoices": [
                views.invoice_row(i, today, symbol, fmt).model_dump(mode="json")
                for i in views.recent(self.invoices, limit)
            ],
            "recent_payments": [
                views.payment_row(p, symbol, fmt).model_dump(mode="json")
                for p in views.recent(self.payments, limit)
            ],
            "client_options": [o.model_dump() for o in views.client_options(self.clients)],
            "copy_feedback_s": display.copy_feedback_s,
        }
        cards = views.render_credentials_section(self.credentials)
        if cards:
            view["credentials"] = [c.model_dump(mode="json") for c in cards]
        return view


class DashboardLoader:
    """Keeps the latest consistent dashboard snapshot."""

    def __init__(self, client: PortalClient):
        self.client = client
        self.snapshot: Optional[DashboardSnapshot] = None
        self._generation = 0

    async def _fetch_all(self) -> dict:
        results = await asyncio.gather(
            self.client.get_dashboard_stats(),
            self.client.list_projects(),
            self.client.list_invoices(),
            self.client.list_payments(),
            self.client.list_client_credentials(),
            self.client.list_clients(),
            return_exceptions=True,
        )
        fetched = {}
        for name, result in zip(COLLECTIONS, results):
            if isinstance(result, BaseException):
                logger.warning(f"Fetching {name} failed, showing no data: {result}")
                fetched[name] = None
            else:
                fetched[name] = result
        return fetched

    async def refresh(self) -> Optional[DashboardSnapshot]:
        """Fetch and publish a new snapshot.

        Returns None when a newer refresh started while this one was in
        flight; its result is discarded.
        """
        self._generation += 1
        generation = self._generation

        fetched = await self._fetch_all()

        if generation != self._generation:
            logger.info(f"Dropping dashboard refresh #{generation}, superseded by #{self._generation}")
            return None

        stats = aggregate(fetched["projects"], fetched["invoices"], fetched["payments"])
        server_stats = fetched["server_stats"]
        if server_stats is not None and server_stats != stats:
            logger.warning(f"Server stats disagree with local aggregate: {server_stats} != {stats}")

        snapshot = DashboardSnapshot(
            generation=generation,
            stats=stats,
            failed=tuple(name for name in COLLECTIONS if fetched[name] is None),
            **fetched,
        )
        self.snapshot = snapshot
        return snapshot
