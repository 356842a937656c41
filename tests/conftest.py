"""
Client Portal Test Configuration

Shared fixtures for all tests.
"""
import os
import pytest
from unittest.mock import AsyncMock, patch
from typing import Dict, List

from client_portal.models import Client, Invoice, Payment, Project, ProjectCredentials


# =============================================================================
# FIXTURES: Raw API payloads (camelCase, as the portal API returns them)
# =============================================================================

@pytest.fixture
def project_payloads() -> List[Dict]:
    return [
        {
            "id": "p1",
            "clientId": "c1",
            "name": "Shop Relaunch",
            "description": "Headless storefront",
            "status": "active",
            "budget": "12500.00",
            "progress": 40,
            "deadline": "2026-03-31T00:00:00.000Z",
            "hostingLink": "https://vercel.com/acme/shop",
            "adminLoginLink": "https://shop.acme.test/admin",
            "adminUsername": "acme-admin",
            "adminPassword": "s3cret",
        },
        {
            "id": "p2",
            "clientId": "c1",
            "name": "Landing Page",
            "status": "completed",
            "budget": "900",
            "progress": 100,
            "deadline": "2026-01-15",
            "shortVideoUrl": "https://loom.test/short",
        },
        {
            "id": "p3",
            "clientId": "c2",
            "name": "CRM Integration",
            "status": "planning",
            "progress": None,
        },
    ]


@pytest.fixture
def invoice_payloads() -> List[Dict]:
    return [
        {"id": "i1", "projectId": "p1", "invoiceNumber": "INV-001", "amount": "100.00",
         "dueDate": "2026-02-01", "status": "paid"},
        {"id": "i2", "projectId": "p1", "invoiceNumber": "INV-002", "amount": "50.10",
         "dueDate": "2026-02-15", "status": "sent"},
        {"id": "i3", "projectId": "p2", "invoiceNumber": "INV-003", "amount": "0.20",
         "dueDate": "2026-01-10T00:00:00.000Z", "status": "overdue"},
        {"id": "i4", "projectId": "p3", "invoiceNumber": "INV-004", "amount": "999.99",
         "dueDate": "2026-04-01", "status": "draft"},
    ]


@pytest.fixture
def payment_payloads() -> List[Dict]:
    return [
        {"id": "pay1", "invoiceId": "i1", "amount": "0.10", "paymentDate": "2026-01-20",
         "paymentMethod": "Bank transfer"},
        {"id": "pay2", "invoiceId": "i1", "amount": "0.20", "paymentDate": "2026-01-21",
         "paymentMethod": "Card", "notes": "Partial"},
        {"id": "pay3", "invoiceId": "i1", "amount": "99.70", "paymentDate": "2026-01-22",
         "paymentMethod": "Bank transfer"},
    ]


@pytest.fixture
def credential_payloads() -> List[Dict]:
    return [
        {
            "id": "cr1",
            "projectName": "Shop Relaunch",
            "thumbnailUrl": "uploads/shop.png",
            "hostingPlatform": "Vercel",
            "liveLink": "https://shop.acme.test",
            "adminPanelLink": "https://shop.acme.test/admin",
            "databaseUrl": "postgres://db.acme.test/shop",
            "serverCredentials": "root / hunter2",
            "shortVideoUrl": "https://loom.test/short",
            "fullVideoUrl": "https://loom.test/full",
        },
        {"id": "cr2", "projectName": "Landing Page", "liveLink": "https://acme.test"},
    ]


# =============================================================================
# FIXTURES: Parsed records
# =============================================================================

@pytest.fixture
def projects(project_payloads) -> List[Project]:
    return [Project.model_validate(p) for p in project_payloads]


@pytest.fixture
def invoices(invoice_payloads) -> List[Invoice]:
    return [Invoice.model_validate(i) for i in invoice_payloads]


@pytest.fixture
def payments(payment_payloads) -> List[Payment]:
    return [Payment.model_validate(p) for p in payment_payloads]


@pytest.fixture
def credentials(credential_payloads) -> List[ProjectCredentials]:
    return [ProjectCredentials.model_validate(c) for c in credential_payloads]


@pytest.fixture
def clients() -> List[Client]:
    # unsorted by name
    return [Client(id="c2", name="Globex"), Client(id="c1", name="ACME")]


# =============================================================================
# FIXTURES: Portal API client mock
# =============================================================================

@pytest.fixture
def mock_portal_client(projects, invoices, payments, credentials):
    """PortalClient stand-in whose reads return the sample collections."""
    client = AsyncMock()
    client.get_dashboard_stats = AsyncMock(side_effect=RuntimeError("not served"))
    client.list_projects = AsyncMock(return_value=projects)
    client.list_invoices = AsyncMock(return_value=invoices)
    client.list_payments = AsyncMock(return_value=payments)
    client.list_client_credentials = AsyncMock(return_value=credentials)
    client.list_clients = AsyncMock(return_value=[])
    return client


@pytest.fixture
def clean_config_env():
    """Drop CONFIG__* overrides so tests see defaults."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("CONFIG__")}
    env.pop("PORTAL_SESSION_COOKIE", None)
    with patch.dict(os.environ, env, clear=True):
        yield
