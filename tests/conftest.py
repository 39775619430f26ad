"""Test fixtures and utilities."""

import logging

import httpx
import pytest
import pytest_asyncio

from fakes import BASE_URL, PUBLIC_URL, TOKEN, FakePaperless
from shared.clients.dms.paperless.DMSClientPaperless import DMSClientPaperless
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger


@pytest.fixture
def logger() -> ColorLogger:
    return ColorLogger(logging.getLogger("paperless_tool_bridge.tests"))


@pytest.fixture
def helper_config(logger: ColorLogger) -> HelperConfig:
    return HelperConfig(
        logger=logger,
        overrides={
            "DMS_PAPERLESS_BASE_URL": BASE_URL,
            "DMS_PAPERLESS_API_KEY": TOKEN,
            "DMS_PAPERLESS_PUBLIC_URL": PUBLIC_URL,
        },
    )


@pytest.fixture
def fake_paperless() -> FakePaperless:
    return FakePaperless()


@pytest_asyncio.fixture
async def dms_client(helper_config: HelperConfig, fake_paperless: FakePaperless):
    """A Paperless client booted against the fake backend."""
    client = DMSClientPaperless(helper_config=helper_config)
    await client.boot(transport=httpx.MockTransport(fake_paperless.handler))
    yield client
    await client.close()


@pytest.fixture
def sample_document() -> dict:
    """Sample Paperless document API response."""
    return {
        "id": 12345,
        "title": "SPAR Einkauf 18.11.2024",
        "content": "Butter 250g 2,49\nMilch 1L 1,29",
        "created": "2024-11-18",
        "correspondent": 1,
        "document_type": 3,
        "storage_path": None,
        "tags": [5, 6],
        "custom_fields": [{"field": 7, "value": "EUR11.48"}],
        "archive_serial_number": None,
    }
