"""Pytest configuration and fixtures for viewer tests."""

import os

# Headless SDL so pygame surfaces and fonts work without a display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import httpx
import pygame
import pytest
import pytest_asyncio

from tests.fakes.fake_simulation_service import BASE_URL, FakeSimulationService
from tests.fakes.memory_client import MemorySimulationClient


@pytest.fixture(scope="session", autouse=True)
def pygame_session():
    """Initialise pygame once for the whole test session."""
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def fake_service():
    """Provide a fresh in-memory simulation service."""
    return FakeSimulationService()


@pytest_asyncio.fixture
async def remote_client(fake_service):
    """RemoteServiceClient wired to the fake service over an ASGI transport."""
    from viewer.remote_client import RemoteServiceClient

    client = RemoteServiceClient(BASE_URL, transport=httpx.ASGITransport(app=fake_service.app))
    await client.start()
    yield client
    await client.close()


@pytest.fixture
def memory_client():
    """In-memory client for scheduling tests."""
    return MemorySimulationClient()


@pytest.fixture
def surface():
    """An 800x600 off-screen surface."""
    return pygame.Surface((800, 600))
