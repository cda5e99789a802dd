"""Shared pytest fixtures for the pubcrypt test suite."""

import random

import pytest
from httpx import ASGITransport, AsyncClient

from pubcrypt.crypto.elgamal import KeyPair
from pubcrypt.main import app


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def rng():
    """Seeded source so failures can be replayed."""
    return random.Random(20240611)


@pytest.fixture(scope="session")
def keypair():
    """One generated key pair shared by the whole session."""
    return KeyPair.generate(random.Random(977))


@pytest.fixture()
async def client():
    """Provide an async HTTP test client bound to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
