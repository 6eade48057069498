from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config import settings
from app.ledger import Ledger, get_ledger
from app.main import app
from app.session import tokens
from app.storage import MemoryStore
from app.waitlist import Waitlist, get_waitlist


SAMPLE_IMAGE_URL = "https://v3.fal.media/files/panda/generated.png"
SAMPLE_VIDEO_URL = "https://v3.fal.media/files/tiger/clip.mp4"
SAMPLE_AUDIO_URL = "https://v3.fal.media/files/koala/speech.mp3"


@pytest.fixture(autouse=True)
def _reset_settings():
    settings.reset()
    settings.JWT_SECRET = "test-secret"
    settings.FAL_KEY = "fal-test-key"
    settings.FAL_POLL_INTERVAL = 0
    yield
    settings.reset()


@pytest.fixture
def ledger():
    ledger = Ledger(MemoryStore(), initial_credits=5000)
    app.dependency_overrides[get_ledger] = lambda: ledger
    yield ledger
    app.dependency_overrides.pop(get_ledger, None)


@pytest.fixture
def waitlist():
    waitlist = Waitlist(MemoryStore())
    app.dependency_overrides[get_waitlist] = lambda: waitlist
    yield waitlist
    app.dependency_overrides.pop(get_waitlist, None)


def login(ledger: Ledger, email: str = "user@example.com", credits: int | None = None):
    """Create (or fetch) an account and return it with an Authorization header."""
    account, _ = ledger.register(email)
    if credits is not None:
        account = ledger.adjust(account.id, credits - account.credits)
    token = tokens.issue(account.id, account.email)
    return account, {"Authorization": f"Bearer {token}"}


def mock_httpx_response(status_code: int = 200, json_data=None, headers: dict | None = None) -> MagicMock:
    """Create a mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else {}
    resp.headers = headers or {}
    return resp


def mock_async_client(post=None, get=None) -> AsyncMock:
    """An httpx.AsyncClient stand-in usable as ``async with``.

    *post* / *get* are a response or a list of responses returned in order.
    """
    client = AsyncMock()
    if post is not None:
        client.post.side_effect = post if isinstance(post, list) else [post]
    if get is not None:
        client.get.side_effect = get if isinstance(get, list) else [get]
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client
