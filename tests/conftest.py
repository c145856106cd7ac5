"""Shared fixtures for provisioning tests."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from models import Framework, Language, RepositoryRecord, Selection


def make_response(status_code: int = 200, json_data=None, text: str = "", headers: dict | None = None):
    """Build a fake requests.Response."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.json.return_value = json_data if json_data is not None else {}
    resp.content = b"{}" if json_data is not None else b""
    resp.text = text or str(json_data)
    resp.headers = headers or {}
    return resp


@pytest.fixture
def vite_ts():
    return Selection(framework=Framework.VITE, language=Language.TYPESCRIPT)


@pytest.fixture
def repository():
    return RepositoryRecord(
        name="vite-typescript-project",
        full_name="octocat/vite-typescript-project",
        default_branch="main",
        url="https://github.com/octocat/vite-typescript-project",
    )
