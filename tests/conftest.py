"""
Shared fixtures for the heliosctl test suite.
"""

from unittest.mock import MagicMock

import pytest
import requests


@pytest.fixture
def make_response():
    """
    Factory for fake requests.Response objects.
    """
    def _make(status_code=200, body="", content_type="text/xml"):
        r = MagicMock(spec=requests.Response)
        r.status_code = status_code
        r.content = body.encode("utf-8") if isinstance(body, str) else body
        r.headers = {"Content-Type": content_type}
        return r
    return _make


@pytest.fixture
def mock_session(make_response):
    """
    MagicMock standing in for requests.Session; answers 200 with an empty body
    unless the test overrides `get.return_value` / `get.side_effect`.
    """
    session = MagicMock(spec=requests.Session)
    session.get.return_value = make_response()
    return session


