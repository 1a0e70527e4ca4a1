"""Shared fixtures: a fake HTTP session and canned responses."""
from unittest.mock import Mock

import pytest


def make_response(payload=None, status=200, text=""):
    """Build a Mock shaped like requests.Response."""
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    """Mock requests.Session; tests queue responses on session.get."""
    return Mock()
