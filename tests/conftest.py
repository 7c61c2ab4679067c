import json
import os
from unittest.mock import Mock

import pytest
import requests

from xrpl_sale import RetryPolicy, XRPLSaleClient

BASE_URL = "https://api.test.xrpl.sale/v1"


def build_response(status_code=200, json_body=None, text=None, headers=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if json_body is not None:
        text = json.dumps(json_body)
    response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {"Content-Type": "application/json"})
    return response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep XRPLSALE_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("XRPLSALE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def sleeps():
    """Records the delays the retry policy asked for."""
    return []


@pytest.fixture
def retry_policy(sleeps):
    return RetryPolicy(max_retries=3, base_delay=1.0, sleep=sleeps.append)


@pytest.fixture
def mock_session():
    session = Mock(spec=requests.Session)
    session.request.return_value = build_response(200, {})
    return session


@pytest.fixture
def client(mock_session, retry_policy):
    return XRPLSaleClient(
        api_key="test-key",
        base_url=BASE_URL,
        webhook_secret="whsec_test",
        session=mock_session,
        retry_policy=retry_policy,
    )


@pytest.fixture
def project_json():
    return {
        "id": "proj_1",
        "name": "Test Project",
        "description": "A test token sale",
        "token_symbol": "TST",
        "total_supply": "1000000",
        "status": "active",
        "total_raised": "1500.25",
        "investor_count": 12,
        "tiers": [
            {"tier": 1, "price_per_token": "0.5", "total_tokens": "100000", "is_active": True}
        ],
        "created_at": "2025-01-15T10:00:00Z",
    }


@pytest.fixture
def paginated(project_json):
    return {
        "data": [project_json],
        "pagination": {"page": 1, "limit": 10, "total": 1, "total_pages": 1},
    }
