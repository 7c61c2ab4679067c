"""Unit tests for the request executor."""

import threading
from typing import List
from unittest.mock import Mock

import pytest
import requests

from xrpl_sale.config import ClientConfig
from xrpl_sale.errors import (
    APIError,
    NotFoundError,
    ParseError,
    TransportError,
    ValidationError,
)
from xrpl_sale.executor import USER_AGENT, RequestExecutor
from xrpl_sale.metrics import metrics
from xrpl_sale.models import Project, Tier
from xrpl_sale.retry import RetryPolicy, RetryState
from tests.conftest import BASE_URL, build_response


@pytest.fixture
def config():
    return ClientConfig(
        api_key="test-key",
        base_url=BASE_URL,
        connect_timeout=5.0,
        read_timeout=20.0,
        write_timeout=45.0,
    )


@pytest.fixture
def executor(config, mock_session, retry_policy):
    return RequestExecutor(config, session=mock_session, retry_policy=retry_policy)


def sent_kwargs(mock_session, call_index=-1):
    return mock_session.request.call_args_list[call_index].kwargs


class TestHeaders:
    def test_api_key_header_without_token(self, executor):
        headers = executor.build_headers()

        assert headers["X-API-Key"] == "test-key"
        assert "Authorization" not in headers
        assert headers["User-Agent"] == USER_AGENT
        assert headers["Accept"] == "application/json"
        assert headers["Content-Type"] == "application/json"

    def test_bearer_token_replaces_api_key(self, executor):
        executor.set_auth_token("jwt-token")
        headers = executor.build_headers()

        assert headers["Authorization"] == "Bearer jwt-token"
        assert "X-API-Key" not in headers

    def test_clearing_token_restores_api_key(self, executor):
        executor.set_auth_token("jwt-token")
        executor.clear_auth_token()

        assert executor.auth_token is None
        assert executor.build_headers()["X-API-Key"] == "test-key"

    def test_no_credentials(self, mock_session):
        executor = RequestExecutor(ClientConfig(base_url=BASE_URL), session=mock_session)
        headers = executor.build_headers()

        assert "X-API-Key" not in headers
        assert "Authorization" not in headers

    def test_never_both_headers_under_concurrent_token_updates(self, executor):
        seen: List[dict] = []
        stop = threading.Event()

        def writer():
            for i in range(500):
                executor.set_auth_token(f"token-{i}" if i % 2 else None)
            stop.set()

        def reader():
            while not stop.is_set():
                seen.append(executor.build_headers())

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(("Authorization" in h) != ("X-API-Key" in h) for h in seen)

    def test_headers_sent_with_request(self, executor, mock_session):
        executor.set_auth_token("jwt-token")
        executor.execute("GET", "/projects")

        assert sent_kwargs(mock_session)["headers"]["Authorization"] == "Bearer jwt-token"


class TestRequestConstruction:
    def test_url_params_and_timeout(self, executor, mock_session):
        executor.execute("GET", "/projects", params={"status": "active", "page": None})

        args = mock_session.request.call_args.args
        kwargs = sent_kwargs(mock_session)
        assert args == ("GET", f"{BASE_URL}/projects")
        assert kwargs["params"] == {"status": "active"}
        assert kwargs["json"] is None
        assert kwargs["timeout"] == (5.0, 20.0)

    def test_body_uses_write_timeout(self, executor, mock_session):
        executor.execute("post", "projects", json={"name": "x"})

        args = mock_session.request.call_args.args
        kwargs = sent_kwargs(mock_session)
        assert args == ("POST", f"{BASE_URL}/projects")
        assert kwargs["json"] == {"name": "x"}
        assert kwargs["timeout"] == (5.0, 45.0)


class TestResponses:
    def test_parses_into_model(self, executor, mock_session, project_json):
        mock_session.request.return_value = build_response(200, project_json)

        project = executor.execute("GET", "/projects/proj_1", response_model=Project)

        assert isinstance(project, Project)
        assert project.id == "proj_1"
        assert str(project.total_raised) == "1500.25"

    def test_parses_into_list(self, executor, mock_session):
        mock_session.request.return_value = build_response(
            200, [{"tier": 1, "price_per_token": "0.5", "total_tokens": "1000"}]
        )

        tiers = executor.execute("GET", "/projects/p/tiers", response_model=List[Tier])

        assert len(tiers) == 1
        assert tiers[0].tier == 1

    def test_returns_raw_json_without_model(self, executor, mock_session):
        mock_session.request.return_value = build_response(200, {"ok": True})
        assert executor.execute("GET", "/health") == {"ok": True}

    def test_empty_body_returns_none(self, executor, mock_session):
        mock_session.request.return_value = build_response(204, text="")
        assert executor.execute("DELETE", "/webhooks/wh_1", response_model=Project) is None

    def test_not_found(self, executor, mock_session):
        mock_session.request.return_value = build_response(404, {"message": "not found"})

        with pytest.raises(NotFoundError) as exc:
            executor.execute("GET", "/projects/missing", response_model=Project)

        assert exc.value.status_code == 404
        assert mock_session.request.call_count == 1

    def test_validation_error_fields(self, executor, mock_session):
        mock_session.request.return_value = build_response(
            422, {"errors": {"name": ["required"]}}
        )

        with pytest.raises(ValidationError) as exc:
            executor.execute("POST", "/projects", json={})

        assert exc.value.field_errors == {"name": ["required"]}

    def test_invalid_json_is_parse_error_and_not_retried(self, executor, mock_session):
        mock_session.request.return_value = build_response(200, text="not json")

        with pytest.raises(ParseError):
            executor.execute("GET", "/projects/proj_1", response_model=Project)

        assert mock_session.request.call_count == 1

    def test_shape_mismatch_is_parse_error(self, executor, mock_session):
        mock_session.request.return_value = build_response(200, {"unexpected": "shape"})

        with pytest.raises(ParseError) as exc:
            executor.execute("GET", "/projects/proj_1", response_model=Project)

        assert exc.value.details["errors"]
        assert mock_session.request.call_count == 1


class TestRetries:
    def test_server_error_then_success(self, executor, mock_session, sleeps, project_json):
        mock_session.request.side_effect = [
            build_response(500, {"message": "boom"}),
            build_response(502, text="bad gateway"),
            build_response(200, project_json),
        ]
        state = RetryState()

        project = executor.execute(
            "GET", "/projects/proj_1", response_model=Project, retry_state=state
        )

        assert project.id == "proj_1"
        assert state.attempts == 3
        assert sleeps == [1.0, 2.0]

    def test_client_error_not_retried(self, executor, mock_session, sleeps):
        mock_session.request.return_value = build_response(400, {"message": "bad"})

        with pytest.raises(APIError):
            executor.execute("GET", "/projects")

        assert mock_session.request.call_count == 1
        assert sleeps == []

    def test_network_failure_exhaustion(self, executor, mock_session, sleeps):
        mock_session.request.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(TransportError):
            executor.execute("GET", "/projects")

        assert mock_session.request.call_count == 4
        assert sleeps == [1.0, 2.0, 4.0]

    def test_attempts_and_retries_are_counted(self, executor, mock_session):
        unavailable = {"method": "GET", "status": "503"}
        ok = {"method": "GET", "status": "200"}
        before = (
            metrics.sample("requests_total", unavailable),
            metrics.sample("requests_total", ok),
            metrics.sample("retries_total", {"reason": "503"}),
        )
        mock_session.request.side_effect = [
            build_response(503, text="unavailable"),
            build_response(200, {}),
        ]

        executor.execute("GET", "/projects")

        assert metrics.sample("requests_total", unavailable) == before[0] + 1
        assert metrics.sample("requests_total", ok) == before[1] + 1
        assert metrics.sample("retries_total", {"reason": "503"}) == before[2] + 1

    def test_default_policy_follows_config(self, mock_session):
        executor = RequestExecutor(
            ClientConfig(base_url=BASE_URL, max_retries=5, retry_delay=0.5), session=mock_session
        )
        assert executor.retry_policy.max_retries == 5
        assert executor.retry_policy.base_delay == 0.5


def test_close_only_closes_own_session(config, mock_session):
    RequestExecutor(config, session=mock_session).close()
    mock_session.close.assert_not_called()


def test_close_owned_session(config, mocker):
    session = Mock(spec=requests.Session)
    mocker.patch("xrpl_sale.executor.requests.Session", return_value=session)

    RequestExecutor(config, retry_policy=RetryPolicy()).close()

    session.close.assert_called_once()
