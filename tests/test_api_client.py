import pytest
import requests

from planner.data import api_client


@pytest.fixture
def configured(monkeypatch):
    secrets = {
        ("app", "API_BASE_URL"): "http://api.local/",
        ("app", "BACKEND_SESSION_SECRET"): "s3cret",
    }
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("BACKEND_SESSION_SECRET", raising=False)
    api_client.configure(lambda path, default=None: secrets.get(tuple(path), default))
    yield secrets
    api_client.configure(None)


def _response(mocker, status=200, payload=None):
    response = mocker.Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.reason = "OK" if response.ok else "Bad"
    response.json.return_value = payload if payload is not None else {}
    response.text = str(payload)
    return response


def test_sends_owner_and_token_headers(configured, mocker):
    send = mocker.patch.object(api_client._SESSION, "request", return_value=_response(mocker, payload={"items": []}))
    assert api_client.request("GET", "/v1/categories", user_id="kakao-1") == {"items": []}
    args, kwargs = send.call_args
    assert args == ("GET", "http://api.local/v1/categories")
    assert kwargs["headers"] == {"X-User-Id": "kakao-1", "X-Backend-Token": "s3cret"}
    assert kwargs["timeout"] == api_client.DEFAULT_TIMEOUT


def test_error_status_raises_runtime_error(configured, mocker):
    mocker.patch.object(api_client._SESSION, "request", return_value=_response(mocker, 401, {"detail": "no"}))
    with pytest.raises(RuntimeError, match="API error 401"):
        api_client.request("GET", "/v1/categories", user_id="kakao-1")


def test_transport_error_is_wrapped(configured, mocker):
    mocker.patch.object(api_client._SESSION, "request", side_effect=requests.ConnectionError("refused"))
    with pytest.raises(RuntimeError, match="API request failed"):
        api_client.request("PUT", "/v1/todos/2024-03-10", json={"items": []}, user_id="kakao-1")


def test_missing_configuration(monkeypatch):
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("BACKEND_SESSION_SECRET", raising=False)
    api_client.configure(None)
    assert not api_client.is_enabled()
    with pytest.raises(RuntimeError, match="API_BASE_URL"):
        api_client.request("GET", "/v1/categories", user_id="kakao-1")


def test_missing_owner(configured):
    with pytest.raises(RuntimeError, match="user id"):
        api_client.request("GET", "/v1/categories")
