"""
Unit tests for the safety lookup connector and HTTP retry layer (mocked).
Run from repo root: python -m pytest backend/tests/test_external_apis.py -v
"""
import pytest
import requests
from unittest.mock import patch, MagicMock

SEARCH_HTML = """
<html><body>
  <div class="product-listing">
    <div class="product-hazard-score"> 8 </div>
    <ul class="product-hazards">
      <li>Allergies/immunotoxicity</li>
      <li>  </li>
      <li> Irritation (skin, eyes, or lungs) </li>
    </ul>
  </div>
  <div class="product-listing">
    <div class="product-hazard-score">1</div>
  </div>
</body></html>
"""


@pytest.fixture
def lookup_env(monkeypatch):
    monkeypatch.setenv("SAFETY_LOOKUP_URL", "https://lookup.example.com/functions/v1/ewg-search")
    monkeypatch.setenv("SAFETY_LOOKUP_API_KEY", "anon-key")
    monkeypatch.setenv("SAFETY_LOOKUP_ENABLED", "true")
    monkeypatch.setenv("SAFETY_LOOKUP_MAX_RETRIES", "1")


def _response(status_code=200, payload=None):
    resp = MagicMock(status_code=status_code)
    resp.json = MagicMock(return_value=payload)
    return resp


def test_parse_search_markup_first_listing():
    from safety_core.external_apis.safety_lookup import parse_search_markup
    data = parse_search_markup(SEARCH_HTML)
    assert data is not None
    assert data.score == 8
    assert data.concerns == "Allergies/immunotoxicity, Irritation (skin, eyes, or lungs)"


def test_parse_search_markup_no_listing_or_empty():
    from safety_core.external_apis.safety_lookup import parse_search_markup
    assert parse_search_markup("") is None
    assert parse_search_markup("<html><body><p>No results</p></body></html>") is None


@pytest.mark.parametrize("score_text,expected", [("n/a", 5), ("", 5), ("3-4", 3), ("15", 10), ("0", 0)])
def test_parse_search_markup_score_parsing(score_text, expected):
    from safety_core.external_apis.safety_lookup import parse_search_markup
    html = f'<div class="product-listing"><span class="product-hazard-score">{score_text}</span></div>'
    data = parse_search_markup(html)
    assert data.score == expected
    assert data.concerns == ""


def test_parse_search_markup_missing_score_element_defaults():
    from safety_core.external_apis.safety_lookup import parse_search_markup
    data = parse_search_markup('<div class="product-listing"><ul class="product-hazards"><li>Cancer</li></ul></div>')
    assert data.score == 5
    assert data.concerns == "Cancer"


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_success_sends_encoded_query_and_auth(mock_get, lookup_env):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    mock_get.return_value = _response(200, {"html": SEARCH_HTML})
    data = resolve_safety_data("fragrance & parfum")
    assert data is not None
    assert data.score == 8
    _, kwargs = mock_get.call_args
    assert kwargs["params"] == {"ingredient": "fragrance & parfum"}
    assert kwargs["headers"] == {"Authorization": "Bearer anon-key"}


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_service_error_field_returns_none(mock_get, lookup_env):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    mock_get.return_value = _response(200, {"error": "Failed to fetch EWG data"})
    assert resolve_safety_data("water") is None


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_non_success_status_returns_none(mock_get, lookup_env):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    mock_get.return_value = _response(404, {"html": SEARCH_HTML})
    assert resolve_safety_data("water") is None
    mock_get.return_value = _response(503, {"html": SEARCH_HTML})
    assert resolve_safety_data("water") is None


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_empty_html_returns_none(mock_get, lookup_env):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    mock_get.return_value = _response(200, {"html": ""})
    assert resolve_safety_data("water") is None
    mock_get.return_value = _response(200, {})
    assert resolve_safety_data("water") is None


@pytest.mark.parametrize("html", [123, True, ["<div class=\"product-listing\"></div>"], {"markup": "x"}, "   "])
@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_non_string_html_returns_none(mock_get, html, lookup_env):
    """A 200 payload whose html is not markup text is treated as no data."""
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    mock_get.return_value = _response(200, {"html": html})
    assert resolve_safety_data("water") is None


@pytest.mark.parametrize("html", [None, 42, ["a"], {"html": "b"}])
def test_parse_search_markup_non_string_is_none(html):
    from safety_core.external_apis.safety_lookup import parse_search_markup
    assert parse_search_markup(html) is None


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_malformed_json_returns_none(mock_get, lookup_env):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    resp = _response(200)
    resp.json.side_effect = ValueError("Expecting value")
    mock_get.return_value = resp
    assert resolve_safety_data("water") is None


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_transport_failure_returns_none(mock_get, lookup_env):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    mock_get.side_effect = requests.ConnectionError("Connection reset by peer")
    assert resolve_safety_data("water") is None


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_without_url_makes_no_request(mock_get, monkeypatch):
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    monkeypatch.delenv("SAFETY_LOOKUP_URL", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    assert resolve_safety_data("water") is None
    assert mock_get.call_count == 0


@patch("safety_core.external_apis.http_retry.requests.get")
def test_resolve_cancelled_token_makes_no_request(mock_get, lookup_env):
    from safety_core.external_apis.base import RunToken
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    token = RunToken(generation=1)
    token.cancel()
    assert resolve_safety_data("water", token=token) is None
    assert mock_get.call_count == 0


def test_http_retry_on_timeout():
    """get_with_retries retries on timeout and returns (None, error) after max retries."""
    from safety_core.external_apis.http_retry import get_with_retries
    with patch("safety_core.external_apis.http_retry.requests.get") as mock_get:
        mock_get.side_effect = requests.Timeout("Read timed out")
        resp, err = get_with_retries("https://example.com", max_retries=2, initial_backoff=0.01)
        assert resp is None
        assert err is not None
        assert "timed out" in err.lower()
        assert mock_get.call_count == 2


def test_http_retry_on_server_error_then_success():
    from safety_core.external_apis.http_retry import get_with_retries
    with patch("safety_core.external_apis.http_retry.requests.get") as mock_get:
        mock_get.side_effect = [_response(502), _response(200, {"html": ""})]
        resp, err = get_with_retries("https://example.com", max_retries=3, initial_backoff=0.01)
        assert err is None
        assert resp.status_code == 200
        assert mock_get.call_count == 2


def test_http_retry_does_not_retry_client_error():
    from safety_core.external_apis.http_retry import get_with_retries
    with patch("safety_core.external_apis.http_retry.requests.get") as mock_get:
        mock_get.return_value = _response(400)
        resp, err = get_with_retries("https://example.com", max_retries=3, initial_backoff=0.01)
        assert err is None
        assert resp.status_code == 400
        assert mock_get.call_count == 1


def test_http_retry_stops_when_aborted():
    from safety_core.external_apis.http_retry import get_with_retries
    with patch("safety_core.external_apis.http_retry.requests.get") as mock_get:
        resp, err = get_with_retries("https://example.com", should_continue=lambda: False)
        assert resp is None
        assert err == "aborted"
        assert mock_get.call_count == 0


def test_api_health_check_script():
    """Script check_external_apis: lookup ok -> exit 0; fails -> exit 1."""
    from scripts.check_external_apis import main
    with patch("scripts.check_external_apis.check_safety_lookup", return_value=(True, "ok")):
        assert main() == 0
    with patch("scripts.check_external_apis.check_safety_lookup", return_value=(False, "no result")):
        assert main() == 1


def test_health_check_reports_missing_url(monkeypatch):
    from scripts.check_external_apis import check_safety_lookup
    monkeypatch.delenv("SAFETY_LOOKUP_URL", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.setenv("SAFETY_LOOKUP_ENABLED", "true")
    ok, msg = check_safety_lookup()
    assert ok is False
    assert "no lookup URL" in msg
