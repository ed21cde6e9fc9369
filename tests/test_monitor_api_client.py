import unittest
from unittest.mock import Mock, patch

import requests

from pingconsole.clients.monitor_api import MonitorApiClient, validate_url
from pingconsole.errors import (
    ApiClientError,
    ApiError,
    InvalidResponseError,
    NetworkError,
    ValidationError,
)
from pingconsole.profile import DeploymentProfile

STATUT = {
    "url": "https://example.org",
    "est_disponible": True,
    "code_http": 200,
    "message_erreur": "",
    "latence_ms": 120,
    "verifie_a": "2025-10-01T12:00:00Z",
}


def _response(status_code: int = 200, payload=None, json_error: bool = False) -> Mock:
    response = Mock(status_code=status_code, text="<html>oops</html>")
    if json_error:
        response.json.side_effect = ValueError("no json object could be decoded")
    else:
        response.json.return_value = payload
    return response


def _client(response: Mock | None = None, profile: DeploymentProfile | None = None):
    session = Mock()
    session.request.return_value = response or _response(200, {})
    client = MonitorApiClient("http://backend.local/", profile=profile, session=session)
    return client, session


class ValidateUrlTests(unittest.TestCase):
    def test_accepts_http_and_https_case_insensitively(self) -> None:
        self.assertEqual(validate_url("  HTTPS://example.org "), "HTTPS://example.org")
        self.assertEqual(validate_url("http://x"), "http://x")

    def test_rejects_empty_and_schemeless(self) -> None:
        for url in (None, "", "   ", "not-a-url", "ftp://example.org", "example.org"):
            with self.assertRaises(ValidationError):
                validate_url(url)


class SubmitCheckTests(unittest.TestCase):
    def test_invalid_url_fails_before_any_network_call(self) -> None:
        client, session = _client()

        with self.assertRaises(ValidationError):
            client.submit_check("not-a-url")

        self.assertEqual(session.request.call_count, 0)

    def test_posts_url_and_returns_statut(self) -> None:
        client, session = _client(_response(200, {"statut": STATUT}))

        result = client.submit_check(" https://example.org ")

        session.request.assert_called_once_with(
            "POST",
            "http://backend.local/api/verifier",
            timeout=None,
            json={"url": "https://example.org"},
        )
        self.assertTrue(result.is_available)
        self.assertEqual(result.latency_ms, 120)
        self.assertEqual(result.http_code, 200)
        self.assertIsNone(result.error_message)

    def test_uses_profile_check_path(self) -> None:
        client, session = _client(
            _response(200, {"statut": STATUT}),
            profile=DeploymentProfile(check_path="/api/check"),
        )

        client.submit_check("https://example.org")

        self.assertEqual(session.request.call_args.args[1], "http://backend.local/api/check")

    def test_missing_statut_is_invalid_response(self) -> None:
        for payload in ({}, {"statut": None}, {"result": STATUT}, [STATUT]):
            client, _ = _client(_response(200, payload))
            with self.assertRaises(InvalidResponseError):
                client.submit_check("https://example.org")

    def test_malformed_statut_is_invalid_response(self) -> None:
        client, _ = _client(_response(200, {"statut": {"est_disponible": "maybe"}}))

        with self.assertRaises(InvalidResponseError):
            client.submit_check("https://example.org")


class ErrorNormalizationTests(unittest.TestCase):
    def test_prefers_server_error_field(self) -> None:
        client, _ = _client(_response(400, {"error": "bad url", "message": "ignored"}))

        with self.assertRaises(ApiError) as ctx:
            client.submit_check("https://example.org")

        self.assertEqual(str(ctx.exception), "bad url")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_falls_back_to_message_field(self) -> None:
        client, _ = _client(_response(500, {"message": "store unavailable"}))

        with self.assertRaises(ApiError) as ctx:
            client.fetch_recent()

        self.assertEqual(str(ctx.exception), "store unavailable")

    def test_synthesizes_http_status_when_body_has_no_message(self) -> None:
        for response in (_response(502, {}), _response(503, json_error=True), _response(404, ["x"])):
            client, _ = _client(response)
            with self.assertRaises(ApiError) as ctx:
                client.submit_check("https://example.org")
            self.assertEqual(str(ctx.exception), f"HTTP {response.status_code}")

    def test_transport_failure_is_network_error(self) -> None:
        for exc in (
            requests.ConnectionError("connection refused"),
            requests.Timeout("timed out"),
            requests.RequestException("boom"),
        ):
            client, session = _client()
            session.request.side_effect = exc
            with self.assertRaises(NetworkError) as ctx:
                client.submit_check("https://example.org")
            self.assertTrue(str(ctx.exception).startswith("Network error"))
            self.assertIs(ctx.exception.__cause__, exc)

    def test_malformed_json_on_success_is_network_error(self) -> None:
        client, _ = _client(_response(200, json_error=True))

        with self.assertRaises(NetworkError):
            client.submit_check("https://example.org")

    def test_all_client_failures_share_one_base(self) -> None:
        self.assertTrue(issubclass(ApiError, ApiClientError))
        self.assertTrue(issubclass(NetworkError, ApiClientError))


class FetchRecentTests(unittest.TestCase):
    def test_wrapped_shape(self) -> None:
        other = dict(STATUT, url="https://b", est_disponible=False, message_erreur="timeout")
        client, session = _client(_response(200, {"resultats": [STATUT, other]}))

        results = client.fetch_recent(2)

        session.request.assert_called_once_with(
            "GET",
            "http://backend.local/api/resultats",
            timeout=None,
            params={"limit": 2},
        )
        self.assertEqual([r.url for r in results], ["https://example.org", "https://b"])
        self.assertEqual(results[1].error_message, "timeout")

    def test_bare_list_shape(self) -> None:
        client, _ = _client(_response(200, [STATUT]))

        results = client.fetch_recent()

        self.assertEqual(len(results), 1)

    def test_empty_shapes_normalize_to_empty_list(self) -> None:
        for payload in ([], {}, {"resultats": None}, {"resultats": []}):
            client, _ = _client(_response(200, payload))
            self.assertEqual(client.fetch_recent(), [], payload)

    def test_unexpected_shapes_are_invalid_response(self) -> None:
        for payload in ("nope", 42, {"resultats": "nope"}, {"resultats": ["nope"]}):
            client, _ = _client(_response(200, payload))
            with self.assertRaises(InvalidResponseError):
                client.fetch_recent()

    def test_non_string_timestamp_does_not_reject_the_batch(self) -> None:
        epoch = dict(STATUT, url="https://b", verifie_a=1727770000)
        client, _ = _client(_response(200, {"resultats": [STATUT, epoch]}))

        results = client.fetch_recent(2)

        self.assertEqual([r.url for r in results], ["https://example.org", "https://b"])
        self.assertEqual(results[0].checked_at, "2025-10-01T12:00:00Z")
        self.assertIsNone(results[1].checked_at)

    def test_default_limit_is_fifty(self) -> None:
        client, session = _client(_response(200, []))

        client.fetch_recent()

        self.assertEqual(session.request.call_args.kwargs["params"], {"limit": 50})

    def test_bad_limit_fails_before_network(self) -> None:
        for limit in (0, -3, 2.5, "10", True):
            client, session = _client()
            with self.assertRaises(ValidationError):
                client.fetch_recent(limit)
            self.assertEqual(session.request.call_count, 0)


class ClearAllTests(unittest.TestCase):
    def test_deletes_results_without_needing_a_json_body(self) -> None:
        client, session = _client(_response(200, json_error=True))

        self.assertIsNone(client.clear_all())

        session.request.assert_called_once_with(
            "DELETE", "http://backend.local/api/resultats", timeout=None
        )

    def test_failure_is_surfaced(self) -> None:
        client, _ = _client(_response(500, {"error": "disk full"}))

        with self.assertRaises(ApiError) as ctx:
            client.clear_all()

        self.assertEqual(str(ctx.exception), "disk full")

    def test_timeout_is_passed_through_when_configured(self) -> None:
        session = Mock()
        session.request.return_value = _response(200)
        client = MonitorApiClient("http://backend.local", timeout_s=4.5, session=session)

        client.clear_all()

        self.assertEqual(session.request.call_args.kwargs["timeout"], 4.5)


class PerCallRequestTests(unittest.TestCase):
    def test_without_session_each_call_uses_requests_request(self) -> None:
        client = MonitorApiClient("http://backend.local")

        with patch(
            "pingconsole.clients.monitor_api.requests.request",
            return_value=_response(200, {"statut": STATUT}),
        ) as mock_request:
            client.submit_check("https://example.org")
            client.submit_check("https://example.org")

        self.assertEqual(mock_request.call_count, 2)
        mock_request.assert_called_with(
            "POST",
            "http://backend.local/api/verifier",
            timeout=None,
            json={"url": "https://example.org"},
        )

    def test_without_session_transport_failure_is_network_error(self) -> None:
        client = MonitorApiClient("http://backend.local")

        with patch(
            "pingconsole.clients.monitor_api.requests.request",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            with self.assertRaises(NetworkError):
                client.fetch_recent()


if __name__ == "__main__":
    unittest.main()
