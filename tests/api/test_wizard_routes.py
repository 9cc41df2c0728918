from __future__ import annotations

from typing import Any, Dict
from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient

from api.main import create_app
from fakes import COMPLETE_ANSWERS, BrokenOutbox, FakeLogger, FakeNotifier, FakeTokenVerifier, fixed_clock, load_wizard
from infrastructure.config.app_config import AppConfig
from in_memory_submission_outbox import InMemorySubmissionOutbox
from mock_http_client import MockHttpClient

API_URL = "https://api.example.test/supportRequests"


def _config(**overrides: Any) -> AppConfig:
    values: Dict[str, Any] = {
        "submission_api_url": API_URL,
        "submission_api_key": "key",
        "token_name": "hackneyToken",
        "authorised_user_group": "users",
        "authorised_admin_group": "admins",
        "send_emails": True,
    }
    values.update(overrides)
    return AppConfig(**values)


def _client(config: AppConfig = None, cookies: Dict[str, str] = None, **collaborators: Any) -> TestClient:
    parts: Dict[str, Any] = {
        "wizard": load_wizard(),
        "http_client": MockHttpClient(201),
        "notifier": FakeNotifier(),
        "outbox": InMemorySubmissionOutbox(),
        "token_verifier": FakeTokenVerifier(),
        "logger": FakeLogger(),
        "clock": fixed_clock,
    }
    parts.update(collaborators)
    app = create_app(config or _config(), **parts)
    return TestClient(app, follow_redirects=False, raise_server_exceptions=False, cookies=cookies)


def _redirect_query(response) -> Dict[str, Any]:
    return parse_qs(urlsplit(response.headers["location"]).query, keep_blank_values=True)


def test_healthz_reports_wizard() -> None:
    response = _client().get("/healthz")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "service": "resident-support",
        "wizard_id": "resident-support",
        "wizard_version": 1,
        "steps": 18,
        "outbox_pending": 0,
    }


def test_landing_page_without_token() -> None:
    response = _client().get("/")

    assert response.status_code == 200
    assert "Are you asking for help for someone else?" in response.text
    assert 'action="/step-1"' in response.text
    assert "Signed in as" not in response.text


def test_landing_page_with_staff_token() -> None:
    # Arrange
    verifier = FakeTokenVerifier(claims={"name": "Jane Doe", "groups": ["users", "admins"]})
    client = _client(cookies={"hackneyToken": "signed-token"}, token_verifier=verifier)

    # Act
    response = client.get("/")

    # Assert
    assert response.status_code == 200
    assert "Signed in as Jane Doe (admin)" in response.text
    assert verifier.tokens == ["signed-token"]


def test_invalid_token_is_a_server_error() -> None:
    client = _client(cookies={"hackneyToken": "forged"}, token_verifier=FakeTokenVerifier(fail=True))

    response = client.get("/")

    assert response.status_code == 500


def test_missing_answer_redirects_back_with_error() -> None:
    # Act
    response = _client().post("/step-1", data={})

    # Assert
    assert response.status_code == 302
    assert response.headers["location"].startswith("/index?")
    assert _redirect_query(response)["is_on_behalf_error"] == [
        "Select yes if you’re asking for help for someone else"
    ]


def test_rejected_step_keeps_raw_answers() -> None:
    response = _client().post(
        "/step-2",
        data={"lookup_postcode": "NOT A POSTCODE", "is_on_behalf": "false"},
    )

    assert response.status_code == 302
    assert response.headers["location"].startswith("/step-2?")
    query = _redirect_query(response)
    assert query["lookup_postcode_error"] == ["Enter a real postcode, like E8 1EA."]
    assert query["lookup_postcode"] == ["NOT A POSTCODE"]
    assert query["is_on_behalf"] == ["false"]


def test_error_page_shows_message_and_value() -> None:
    response = _client().get(
        "/step-2",
        params={"lookup_postcode_error": "Enter a real postcode, like E8 1EA.", "lookup_postcode": "XX"},
    )

    assert response.status_code == 200
    assert "There is a problem" in response.text
    assert "Enter a real postcode, like E8 1EA." in response.text
    assert 'value="XX"' in response.text


def test_valid_step_renders_next_page_with_carried_answers() -> None:
    response = _client().post("/step-1", data={"is_on_behalf": "false"})

    assert response.status_code == 200
    assert 'action="/step-2"' in response.text
    assert '<input type="hidden" name="is_on_behalf" value="false">' in response.text


def test_consent_refused_ends_journey() -> None:
    response = _client().post(
        "/step-1-1",
        data={"is_on_behalf": "true", "consent_to_complete_on_behalf": "false"},
    )

    assert response.status_code == 200
    assert "We cannot help with this request" in response.text
    assert "You need the permission of the person needing help" in response.text


def test_address_outside_area_ends_journey() -> None:
    response = _client().post(
        "/step-2",
        data={"is_on_behalf": "false", "lookup_postcode": "N1 1AA", "gazetteer": "NATIONAL"},
    )

    assert response.status_code == 200
    assert "This service is for residents of Hackney." in response.text


def test_multiple_help_choices_route_to_supplies() -> None:
    # Act
    response = _client().post(
        "/step-3",
        data={
            "is_on_behalf": "false",
            "lookup_postcode": "E8 1EA",
            "gazetteer": "LOCAL",
            "what_coronavirus_help": ["accessing food", "accessing essential supplies"],
        },
    )

    # Assert
    assert response.status_code == 200
    assert 'action="/step-3-4"' in response.text
    assert '<input type="hidden" name="what_coronavirus_help" value="accessing food">' in response.text
    assert '<input type="hidden" name="what_coronavirus_help" value="accessing essential supplies">' in response.text


def test_final_step_submits_and_confirms() -> None:
    # Arrange
    http_client = MockHttpClient(201)
    notifier = FakeNotifier()
    client = _client(http_client=http_client, notifier=notifier)

    # Act
    response = client.post("/step-10", data=COMPLETE_ANSWERS)

    # Assert
    assert response.status_code == 200
    assert "Request complete" in response.text
    assert "We have passed your request to our team." in response.text
    assert "We have sent you a confirmation email." in response.text
    assert len(http_client.requests) == 1
    payload = http_client.requests[0].json()
    assert payload["first_name"] == "Ada"
    assert payload["urgent_essentials"] == "toiletries, pet food"
    assert payload["date_time_recorded"].startswith("2020-04-01T12:00:00")
    assert notifier.sent[0]["email_address"] == "ada@example.com"


def test_final_step_queues_when_api_is_down() -> None:
    # Arrange
    outbox = InMemorySubmissionOutbox()
    client = _client(http_client=MockHttpClient(503), outbox=outbox, config=_config(send_emails=False))

    # Act
    response = client.post("/step-10", data=COMPLETE_ANSWERS)

    # Assert
    assert response.status_code == 200
    assert "We have received your request and will pass it to our team shortly." in response.text
    assert "confirmation email" not in response.text
    assert len(outbox.pending()) == 1
    assert client.get("/healthz").json()["outbox_pending"] == 1


def test_final_step_error_when_nothing_can_be_saved() -> None:
    client = _client(http_client=MockHttpClient(500), outbox=BrokenOutbox())

    response = client.post("/step-10", data=COMPLETE_ANSWERS)

    assert response.status_code == 302
    assert response.headers["location"].startswith("/step-10?")
    query = _redirect_query(response)
    assert query["error"] == ["We're sorry but something has gone wrong, please try again"]
    assert query["first_name"] == ["Ada"]


def test_unknown_pages_are_not_found() -> None:
    client = _client()

    assert client.get("/step-99").status_code == 404
    assert client.get("/Step-2").status_code == 404


def test_layout_and_macro_templates_are_not_pages() -> None:
    client = _client()

    for page in ("/base", "/macros", "/_base", "/_macros"):
        assert client.get(page).status_code == 404, page


def test_index_page_is_the_landing_page() -> None:
    response = _client().get("/index")

    assert response.status_code == 200
    assert 'action="/step-1"' in response.text


def test_https_redirect_outside_development() -> None:
    client = _client(config=_config(environment="production"))

    plain = client.get("/healthz")
    forwarded = client.get("/healthz", headers={"x-forwarded-proto": "https"})

    assert plain.status_code == 302
    assert plain.headers["location"] == "https://testserver/healthz"
    assert forwarded.status_code == 200


def test_direct_https_request_is_served() -> None:
    client = _client(config=_config(environment="production"))

    response = client.get("https://testserver/healthz")

    assert response.status_code == 200
