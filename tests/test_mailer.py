import httpx
import pytest

from agenda.core import config
from agenda.core.errors import ExternalServiceError
from agenda.services import mailer

URL = "https://mail.example.com/send-invitation"


@pytest.fixture()
def endpoint(monkeypatch):
    monkeypatch.setattr(config, "MAIL_ENDPOINT_URL", URL)
    monkeypatch.setattr(config, "MAIL_ENDPOINT_KEY", "k3y")
    calls = []

    def install(response=None, error=None):
        def fake_post(url, json=None, headers=None, timeout=None):
            calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            if error is not None:
                raise error
            return response

        monkeypatch.setattr(mailer.httpx, "post", fake_post)
        return calls

    return install


def _response(status, **kwargs):
    return httpx.Response(status, request=httpx.Request("POST", URL), **kwargs)


def test_success_posts_invitation_id(endpoint):
    calls = endpoint(_response(200, json={"message": "Invitation sent"}))

    assert mailer.send_invitation_email(7) == "Invitation sent"
    assert calls[0]["json"] == {"invitation_id": 7}
    assert calls[0]["headers"]["Authorization"] == "Bearer k3y"
    assert calls[0]["timeout"] == config.MAIL_TIMEOUT_SECONDS


def test_endpoint_error_is_surfaced_verbatim(endpoint):
    endpoint(_response(400, json={"error": "Recipient address rejected"}))

    with pytest.raises(ExternalServiceError) as exc:
        mailer.send_invitation_email(7)
    assert exc.value.message == "Recipient address rejected"


def test_unreachable_endpoint(endpoint):
    endpoint(error=httpx.ConnectError("boom"))

    with pytest.raises(ExternalServiceError) as exc:
        mailer.send_invitation_email(7)
    assert exc.value.message == "Could not reach the email service"


def test_unconfigured_endpoint(monkeypatch):
    monkeypatch.setattr(config, "MAIL_ENDPOINT_URL", "")

    with pytest.raises(ExternalServiceError):
        mailer.send_invitation_email(7)
