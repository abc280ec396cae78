import pytest
import requests

from academy.app.core.errors import EmailDeliveryError
from academy.app.core.settings import Settings
from academy.app.services.mailer import EmailClient


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = str(self._payload)

    def json(self):
        return self._payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def _settings(**overrides):
    values = {"email_api_key": "re_test", "email_api_url": "https://mail.example/emails", "admin_email": "admin@example.com"}
    values.update(overrides)
    return Settings(**values)


def test_send_posts_message_with_bearer_key():
    http = FakeHttp(FakeResponse(200, {"id": "abc"}))
    client = EmailClient(settings=_settings(), session=http)

    assert client.send("coach@example.com", "Invoice", "<p>hi</p>") == "abc"
    call = http.calls[0]
    assert call["url"] == "https://mail.example/emails"
    assert call["headers"]["Authorization"] == "Bearer re_test"
    assert call["json"]["to"] == ["coach@example.com"]
    assert call["json"]["reply_to"] == "admin@example.com"


def test_send_raises_on_api_error():
    client = EmailClient(settings=_settings(), session=FakeHttp(FakeResponse(422, {"message": "bad"})))
    with pytest.raises(EmailDeliveryError):
        client.send("coach@example.com", "Invoice", "<p>hi</p>")


def test_send_raises_on_transport_error():
    http = FakeHttp(error=requests.exceptions.ConnectionError("down"))
    client = EmailClient(settings=_settings(), session=http)
    with pytest.raises(EmailDeliveryError):
        client.send("coach@example.com", "Invoice", "<p>hi</p>")


def test_send_requires_api_key():
    client = EmailClient(settings=_settings(email_api_key=None), session=FakeHttp())
    with pytest.raises(EmailDeliveryError):
        client.send("coach@example.com", "Invoice", "<p>hi</p>")
