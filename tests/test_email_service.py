import asyncio

import pytest

from dumpster_rental import config, email_service


def test_send_email_skips_without_transport():
    result = asyncio.run(email_service.send_email("jane@example.com", "Hello", "<mjml></mjml>"))

    assert result["skipped"] is True


def test_smtp_is_preferred_over_resend(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config, "SMTP_USER", "mailer")
    monkeypatch.setattr(config, "SMTP_PASS", "secret")
    monkeypatch.setattr(config, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda mjml: "<p>hi</p>")
    monkeypatch.setattr(email_service, "send_via_smtp", lambda *args, **kwargs: calls.append(args) or {"id": "smtp-1"})

    result = asyncio.run(email_service.send_email("jane@example.com", "Hello", "<mjml></mjml>"))

    assert result == {"id": "smtp-1"}
    assert calls[0][0] == ["jane@example.com"]


def test_smtp_failure_falls_back_to_resend(monkeypatch):
    sent = []
    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config, "SMTP_USER", "mailer")
    monkeypatch.setattr(config, "SMTP_PASS", "secret")
    monkeypatch.setattr(config, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda mjml: "<p>hi</p>")

    def broken_smtp(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(email_service, "send_via_smtp", broken_smtp)
    monkeypatch.setattr(email_service.resend.Emails, "send", lambda data: sent.append(data) or {"id": "re_1"})

    result = asyncio.run(email_service.send_email(["a@example.com", "b@example.com"], "Hello", "<mjml></mjml>"))

    assert result == {"id": "re_1"}
    assert sent[0]["to"] == ["a@example.com", "b@example.com"]


def test_smtp_failure_without_resend_raises(monkeypatch):
    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config, "SMTP_USER", "mailer")
    monkeypatch.setattr(config, "SMTP_PASS", "secret")
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda mjml: "<p>hi</p>")

    def broken_smtp(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(email_service, "send_via_smtp", broken_smtp)

    with pytest.raises(Exception, match="Failed to send email"):
        asyncio.run(email_service.send_email("jane@example.com", "Hello", "<mjml></mjml>"))
