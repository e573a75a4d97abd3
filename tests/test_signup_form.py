"""Sign-up form state tests."""

from __future__ import annotations

import json

import httpx
import pytest

from app.client.signup import (
    EMAIL_MESSAGE,
    EMPTY_MESSAGE,
    MISMATCH_MESSAGE,
    PASSWORD_MESSAGE,
    SignUpForm,
)


def _filled(email="viewer@example.com", password="abc123", repeat="abc123") -> SignUpForm:
    form = SignUpForm()
    form.set_value("email", email)
    form.set_value("password", password)
    form.set_value("re_password", repeat)
    return form


def test_untouched_fields_show_no_message():
    form = SignUpForm()

    assert not form.is_valid
    assert form.field_message("email") is None


def test_touched_empty_field_reports_cant_be_empty():
    form = SignUpForm()
    form.blur("email")

    assert form.field_message("email") == EMPTY_MESSAGE
    assert form.has_error("email")

    form.set_value("email", "x")
    form.set_value("email", "")
    assert "email" not in form.dirty
    assert form.field_message("email") == EMPTY_MESSAGE


def test_validation_messages():
    form = _filled(email="nope", password="abcdef", repeat="abc")
    form.touched.update({"email", "password", "re_password"})

    assert form.field_message("email") == EMAIL_MESSAGE
    assert form.field_message("password") == PASSWORD_MESSAGE
    assert form.field_message("re_password") == MISMATCH_MESSAGE
    assert _filled(repeat="ab").errors["re_password"] == "Must be at least 3 characters"
    assert _filled().is_valid


@pytest.mark.anyio
async def test_submit_posts_credentials_and_maps_statuses():
    bodies: list[dict[str, str]] = []
    statuses = iter([201, 409, 500])

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(next(statuses), json={})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://media.example.com") as client:
        form = _filled()
        assert await form.submit(client) == "created"
        assert await form.submit(client) == "exists"
        assert await form.submit(client) == "failed"

    assert bodies[0] == {"email": "viewer@example.com", "password": "abc123"}
    assert form.submitting is False


@pytest.mark.anyio
async def test_invalid_form_is_not_sent_and_network_errors_fail():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("refused", request=request)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://media.example.com") as client:
        invalid = SignUpForm()
        assert await invalid.submit(client) == "failed"
        assert invalid.touched == {"email", "password", "re_password"}
        assert calls == 0

        assert await _filled().submit(client) == "failed"
        assert calls == 1
