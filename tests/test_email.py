# tests/test_email.py

"""
Tests for the transactional email templates.
"""

from unittest.mock import MagicMock, patch

import requests

from utils.email import send_email, send_manager_invitation, send_payment_reminder


def sent_html(post) -> str:
    return post.call_args.kwargs["json"]["htmlContent"]


class TestTemplates:

    def test_property_name_is_escaped(self):
        with patch("utils.email.BREVO_API_KEY", "key"), \
                patch("utils.email.requests.post", return_value=MagicMock(status_code=201)) as post:
            assert send_manager_invitation("m@renta.rw", "<script>alert(1)</script> Heights") is True

        html = sent_html(post)
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt; Heights" in html

    def test_reminder_name_and_message_are_escaped(self):
        with patch("utils.email.BREVO_API_KEY", "key"), \
                patch("utils.email.requests.post", return_value=MagicMock(status_code=201)) as post:
            send_payment_reminder("t@renta.rw", "Jean <b>", 'Pay <a href="x">here</a>')

        html = sent_html(post)
        assert "Hello Jean &lt;b&gt;," in html
        assert "<a href" not in html


class TestDelivery:

    def test_missing_api_key_skips_send(self):
        with patch("utils.email.BREVO_API_KEY", None), patch("utils.email.requests.post") as post:
            assert send_email("a@renta.rw", "Subject", "<p>Hi</p>") is False

        post.assert_not_called()

    def test_transport_error_is_false(self):
        with patch("utils.email.BREVO_API_KEY", "key"), \
                patch("utils.email.requests.post", side_effect=requests.ConnectionError("down")):
            assert send_email("a@renta.rw", "Subject", "<p>Hi</p>") is False
