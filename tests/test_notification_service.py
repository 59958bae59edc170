"""Unit tests for NotificationService."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from squirrel.models.config import AnnotationConfig, ChatConfig, NotificationConfig
from squirrel.services.notification_service import NotificationService

POST = "squirrel.services.notification_service.requests.post"

CHAT = ChatConfig(url="https://chat.example.com/hook", channel="#deploys")
ANNOTATIONS = AnnotationConfig(
    url="https://metrics.example.com/annotations", user="grafana", token="secret"
)


def _ok():
    response = MagicMock()
    response.status_code = 200
    return response


@pytest.fixture
def service():
    return NotificationService("myapp", NotificationConfig(chat=CHAT, annotations=ANNOTATIONS))


class TestPayloads:
    def test_chat_with_diff(self, service):
        payload = service.chat_payload(CHAT, "production", "master", "abc Ann: fix")

        assert payload == {
            "text": "Deploying myapp branch master to production\n```\nabc Ann: fix\n```",
            "username": "squirrel",
            "channel": "#deploys",
        }

    def test_chat_without_diff_or_channel(self, service):
        payload = service.chat_payload(ChatConfig(url="u", username="bot"), "staging", "dev", "")

        assert payload == {
            "text": "Deploying myapp branch dev to staging (no new commits)",
            "username": "bot",
        }

    def test_annotation(self, service):
        payload = service.annotation_payload("production", "master", "abc Ann: fix")

        assert payload["title"] == "deploy myapp production"
        assert payload["description"] == "abc Ann: fix"
        assert payload["tags"] == ["deploy", "myapp", "production", "master"]


class TestNotifyDeploy:
    def test_posts_to_both_sinks(self, service):
        with patch(POST, return_value=_ok()) as mock_post:
            sent = service.notify_deploy("production", "master", "abc Ann: fix")

        assert sent == ["chat", "annotations"]
        chat_call, annotation_call = mock_post.call_args_list
        assert chat_call.args == (CHAT.url,)
        assert chat_call.kwargs["auth"] is None
        assert annotation_call.args == (ANNOTATIONS.url,)
        assert annotation_call.kwargs["auth"] == ("grafana", "secret")
        assert annotation_call.kwargs["timeout"] == 10

    def test_no_auth_without_token(self):
        service = NotificationService(
            "myapp", NotificationConfig(annotations=AnnotationConfig(url="https://m", user="u"))
        )
        with patch(POST, return_value=_ok()) as mock_post:
            service.notify_deploy("production", "master", "")
        assert mock_post.call_args.kwargs["auth"] is None

    def test_failures_are_swallowed(self, service):
        logger = MagicMock()
        service.logger = logger
        with patch(POST, side_effect=requests.exceptions.ConnectionError("refused")):
            sent = service.notify_deploy("production", "master", "")

        assert sent == []
        assert logger.warning.call_count == 2

    def test_http_error_counts_as_failure(self, service):
        response = _ok()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("500")
        with patch(POST, side_effect=[response, _ok()]):
            sent = service.notify_deploy("production", "master", "")

        assert sent == ["annotations"]

    def test_nothing_configured(self):
        service = NotificationService("myapp", NotificationConfig())
        with patch(POST) as mock_post:
            assert service.notify_deploy("production", "master", "") == []
        mock_post.assert_not_called()
