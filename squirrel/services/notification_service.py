"""
Notification Service

Posts deploy announcements to a team chat webhook and a metrics
annotation endpoint. Failures are logged and never raised: a deploy
does not depend on its announcement.
"""

from typing import Any, Dict, List, Optional

import requests

from squirrel.constants import DEFAULT_CHAT_USERNAME, NOTIFICATION_TIMEOUT
from squirrel.logger import DeployLogger
from squirrel.models.config import AnnotationConfig, ChatConfig, NotificationConfig


class NotificationService:
    """Sends deploy announcements to the configured sinks."""

    def __init__(
        self,
        project_name: str,
        config: NotificationConfig,
        logger: Optional[DeployLogger] = None,
    ):
        self.project_name = project_name
        self.config = config
        self.logger = logger

    def chat_payload(self, chat: ChatConfig, target: str, branch: str, diff: str) -> Dict[str, Any]:
        text = f"Deploying {self.project_name} branch {branch} to {target}"
        if diff:
            text += f"\n```\n{diff}\n```"
        else:
            text += " (no new commits)"

        payload = {
            "text": text,
            "username": chat.username or DEFAULT_CHAT_USERNAME,
        }
        if chat.channel:
            payload["channel"] = chat.channel
        return payload

    def annotation_payload(self, target: str, branch: str, diff: str) -> Dict[str, Any]:
        return {
            "title": f"deploy {self.project_name} {target}",
            "description": diff or f"{branch}: no new commits",
            "source": target,
            "tags": ["deploy", self.project_name, target, branch],
        }

    def _post(self, sink: str, url: str, payload: Dict[str, Any], auth=None) -> bool:
        try:
            response = requests.post(
                url, json=payload, auth=auth, timeout=NOTIFICATION_TIMEOUT
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            if self.logger:
                self.logger.warning(f"{sink} notification failed: {e}")
            return False

        if self.logger:
            self.logger.log(f"{sink} notification sent ({response.status_code})")
        return True

    def notify_deploy(self, target: str, branch: str, diff: str) -> List[str]:
        """
        Announce a deploy on every configured sink.

        Args:
            target: Target name
            branch: Branch being deployed
            diff: Pending commit log text (may be empty)

        Returns:
            Names of the sinks that accepted the announcement
        """
        sent = []

        chat: Optional[ChatConfig] = self.config.chat
        if chat is not None:
            payload = self.chat_payload(chat, target, branch, diff)
            if self._post("chat", chat.url, payload):
                sent.append("chat")

        annotations: Optional[AnnotationConfig] = self.config.annotations
        if annotations is not None:
            auth = None
            if annotations.user and annotations.token:
                auth = (annotations.user, annotations.token)
            payload = self.annotation_payload(target, branch, diff)
            if self._post("annotations", annotations.url, payload, auth=auth):
                sent.append("annotations")

        return sent
