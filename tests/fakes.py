from __future__ import annotations

from app.services.notifications.base import (
    BaseEmailSender,
    BaseSmsSender,
    NotificationResult,
)


class RecordingSmsSender(BaseSmsSender):
    def __init__(self, fail_with: Exception | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_with = fail_with

    @property
    def provider_name(self) -> str:
        return "recording"

    async def send_sms(self, to_phone: str, message: str) -> NotificationResult:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((to_phone, message))
        return NotificationResult(success=True, provider="recording", message_id=f"SM{len(self.sent)}")


class RecordingEmailSender(BaseEmailSender):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    @property
    def provider_name(self) -> str:
        return "recording"

    async def send_email(self, to_email: str, subject: str, body_html: str) -> NotificationResult:
        self.sent.append((to_email, subject, body_html))
        return NotificationResult(success=True, provider="recording", message_id=f"EM{len(self.sent)}")
