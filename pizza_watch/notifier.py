"""
Home Assistant Notifier

Delivers menu change notifications through a Home Assistant notify service.
"""

import logging
from typing import Optional

import httpx

from .exceptions import DispatchError
from .models import Notification

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Benchmark pizza menu changed!"


class HomeAssistantNotifier:
    """Posts notifications to ``/api/services/notify/<service>``."""

    def __init__(
        self,
        base_url: Optional[str],
        token: Optional[str],
        target_url: str,
        service: str = "all_phones",
        title: str = DEFAULT_TITLE,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.token = token or ""
        self.target_url = target_url
        self.service = service
        self.title = title
        self.client = client or httpx.Client(timeout=30)

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.token)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/services/notify/{self.service}"

    def build_payload(self, notification: Notification) -> dict:
        """Build the notify service JSON body."""
        data = {"url": self.target_url, "clickAction": self.target_url}
        if notification.image_url:
            data["image"] = notification.image_url

        return {
            "message": notification.message,
            "title": self.title,
            "data": data,
        }

    def dispatch(self, notification: Notification) -> None:
        """
        Send a notification.

        Without a configured URL and token this only logs what would have
        been sent. Raises DispatchError on a transport failure or a non-2xx
        response; there is no retry.
        """
        if not self.configured:
            logger.info("Home Assistant URL or token not configured, skipping notification")
            logger.info("Notification would have been:")
            logger.info(f"Title: {self.title}")
            logger.info(f"Message: {notification.message}")
            if notification.image_url:
                logger.info(f"Image: {notification.image_url}")
            return

        payload = self.build_payload(notification)

        try:
            response = self.client.post(
                self.endpoint,
                json=payload,
                headers={"Authorization": f"Bearer {self.token}"},
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers headers that cannot be encoded, e.g. a non-ASCII token
            logger.error(f"Error sending notification: {e}")
            raise DispatchError(None, str(e)) from e

        if not response.is_success:
            if "application/json" in response.headers.get("content-type", ""):
                try:
                    body = str(response.json())
                except ValueError:
                    body = response.text
            else:
                body = response.text
            logger.error(f"Home Assistant error response: {body}")
            raise DispatchError(response.status_code, body)

        logger.info("Notification sent successfully")

    def send_test_notification(self) -> bool:
        """Send a test notification to verify the webhook is working."""
        if not self.configured:
            logger.error("Cannot send test notification: HA_URL or HA_TOKEN not set")
            return False
        try:
            self.dispatch(Notification(message="Pizza menu watch is set up correctly!"))
            return True
        except DispatchError as e:
            logger.error(f"Failed to send test notification: {e}")
            return False

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
