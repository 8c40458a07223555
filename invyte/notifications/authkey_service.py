import logging
import re
from typing import Protocol

import httpx

from invyte.notifications.base import NotificationResult, NotificationSenderBase

logger = logging.getLogger(__name__)


class AuthKeyConfig(Protocol):
    authkey_api_key: str
    authkey_base_url: str
    authkey_invite_template: str
    authkey_rsvp_template: str
    sms_country_code: str


class AuthKeySMSService(NotificationSenderBase):
    """Sends templated SMS through the AuthKey.io JSON API."""

    def __init__(
        self,
        config: AuthKeyConfig,
        client: httpx.AsyncClient | None = None,
    ):
        self._config = config
        self._client = client

    def split_phone_number(self, phone_number: str) -> tuple[str, str]:
        """Return ``(country_code, mobile)``; AuthKey wants them separately."""
        digits = re.sub(r"\D", "", phone_number)
        country_code = self._config.sms_country_code
        if len(digits) > 10 and digits.startswith(country_code):
            return country_code, digits[len(country_code):]
        return country_code, digits

    async def _send(self, phone_number: str, template: str, variables: list[str]) -> NotificationResult:
        country_code, mobile = self.split_phone_number(phone_number)
        payload = {
            "country_code": country_code,
            "mobile": mobile,
            "sid": template,
        }
        for index, value in enumerate(variables, start=1):
            payload[f"var{index}"] = value

        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "AuthKey rejected template %s to %s%s: %s %s",
                template,
                country_code,
                mobile,
                e.response.status_code,
                e.response.text,
            )
            return NotificationResult(success=False, message=f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error("AuthKey request failed for %s%s: %s", country_code, mobile, e)
            return NotificationResult(success=False, message=str(e))

        data = response.json()
        return NotificationResult(
            success=True,
            log_id=data.get("LogID"),
            message=data.get("Message", "Message sent"),
        )

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            f"{self._config.authkey_base_url}/restapi/requestjson.php",
            headers={
                "Authorization": f"Basic {self._config.authkey_api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
        )

    async def send_event_invite(
        self,
        phone_number: str,
        inviter_name: str,
        event_name: str,
        link: str,
    ) -> NotificationResult:
        return await self._send(
            phone_number,
            self._config.authkey_invite_template,
            [inviter_name, event_name, link],
        )

    async def send_rsvp_notification(
        self,
        phone_number: str,
        guest_name: str,
        rsvp_status: str,
        event_name: str,
    ) -> NotificationResult:
        return await self._send(
            phone_number,
            self._config.authkey_rsvp_template,
            [guest_name, rsvp_status, event_name],
        )
