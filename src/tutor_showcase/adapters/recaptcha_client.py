"""Google reCAPTCHA verification client."""

from dataclasses import dataclass

import httpx

from tutor_showcase.services.applications import CaptchaClient

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


@dataclass
class HttpxRecaptchaClient(CaptchaClient):
    """reCAPTCHA siteverify client using httpx."""

    secret_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, secret_key: str) -> "HttpxRecaptchaClient":
        return cls(secret_key=secret_key, http_client=httpx.AsyncClient())

    async def verify(self, token: str, remote_ip: str | None = None) -> dict:
        """Post a token to siteverify and return the JSON verdict."""
        data = {"secret": self.secret_key, "response": token}
        if remote_ip and remote_ip != "unknown":
            data["remoteip"] = remote_ip
        response = await self.http_client.post(
            RECAPTCHA_VERIFY_URL, data=data, timeout=10
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        await self.http_client.aclose()
