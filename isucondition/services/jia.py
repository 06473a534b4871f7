"""Client for the JIA association service that activates newly registered Isus."""
from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class JIAServiceError(Exception):
    """JIA answered, but not with 202 Accepted."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"JIAService returned error: status code {status_code}, message: {body}")
        self.status_code = status_code
        self.body = body


class JIAClient:
    """Async wrapper around the JIA ``/api/activate`` endpoint."""

    def __init__(self, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self):
        await self._client.aclose()

    async def activate(self, service_url: str, target_base_url: str, isu_uuid: str) -> str:
        """Activate an Isu and return the character JIA assigned to it.

        Raises:
            JIAServiceError: JIA replied with anything but 202.
            httpx.HTTPError: the request itself failed.
        """
        url = f"{service_url.rstrip('/')}/api/activate"
        response = await self._client.post(
            url,
            json={"target_base_url": target_base_url, "isu_uuid": isu_uuid},
        )
        if response.status_code != httpx.codes.ACCEPTED:
            raise JIAServiceError(response.status_code, response.text)
        character = response.json()["character"]
        logger.info("Activated isu %s with character %s", isu_uuid, character)
        return character
