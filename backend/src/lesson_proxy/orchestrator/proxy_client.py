import logging

import httpx

from lesson_proxy.config import settings
from lesson_proxy.errors import NetworkError, UpstreamError, error_for_status

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate-lesson-plan"


class ProxyClient:
    """Posts prompts to the proxy server's single generation endpoint."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @classmethod
    def create_http_client(
        cls,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url or settings.proxy_base_url,
            timeout=settings.client_timeout_seconds if timeout is None else timeout,
            transport=transport,
        )

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._http.post(GENERATE_PATH, json={"prompt": prompt})
        except httpx.TransportError as e:
            raise NetworkError(f"Could not reach the lesson plan server: {e}") from e

        if response.is_error:
            raise error_for_status(response.status_code, _error_message(response))

        try:
            text = response.json()["generatedText"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError(f"Malformed response from server: {e}") from e

        if not isinstance(text, str):
            raise UpstreamError("Malformed response from server: generatedText is not a string")
        return text


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json()["error"])
    except (ValueError, KeyError, TypeError):
        return f"HTTP error! status: {response.status_code}"
