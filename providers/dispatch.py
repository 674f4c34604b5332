"""Forward normalized generation requests to the local generation endpoint."""

import logging

import httpx

from config import settings
from providers.base import GenerationInput, GenerationOutput

logger = logging.getLogger(__name__)


class GenerationDispatcher:
    """POSTs a GenerationInput to the generation endpoint and maps the reply.

    The credential travels in a provider-specific header only, never in the
    body or the query string.

    Usage:
        dispatcher = GenerationDispatcher()
        output = await dispatcher.dispatch(
            provider_id="wavespeed",
            provider_name="WaveSpeed",
            api_key_header="X-WaveSpeed-API-Key",
            api_key=key,
            request=GenerationInput(model="wavespeed-ai/flux-dev", prompt="a cat"),
        )
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint_url = endpoint_url or settings.generation_endpoint_url
        self.timeout = timeout if timeout is not None else settings.generation_timeout
        self.transport = transport

    async def dispatch(
        self,
        provider_id: str,
        provider_name: str,
        api_key_header: str,
        api_key: str,
        request: GenerationInput,
    ) -> GenerationOutput:
        headers = {
            "Content-Type": "application/json",
            api_key_header: api_key,
        }
        body = request.to_payload(provider_id)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint_url, headers=headers, json=body)

                if not response.is_success:
                    error = _error_from_body(response)
                    logger.error(
                        "%s generation failed: HTTP %d %s",
                        provider_name,
                        response.status_code,
                        error or response.reason_phrase,
                    )
                    return GenerationOutput.failure(error or f"HTTP {response.status_code}")

                data = response.json()

            if not isinstance(data, dict):
                raise ValueError("Malformed response from generation endpoint")

            return GenerationOutput.from_body(data)

        except httpx.ConnectError:
            logger.error("Cannot connect to generation endpoint at %s. Is it running?", self.endpoint_url)
            return GenerationOutput.failure(
                f"{provider_name}: Cannot connect to generation endpoint at {self.endpoint_url}"
            )
        except Exception as e:
            logger.error("%s generation failed: %s", provider_name, e)
            return GenerationOutput.failure(f"{provider_name}: {str(e) or e.__class__.__name__}")


def _error_from_body(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None
