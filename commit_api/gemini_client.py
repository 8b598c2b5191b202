import logging
import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import UpstreamError, UpstreamFailure
from .models import GeminiRequest, GeminiResponse

# --- Setup Logging ---
logger = logging.getLogger(__name__)
# httpx logs request URLs at INFO, and ours carry ?key=
logging.getLogger("httpx").setLevel(logging.WARNING)


class GeminiClient:
    """
    Sends single-shot generateContent calls to the Gemini REST API.

    The underlying httpx.AsyncClient is owned by the caller (the app lifespan),
    so connections may be pooled, but no call depends on another.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings):
        self.http_client = http_client
        self.settings = settings

    @property
    def model(self) -> str:
        return self.settings.model

    async def send(self, request: GeminiRequest, api_key: str) -> GeminiResponse:
        """
        POSTs the request to the model's generateContent endpoint.

        Raises UpstreamError for a non-2xx status, a body that does not parse as a
        GeminiResponse, a transport failure or a timeout. Never retries.
        """
        url = self.settings.endpoint
        logger.debug(f"Sending request to Gemini: POST {url}?key=***")

        try:
            response = await self.http_client.post(
                url,
                params={"key": api_key},
                json=request.to_payload(),
                headers={"Content-Type": "application/json"},
                timeout=self.settings.request_timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Gemini request timed out after {self.settings.request_timeout}s (model: {self.model})")
            raise UpstreamError(UpstreamFailure.TIMEOUT, detail=type(e).__name__) from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed (model: {self.model}): {type(e).__name__}")
            # str(e) of some httpx errors includes the request URL, and with it the key.
            raise UpstreamError(UpstreamFailure.TRANSPORT, detail=type(e).__name__) from e

        if not response.is_success:
            logger.warning(f"Gemini returned status {response.status_code} (model: {self.model})")
            raise UpstreamError(
                UpstreamFailure.STATUS,
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            parsed = GeminiResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Could not parse Gemini response: {e.error_count()} validation error(s)")
            raise UpstreamError(
                UpstreamFailure.MALFORMED_RESPONSE,
                detail=f"{e.error_count()} validation error(s) for GeminiResponse",
            ) from e

        logger.debug(f"Gemini returned {len(parsed.candidates)} candidate(s)")
        return parsed
