import logging
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import Settings, resolve_api_key
from .errors import CommitServiceError, CredentialError, InvalidRequestError
from .gemini_client import GeminiClient
from .generator import generate_commit_message
from .models import CommitMessageOutput, DiffInput, ErrorOutput

logger = logging.getLogger(__name__)


def parse_diff_request(raw_body: bytes) -> DiffInput:
    try:
        payload = DiffInput.model_validate_json(raw_body)
    except ValidationError as e:
        raise InvalidRequestError("Invalid JSON in request body") from e

    if not payload.diff.strip():
        raise InvalidRequestError("Empty diff provided")
    return payload


def error_response(error: CommitServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=ErrorOutput(error=str(error)).model_dump(),
    )


async def handle_generate_commit(raw_body: bytes, settings: Settings, client: GeminiClient) -> JSONResponse:
    """
    Validates the request body, resolves the API key and runs generation.

    Returns 200 with the commit message, 400 for a bad body or a missing key,
    500 when Gemini fails or returns nothing usable.
    """
    try:
        payload = parse_diff_request(raw_body)
    except InvalidRequestError as e:
        logger.info(f"Rejected commit request: {e}")
        return error_response(e)

    logger.info(
        f"Received request for commit message generation. Diff length: {len(payload.diff)}, "
        f"API key in request: {payload.gemini_api_key is not None}"
    )

    api_key = resolve_api_key(payload.gemini_api_key, settings)
    if api_key is None or not api_key.strip():
        error = CredentialError()
        logger.warning("No usable Gemini API key from request, binding or environment.")
        return error_response(error)

    try:
        commit_message = await generate_commit_message(payload.diff, api_key, client)
    except CommitServiceError as e:
        logger.error(f"Error during commit message generation ({e.kind.value}): {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorOutput(error=f"Failed to generate commit message: {e}").model_dump(),
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=CommitMessageOutput(commit_message=commit_message).model_dump(),
    )
