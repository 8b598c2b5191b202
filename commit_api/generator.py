import logging

from .errors import GenerationError
from .gemini_client import GeminiClient
from .models import GeminiRequest, GeminiResponse
from .prompts import build_prompt

logger = logging.getLogger(__name__)


def extract_message(response: GeminiResponse) -> str:
    """
    Joins the text parts of the first candidate and strips the result.

    Raises GenerationError if there is no candidate, it carries no text part,
    or the joined text is blank.
    """
    if not response.candidates:
        raise GenerationError()

    content = response.candidates[0].content
    texts = [part.text for part in content.parts if part.text is not None]
    if not texts:
        raise GenerationError()

    message = "".join(texts).strip()
    if not message:
        raise GenerationError()
    return message


async def generate_commit_message(diff: str, api_key: str, client: GeminiClient) -> str:
    """
    Builds the prompt for the diff, sends it to Gemini and returns the message.

    UpstreamError from the client propagates unchanged.
    """
    prompt = build_prompt(diff)
    request = GeminiRequest.from_prompt(prompt.user_prompt, system_instruction=prompt.system_instruction)

    logger.debug(
        f"Requesting commit message from model '{client.model}'. "
        f"User prompt length: {len(prompt.user_prompt)}"
    )
    response = await client.send(request, api_key)

    message = extract_message(response)
    logger.info(f"Generated commit message: '{message.splitlines()[0]}'")
    return message
