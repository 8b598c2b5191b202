from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

SERVICE_NAME = "Gemini"


class DiffInput(BaseModel):
    """Model representing the input data for commit message generation."""
    diff: str = Field(..., description="The raw git diff output.")
    gemini_api_key: Optional[str] = Field(
        None, description="Optional Gemini API key; overrides the server's configured key."
    )


class CommitMessageOutput(BaseModel):
    """Model representing the output containing the generated commit message."""
    model_config = ConfigDict(frozen=True)

    commit_message: str
    service_used: str = SERVICE_NAME


class ErrorOutput(BaseModel):
    error: str


# --- Gemini generateContent wire shapes ---

class Part(BaseModel):
    text: Optional[str] = None


class Content(BaseModel):
    parts: List[Part] = Field(default_factory=list)


class GeminiRequest(BaseModel):
    """A single prompt turn: optional system instruction plus one user content."""
    system_instruction: Optional[Content] = None
    contents: List[Content]

    @classmethod
    def from_prompt(cls, user_prompt: str, system_instruction: Optional[str] = None) -> "GeminiRequest":
        system = Content(parts=[Part(text=system_instruction)]) if system_instruction else None
        return cls(system_instruction=system, contents=[Content(parts=[Part(text=user_prompt)])])

    def to_payload(self) -> dict:
        # Gemini rejects "system_instruction": null, so absent fields are dropped.
        return self.model_dump(exclude_none=True)


class Candidate(BaseModel):
    content: Content


class GeminiResponse(BaseModel):
    # A body without "candidates" (e.g. a blocked prompt) fails validation.
    candidates: List[Candidate]
