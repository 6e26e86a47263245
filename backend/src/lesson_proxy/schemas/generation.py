from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Body of POST /api/generate-lesson-plan."""

    prompt: str | None = None


class GenerateResponse(BaseModel):
    generated_text: str = Field(serialization_alias="generatedText")


class ErrorResponse(BaseModel):
    error: str


class GenerationConstraints(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    temperature: float
    max_output_tokens: int = Field(alias="maxOutputTokens", gt=0)


class GenerationRequest(BaseModel):
    """One outbound call to the generation API."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(min_length=1)
    constraints: GenerationConstraints


class GenerationResult(BaseModel):
    """Either ``text`` or ``error_kind`` + ``message`` is set, never both."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    error_kind: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None
