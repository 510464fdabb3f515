from pydantic import BaseModel, ConfigDict, Field, field_validator


class SummarizeRequest(BaseModel):
    transcript: str
    prompt: str

    @field_validator("transcript", "prompt")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class SummarizeResponse(BaseModel):
    summary: str


class EmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipients: list[str] = Field(min_length=1)
    summary: str
    original_prompt: str = Field(default="", alias="originalPrompt")
    title: str | None = None

    @field_validator("recipients")
    @classmethod
    def _recipients_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [r.strip() for r in value if r.strip()]
        if not cleaned:
            raise ValueError("at least one recipient is required")
        return cleaned

    @field_validator("summary")
    @classmethod
    def _summary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class EmailResponse(BaseModel):
    success: bool = True
    message: str = "Email sent"


class TranscriptionResult(BaseModel):
    transcription: str
    filename: str
    size: int
