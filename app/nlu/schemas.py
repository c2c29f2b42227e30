from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ExtractionResult(BaseModel):
    """
    Working record for one meeting request.

    Every field is a string; "" means unknown. Serialized with camelCase
    aliases (clientName, mobileNumber, ...) to match the LLM output and the
    API response.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    client_name: str = Field(default="", description="Person the meeting is with")
    mobile_number: str = Field(default="", description="10-digit Indian mobile number")
    meeting_date: str = Field(default="", description="Date phrase, dd-mm-yyyy once resolved")
    start_time: str = Field(default="", description="Start time, H:MM AM|PM once normalized")
    end_time: str = Field(default="", description="End time, H:MM AM|PM once normalized")

    @field_validator("*", mode="before")
    @classmethod
    def _never_null(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()


class ValidationOutcome(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class ParseRequest(BaseModel):
    text: str = ""


class ParseResponse(BaseModel):
    success: bool
    data: ExtractionResult
    errors: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.95, ge=0.0, le=1.0)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
