"""Bot settings Pydantic schemas."""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from metalpulse.schemas.base import CamelModel

POST_FREQUENCY_MIN = 5
POST_FREQUENCY_MAX = 120
DEFAULT_POST_FREQUENCY = 30


class Tone(str, Enum):
    """Writing tone for generated posts."""

    CASUAL = "casual"
    PROFESSIONAL = "professional"
    WITTY = "witty"
    FRIENDLY = "friendly"
    FORMAL = "formal"


DEFAULT_TONE = Tone.CASUAL
VALID_TONES = [t.value for t in Tone]


class BotSettings(CamelModel):
    """Stored bot settings."""

    post_frequency: int = Field(
        DEFAULT_POST_FREQUENCY, ge=POST_FREQUENCY_MIN, le=POST_FREQUENCY_MAX
    )
    tone: Tone = DEFAULT_TONE
    personality: str = ""


class UpdateBotSettingsRequest(CamelModel):
    """Settings write request.

    Missing fields take defaults; provided fields must be valid as given,
    nothing is coerced.
    """

    post_frequency: int = DEFAULT_POST_FREQUENCY
    tone: Tone = DEFAULT_TONE
    personality: str = ""

    @field_validator("post_frequency", mode="before")
    @classmethod
    def _check_post_frequency(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("postFrequency must be an integer")
        if not POST_FREQUENCY_MIN <= value <= POST_FREQUENCY_MAX:
            raise ValueError(
                f"postFrequency must be between {POST_FREQUENCY_MIN} and {POST_FREQUENCY_MAX}"
            )
        return value

    @field_validator("tone", mode="before")
    @classmethod
    def _check_tone(cls, value: Any) -> Tone:
        if isinstance(value, Tone):
            return value
        if not isinstance(value, str) or value not in VALID_TONES:
            raise ValueError(f"tone must be one of: {', '.join(VALID_TONES)}")
        return Tone(value)

    @field_validator("personality", mode="before")
    @classmethod
    def _check_personality(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("personality must be a string")
        return value

    def to_settings(self) -> BotSettings:
        return BotSettings(
            post_frequency=self.post_frequency,
            tone=self.tone,
            personality=self.personality,
        )


class UpdateBotSettingsResponse(CamelModel):
    """Settings write response echoing the stored record."""

    success: bool = True
    settings: BotSettings
