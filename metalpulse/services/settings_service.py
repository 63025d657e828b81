"""Bot settings store backed by a single JSON document."""

import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from metalpulse.config import settings
from metalpulse.core.exceptions import SettingsValidationError
from metalpulse.schemas.settings import (
    DEFAULT_POST_FREQUENCY,
    DEFAULT_TONE,
    POST_FREQUENCY_MAX,
    POST_FREQUENCY_MIN,
    VALID_TONES,
    BotSettings,
    Tone,
    UpdateBotSettingsRequest,
)

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "bot-settings.json"


def write_json_atomic(path: Path, payload: Dict[str, Any]) -> None:
    """Write a JSON document so readers see either the old or the new file.

    Creates the parent directory if absent. Raises OSError on failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def _normalize_stored(raw: Any) -> BotSettings:
    """Coerce a stored record into a valid BotSettings.

    Only used on read: out-of-range frequencies are clamped and unknown
    tones fall back to the default, so a hand-edited file never breaks a cycle.
    """
    if not isinstance(raw, dict):
        return BotSettings()

    frequency = raw.get("postFrequency", DEFAULT_POST_FREQUENCY)
    if isinstance(frequency, bool) or not isinstance(frequency, (int, float)):
        frequency = DEFAULT_POST_FREQUENCY
    elif isinstance(frequency, float) and not math.isfinite(frequency):
        # json accepts NaN, Infinity and 1e400
        frequency = DEFAULT_POST_FREQUENCY
    frequency = min(max(int(frequency), POST_FREQUENCY_MIN), POST_FREQUENCY_MAX)

    tone = raw.get("tone")
    tone = Tone(tone) if tone in VALID_TONES else DEFAULT_TONE

    personality = raw.get("personality")
    if not isinstance(personality, str):
        personality = ""

    return BotSettings(post_frequency=frequency, tone=tone, personality=personality)


class SettingsService:
    """Reads and writes the bot settings record."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or settings.data_path / SETTINGS_FILENAME

    def read(self) -> BotSettings:
        """Return the stored settings, or defaults if absent or unreadable."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.debug("No settings file at %s, using defaults", self.path)
            return BotSettings()
        except (OSError, ValueError) as e:
            logger.warning("Failed to read settings from %s: %s", self.path, e)
            return BotSettings()
        return _normalize_stored(raw)

    def write(self, payload: Dict[str, Any]) -> BotSettings:
        """Validate and persist a settings payload.

        Args:
            payload: Request body with postFrequency, tone, personality.
                Missing keys take defaults.

        Returns:
            The stored settings.

        Raises:
            SettingsValidationError: If a provided value is invalid. The
                previously stored record is left untouched.
            OSError: If the file cannot be written.
        """
        if not isinstance(payload, dict):
            raise SettingsValidationError("settings body must be a JSON object")

        try:
            request = UpdateBotSettingsRequest.model_validate(payload)
        except ValidationError as e:
            message = "; ".join(
                err["msg"].removeprefix("Value error, ") for err in e.errors()
            )
            logger.info("Rejected settings update: %s", message)
            raise SettingsValidationError(message) from e

        new_settings = request.to_settings()
        write_json_atomic(self.path, new_settings.model_dump(mode="json"))
        logger.info(
            "Settings updated: postFrequency=%d, tone=%s",
            new_settings.post_frequency, new_settings.tone.value,
        )
        return new_settings


_settings_service: Optional[SettingsService] = None


def get_settings_service() -> SettingsService:
    """Get the singleton SettingsService instance."""
    global _settings_service
    if _settings_service is None:
        _settings_service = SettingsService()
    return _settings_service
