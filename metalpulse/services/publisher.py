"""Publishing posts to X through the v2 API with OAuth 1.0a user context."""

import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from tweepy.errors import HTTPException

from metalpulse.config import settings
from metalpulse.core.exceptions import PublishError
from metalpulse.prompts.post_prompt import MAX_POST_LENGTH

logger = logging.getLogger(__name__)

X_CREDENTIALS = (
    "CONSUMER_KEY",
    "CONSUMER_KEY_SECRET",
    "ACCESS_TOKEN",
    "ACCESS_TOKEN_SECRET",
)


@dataclass(frozen=True)
class PostReceipt:
    """What the platform returned for a created post."""

    post_id: Optional[str]
    text: Optional[str]


def create_x_client() -> Any:
    """
    Build an authenticated async X client from the OAuth 1.0a credentials.

    Raises:
        ConfigError: If any of the four credentials is missing
    """
    consumer_key, consumer_secret, access_token, access_token_secret = settings.require(
        *X_CREDENTIALS
    )
    from tweepy.asynchronous import AsyncClient

    return AsyncClient(
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        access_token=access_token,
        access_token_secret=access_token_secret,
    )


def _response_status(exc: HTTPException) -> Optional[int]:
    response = getattr(exc, "response", None)
    # requests exposes status_code, aiohttp exposes status
    status = getattr(response, "status_code", None) or getattr(response, "status", None)
    return status if isinstance(status, int) else None


def _response_body(exc: HTTPException) -> Optional[str]:
    payload = exc.api_errors or exc.api_messages
    if not payload:
        return None
    try:
        return json.dumps(payload, default=str)
    except (TypeError, ValueError):
        return "[unable to parse]"


async def _close_client(client: Any) -> None:
    """Close the aiohttp session the async client opened, if any."""
    session = getattr(client, "session", None)
    if session is None or getattr(session, "closed", True):
        return
    result = session.close()
    if inspect.isawaitable(result):
        await result


class Publisher:
    """Validates post text and submits it to X."""

    def __init__(self, client_factory: Optional[Callable[[], Any]] = None) -> None:
        self._client_factory = client_factory or create_x_client

    @staticmethod
    def validate(text: Optional[str]) -> str:
        """Check the preconditions that need no network call."""
        if not text or not text.strip():
            raise PublishError("Post content cannot be empty")
        if len(text) > MAX_POST_LENGTH:
            raise PublishError(
                f"Post content exceeds {MAX_POST_LENGTH} character limit"
            )
        return text

    async def publish(self, text: str) -> PostReceipt:
        """
        Publish a post.

        Raises:
            PublishError: On a failed precondition or a platform rejection.
                Rejections carry status_code and body when available.
            ConfigError: If X credentials are missing
        """
        self.validate(text)
        client = self._client_factory()

        try:
            response = await client.create_tweet(text=text)
        except HTTPException as e:
            status_code = _response_status(e)
            body = _response_body(e)
            details = []
            if status_code is not None:
                details.append(f"Response status: {status_code}")
            if body is not None:
                details.append(f"data: {body}")
            message = f"Failed to post: {e}"
            if details:
                message = f"{message}. {', '.join(details)}"
            logger.error("X API error: status=%s, body=%s", status_code, body)
            raise PublishError(message, status_code=status_code, body=body) from e
        except Exception as e:
            logger.error("X API request failed: %s", e)
            raise PublishError(f"Failed to post: {e}") from e
        finally:
            await _close_client(client)

        data = getattr(response, "data", None) or {}
        receipt = PostReceipt(
            post_id=str(data["id"]) if data.get("id") is not None else None,
            text=data.get("text"),
        )
        logger.info("Published post %s", receipt.post_id)
        return receipt


_publisher: Optional[Publisher] = None


def get_publisher() -> Publisher:
    """Get the singleton Publisher instance."""
    global _publisher
    if _publisher is None:
        _publisher = Publisher()
    return _publisher
