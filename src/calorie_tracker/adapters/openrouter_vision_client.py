"""OpenRouter chat-completions client for food recognition."""

from dataclasses import dataclass

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from calorie_tracker.domain.errors import RecognitionError
from calorie_tracker.services.recognition import (
    DEFAULT_FAILURE_MESSAGE,
    VisionClient,
    message_for_status,
)


@dataclass
class OpenRouterVisionClient(VisionClient):
    """Vision client backed by the OpenAI-compatible OpenRouter API."""

    client: AsyncOpenAI

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        base_url: str,
        referer: str,
        title: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> "OpenRouterVisionClient":
        """Create a client that sends OpenRouter attribution headers."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                default_headers={"HTTP-Referer": referer, "X-Title": title},
                max_retries=0,
                http_client=http_client,
            )
        )

    async def complete(self, *, model: str, prompt: str, image_data_url: str) -> str:
        """Send the prompt and image, returning the reply text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_data_url}},
                        ],
                    }
                ],
            )
        except APIStatusError as exc:
            raise RecognitionError(
                message_for_status(exc.status_code),
                reason="http",
                status_code=exc.status_code,
            ) from exc
        except APIConnectionError as exc:
            raise RecognitionError(DEFAULT_FAILURE_MESSAGE, reason="network") from exc

        if not response.choices or not response.choices[0].message.content:
            raise RecognitionError(
                DEFAULT_FAILURE_MESSAGE, reason="malformed: empty response"
            )
        return response.choices[0].message.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
