"""OpenRouter chat completions client for food analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from calorie_tracker.services.analysis import AnalysisClient, AnalysisError

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass
class OpenRouterAnalysisClient(AnalysisClient):
    """Analysis client backed by an OpenAI-compatible chat completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls,
        api_key: str,
        *,
        base_url: str = OPENROUTER_BASE_URL,
        site_url: str | None = None,
        app_title: str | None = None,
    ) -> "OpenRouterAnalysisClient":
        """Create a client with OpenRouter attribution headers."""
        headers: dict[str, str] = {}
        if site_url:
            headers["HTTP-Referer"] = site_url
        if app_title:
            headers["X-Title"] = app_title
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, base_url=base_url, default_headers=headers
            )
        )

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str | None,
        temperature: float,
    ) -> str:
        """Send the prompt, with an optional image, and return the reply text."""
        content: list[dict[str, object]] = [{"type": "text", "text": prompt}]
        if image_data_url:
            content.append({"type": "image_url", "image_url": {"url": image_data_url}})

        response = await self.client.chat.completions.create(
            model=model,
            temperature=temperature,
            messages=[{"role": "user", "content": content}],
        )
        if not response.choices:
            raise AnalysisError("Invalid response structure from API.", 500)
        output_text = response.choices[0].message.content
        if not output_text:
            raise AnalysisError("Invalid response structure from API.", 500)
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
