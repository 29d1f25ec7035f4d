"""Cooking video prompt builder and OpenAI video generation."""

import logging
from functools import lru_cache

from openai import AsyncOpenAI

from mealmatch.config import get_settings

logger = logging.getLogger(__name__)

VIDEO_PROMPT_TEMPLATE = """\
Create a top-down cooking instruction video showing how to make the recipe: "{name}".

Ingredients visible in the scenes:
{ingredients}

The video should follow these steps in order:
{steps}

For each step, show only hands and utensils in a modern, well-lit kitchen.
No faces, no identifiable humans.

Video style:
- Bright natural lighting
- Wooden cutting board
- Stainless steel pots, pans, and tools
- Smooth camera movement
- Clear close-ups for chopping, mixing, and cooking
- Audible light kitchen ambience (no copyrighted music)

Focus on visually demonstrating the actions exactly as described in the steps:
{steps}

End the video by showing the completed dish nicely plated."""


def build_video_prompt(name: str, ingredients: list[str], steps: list[str]) -> str:
    """Render the video prompt. Pure function of its inputs."""
    ingredients_list = "\n".join(f"- {item}" for item in ingredients)
    steps_list = "\n".join(f"{index}. {step}" for index, step in enumerate(steps, start=1))
    return VIDEO_PROMPT_TEMPLATE.format(
        name=name,
        ingredients=ingredients_list,
        steps=steps_list,
    ).strip()


class VideoService:
    """OpenAI video generation. Disabled (preview only) without an API key."""

    def __init__(self, api_key: str | None, model: str = "sora-2"):
        self.model = model
        self.client = AsyncOpenAI(api_key=api_key) if api_key else None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def create_video(self, prompt: str) -> dict:
        """Submit a video generation job and return the job object."""
        if self.client is None:
            raise RuntimeError("OpenAI API key is not configured")

        video = await self.client.videos.create(model=self.model, prompt=prompt)
        logger.info(f"Video job created with model {self.model}")
        return video.model_dump()


@lru_cache
def get_video_service() -> VideoService:
    """Get cached video service instance."""
    settings = get_settings()
    return VideoService(api_key=settings.openai_api_key, model=settings.video_model)
