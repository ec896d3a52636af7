"""Hero image for the main story: LLM writes the prompt, a generator renders it."""

from __future__ import annotations

import logging

from pydantic import BaseModel as PydanticModel

from newsdesk.core.types import Lead
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest
from newsdesk.modules.providers.images.base import BaseImageGenerator

logger = logging.getLogger(__name__)

IMAGE_PROMPT = """Create a vivid, story-specific image generation prompt for this AI news story:

Story Title: "{title}"
Summary: {summary}

Requirements:
- The image MUST show the specific story content, not generic AI imagery
- Include concrete visual elements or metaphors tied to the story's main topic
- Style: modern, clean, vibrant colors, tech-forward but not overly abstract
- Mood: professional but approachable
- Avoid: generic geometric patterns, text in the image, specific faces, logos

Return only the image prompt in 2-3 sentences describing a specific scene."""


class HeroImage(PydanticModel):
    image_url: str
    prompt: str


class Illustrator:
    def __init__(self, model: BaseModel, generator: BaseImageGenerator) -> None:
        self._model = model
        self._generator = generator

    async def create_image_prompt(self, story: Lead) -> str:
        response = await self._model.generate(
            ModelRequest.from_prompt(
                IMAGE_PROMPT.format(title=story.title, summary=story.summary),
                temperature=0.7,
                max_output_tokens=300,
            )
        )
        return response.text.strip()

    async def generate_hero_image(self, story: Lead) -> HeroImage | None:
        """None when either step fails; the caller treats that as a warning."""
        logger.info("Generating hero image")
        try:
            prompt = await self.create_image_prompt(story)
            logger.info("Image prompt: %s", prompt)
            image_url = await self._generator.generate(prompt)
        except Exception as e:
            logger.warning("Hero image generation failed: %s", e)
            return None
        logger.info("Image generated: %s", image_url)
        return HeroImage(image_url=image_url, prompt=prompt)


__all__ = ["IMAGE_PROMPT", "HeroImage", "Illustrator"]
