"""Meme image captioning through the Imgflip API."""

import logging

import httpx

from ghcompare.models import MemePrompt, MemeResult

logger = logging.getLogger(__name__)

IMGFLIP_ENDPOINT = "https://api.imgflip.com/caption_image"


class MemeGenerator:
    """Submits caption prompts to Imgflip.

    Any failure yields None so a comparison never fails because of the meme.
    """

    def __init__(self, username: str, password: str, timeout: float = 30.0):
        """Initialize with Imgflip credentials.

        Args:
            username: Imgflip account name.
            password: Imgflip account password.
            timeout: Request timeout in seconds.
        """
        self.username = username
        self.password = password
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)

    async def generate(self, prompt: MemePrompt | None) -> MemeResult | None:
        """Caption the prompt's template.

        Args:
            prompt: Caption prompt, or None.

        Returns:
            MemeResult with image and page URLs, or None on any failure.
        """
        if prompt is None or not prompt.template_id or not self.configured:
            return None

        form = {
            "template_id": prompt.template_id,
            "username": self.username,
            "password": self.password,
            "text0": prompt.top_text,
            "text1": prompt.bottom_text,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(IMGFLIP_ENDPOINT, data=form)
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Meme generation failed: %s", e)
            return None

        if not isinstance(payload, dict):
            payload = {}

        data = payload.get("data") or {}
        if not response.is_success or not payload.get("success") or not data.get("url"):
            logger.warning(
                "Meme generation rejected (%d): %s",
                response.status_code,
                payload.get("error_message", "no image returned"),
            )
            return None

        return MemeResult(url=data["url"], page_url=data.get("page_url", ""))
