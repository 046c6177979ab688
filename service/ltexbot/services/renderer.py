"""
Renderer Service

Converts LaTeX formulas to images using the latex2image API
(latex2image.joeraut.com). Every call is a single POST; nothing is cached
and nothing is retried.
"""

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..schemas import RenderRequest, RenderResponse

logger = logging.getLogger("ltexbot.renderer")

ALIGN_TEMPLATE = "\\begin{{align*}}\n{formula}\n\\end{{align*}}\n"


def wrap_formula(formula: str) -> str:
    """Wrap a formula in the align* environment the renderer expects."""
    return ALIGN_TEMPLATE.format(formula=formula)


class RendererClient:
    """Client for the latex2image rendering endpoint."""

    def __init__(
        self,
        url: str,
        output_format: str = "JPG",
        output_scale: str = "1000%",
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.output_format = output_format
        self.output_scale = output_scale
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def render(self, formula: str) -> Optional[str]:
        """
        Render a formula to an image.

        Returns:
            Image URL, or None if the formula could not be rendered
        """
        if not formula:
            raise ValueError("Cannot render an empty formula")

        request = RenderRequest(
            latex_input=wrap_formula(formula),
            output_format=self.output_format,
            output_scale=self.output_scale,
        )

        try:
            response = await self.client.post(
                self.url, json=request.model_dump(by_alias=True)
            )
        except httpx.HTTPError as e:
            logger.warning(f"Renderer request failed: {e!r}")
            return None

        if response.status_code >= 500:
            logger.info(f"Renderer rejected formula (status={response.status_code})")
            return None

        try:
            rendered = RenderResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unreadable renderer response (status={response.status_code}): {e}")
            return None

        if not rendered.image_url:
            logger.info(f"Renderer returned no image (status={response.status_code}, error={rendered.error})")
            return None

        return rendered.image_url

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()


async def render_all(
    renderer: RendererClient, formulas: list[str]
) -> list[tuple[str, Optional[str]]]:
    """
    Render several formulas concurrently.

    Results come back as (formula, image_url) pairs in the order of
    `formulas`, whatever order the requests finish in.
    """

    async def render_indexed(index: int, formula: str) -> tuple[int, str, Optional[str]]:
        return index, formula, await renderer.render(formula)

    tasks = [
        asyncio.create_task(render_indexed(i, formula))
        for i, formula in enumerate(formulas)
    ]
    try:
        finished = [await task for task in asyncio.as_completed(tasks)]
    except BaseException:
        # One render blew up: the rest of the batch is abandoned
        for task in tasks:
            task.cancel()
        raise
    finished.sort(key=lambda item: item[0])
    return [(formula, image_url) for _, formula, image_url in finished]


# Global instance
_renderer_client: Optional[RendererClient] = None


def get_renderer_client() -> RendererClient:
    """Get or create renderer client singleton."""
    global _renderer_client
    if _renderer_client is None:
        settings = get_settings()
        _renderer_client = RendererClient(
            url=settings.renderer_url,
            output_format=settings.renderer_output_format,
            output_scale=settings.renderer_output_scale,
            timeout=settings.renderer_timeout,
        )
    return _renderer_client


async def close_renderer_client() -> None:
    """Close and forget the renderer client singleton."""
    global _renderer_client
    if _renderer_client is not None:
        await _renderer_client.close()
        _renderer_client = None
