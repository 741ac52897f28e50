"""Template rendering utilities for HTML views."""

from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from now_playing_card.models.render_config import RenderConfig

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)


class TemplateRenderer:
    """Handles rendering of Jinja2 templates for the HTML views."""

    @staticmethod
    def render_preview(request: Request, svg: str, config: RenderConfig) -> HTMLResponse:
        """Render the preview page with the widget SVG inlined in filler text.

        Args:
            request: FastAPI request object
            svg: Rendered SVG markup without XML declaration
            config: Render config the SVG was built with (sizes the embed)

        Returns:
            HTMLResponse with the rendered preview page
        """
        return templates.TemplateResponse(
            request,
            "preview.html",
            {
                "svg": Markup(svg),
                "width": config.width,
            },
            headers={"Cache-Control": "no-cache"},
        )
