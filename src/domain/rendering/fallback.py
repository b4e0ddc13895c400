"""Placeholder cards and the renderer failure boundary."""

import textwrap
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from core.exceptions import AppException
from domain.rendering.scene import Rect, SvgDocument, Text

logger = structlog.get_logger()

MAX_MESSAGE_LENGTH = 240
FALLBACK_FONT_SIZE = 16
LINE_HEIGHT = 22
GENERIC_RENDER_MESSAGE = "Unable to render card"


class CardKind(StrEnum):
    """Card types and their nominal canvas sizes."""

    PROFILE = "profile"
    GRAPH = "graph"
    HEATMAP = "heatmap"

    @property
    def width(self) -> int:
        return CARD_SIZES[self][0]

    @property
    def height(self) -> int:
        return CARD_SIZES[self][1]


CARD_SIZES: dict[CardKind, tuple[int, int]] = {
    CardKind.PROFILE: (500, 300),
    CardKind.GRAPH: (900, 420),
    CardKind.HEATMAP: (700, 250),
}


def build_message_card(message: object, width: int, height: int) -> SvgDocument:
    """Centered message on a neutral background."""
    text = " ".join(str(message).split())
    if len(text) > MAX_MESSAGE_LENGTH:
        text = text[: MAX_MESSAGE_LENGTH - 1] + "…"
    # ~9px per glyph at 16px keeps lines inside the canvas
    chars_per_line = max(20, (width - 40) // 9)
    lines = textwrap.wrap(text, chars_per_line) or [""]

    document = SvgDocument(width=width, height=height)
    document.add(Rect(0, 0, width, height, fill="#f8f9fa", rx=15))
    first_y = height / 2 - (len(lines) - 1) * LINE_HEIGHT / 2
    for index, line in enumerate(lines):
        document.add(
            Text(
                width / 2,
                first_y + index * LINE_HEIGHT,
                line,
                anchor="middle",
                baseline="middle",
                font_size=FALLBACK_FONT_SIZE,
                fill="#333",
            )
        )
    document.style = "text { font-family: 'Open Sans', 'Segoe UI', Arial, sans-serif; }"
    return document


def render_fallback(message: object, width: int = 700, height: int = 250) -> str:
    """Render a placeholder SVG. Never raises for any message."""
    return build_message_card(message, width, height).render()


@dataclass(frozen=True)
class RenderOutcome:
    """Rendered SVG plus whether it is a failure placeholder."""

    svg: str
    failed: bool = False
    error: str | None = None
    status_code: int = 200


def render_with_fallback(
    build: Callable[[], SvgDocument],
    kind: CardKind,
    message: str = GENERIC_RENDER_MESSAGE,
) -> RenderOutcome:
    """Run a card builder; any exception becomes a fallback card of the same size.

    Expected input problems (AppException) keep their own message, anything
    else is reported with the generic message.
    """
    try:
        return RenderOutcome(svg=build().render())
    except AppException as exc:
        logger.warning(
            "render_rejected",
            card=kind.value,
            error_code=exc.error_code.value,
            message=exc.message,
        )
        return RenderOutcome(
            svg=render_fallback(exc.message, kind.width, kind.height),
            failed=True,
            error=exc.message,
            status_code=exc.status_code,
        )
    except Exception as exc:
        logger.error(
            "render_failed",
            card=kind.value,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        return RenderOutcome(
            svg=render_fallback(message, kind.width, kind.height),
            failed=True,
            error=str(exc),
            status_code=500,
        )
