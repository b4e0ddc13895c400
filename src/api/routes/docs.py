"""HTML landing page documenting the card endpoints."""

from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from core.config import settings
from domain.entities.profile import PLATFORM_SLUGS, Platform
from domain.rendering.fallback import CardKind

router = APIRouter(tags=["docs"])

PLATFORM_TITLES = {
    Platform.CODEFORCES: ("Codeforces", "tourist"),
    Platform.CODECHEF: ("CodeChef", "gennady.korotkevich"),
}

CARD_TITLES = {
    CardKind.PROFILE: "Profile Card",
    CardKind.GRAPH: "Rating Graph",
    CardKind.HEATMAP: "Activity Heatmap",
}

PAGE_STYLE = """
body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; background: #f7fafc;
       color: #2d3748; line-height: 1.6; margin: 0; }
.container { max-width: 1000px; margin: 0 auto; padding: 2rem; }
h1 { color: #1a202c; }
h2 { margin-top: 2.5rem; border-bottom: 2px solid #e2e8f0; padding-bottom: .3rem; }
.endpoint { background: #2d3748; color: #f7fafc; font-family: monospace;
            padding: .6rem 1rem; border-radius: 6px; margin: .5rem 0; }
.demo img { max-width: 100%; border-radius: 15px; }
.note { background: #ebf8ff; border-left: 4px solid #3182ce; padding: .8rem 1rem; }
"""


def _platform_section(platform: Platform) -> str:
    title, example = PLATFORM_TITLES[platform]
    slug = PLATFORM_SLUGS[platform]
    parts = [f"<h2>{title} Cards</h2>"]
    for kind in CardKind:
        path = f"/card/{slug}/{{handle}}/{kind.value}"
        demo = f"/card/{slug}/{escape(example)}/{kind.value}"
        parts.append(
            f"<h3>{CARD_TITLES[kind]} ({kind.width}x{kind.height})</h3>"
            f'<div class="endpoint">GET {escape(path)}</div>'
            f'<div class="demo"><p>Example for {escape(example)}:</p>'
            f'<img src="{demo}" alt="{title} {CARD_TITLES[kind]}" loading="lazy" /></div>'
        )
    return "\n".join(parts)


def render_docs_page() -> str:
    sections = "\n".join(_platform_section(platform) for platform in Platform)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>{escape(settings.app_name)}</title>
<style>{PAGE_STYLE}</style>
</head>
<body>
<div class="container">
<h1>Competitive Programming Profile Cards API</h1>
<p>SVG profile cards, rating graphs and activity heatmaps for Codeforces and CodeChef.</p>
{sections}
<h2>Usage</h2>
<p>Use a card URL as the source of an image in a README or web page:</p>
<div class="endpoint">&lt;img src="https://your-domain.com/card/cf/your-handle/profile" /&gt;</div>
<div class="note"><strong>Note:</strong> <code>/card/{{platform}}/{{handle}}</code>
redirects to the profile card.</div>
<h2>Rate Limits</h2>
<ul>
<li>{escape(settings.card_rate_limit)} per IP on card endpoints</li>
<li>Profiles are cached for {settings.profile_cache_ttl_seconds} seconds</li>
</ul>
</div>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, summary="API documentation page")
async def docs_page() -> HTMLResponse:
    return HTMLResponse(content=render_docs_page())
