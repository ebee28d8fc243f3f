"""Serialises a :class:`SeoDocument` into a crawlable HTML shell for the SPA."""

import json
from typing import Any, Dict

from publicweb_seo.models.seo import SeoDocument

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


def escape_html(value: str) -> str:
    return value.translate(_HTML_ESCAPES)


def _meta(name: str, content: str) -> str:
    return f'<meta name="{escape_html(name)}" content="{escape_html(content)}" />'


def _property_meta(prop: str, content: str) -> str:
    return f'<meta property="{escape_html(prop)}" content="{escape_html(content)}" />'


def _json_ld(obj: Dict[str, Any]) -> str:
    payload = json.dumps(obj, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    # "<\/" is the same JSON string but cannot terminate the <script> element
    payload = payload.replace("</", "<\\/")
    return f'<script type="application/ld+json">{payload}</script>'


def render_seo_html(
    seo: SeoDocument,
    app_entry: str,
    app_root_id: str,
    locale: str = "es",
) -> str:
    """Return a complete HTML document for *seo*.

    The head carries title, meta, canonical, Open Graph, Twitter and JSON-LD;
    the body shows the H1/H2/summary, an empty mount point with id
    *app_root_id*, and the module script *app_entry* that boots the SPA.
    """
    keywords = ", ".join(seo.keywords)
    json_ld_blocks = "".join(_json_ld(obj) for obj in seo.json_ld)
    html_lang = locale.split("-")[0] or "es"
    h2 = f"<h2>{escape_html(seo.h2)}</h2>" if seo.h2 else ""

    return f"""<!doctype html>
<html lang="{escape_html(html_lang)}">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{escape_html(seo.title)}</title>
    {_meta("description", seo.description)}
    {_meta("keywords", keywords)}
    {_meta("robots", seo.robots)}
    <link rel="canonical" href="{escape_html(seo.canonical)}" />
    {_property_meta("og:title", seo.og.title)}
    {_property_meta("og:description", seo.og.description)}
    {_property_meta("og:type", seo.og.type)}
    {_property_meta("og:url", seo.og.url)}
    {_property_meta("og:image", seo.og.image)}
    {_property_meta("og:site_name", seo.og.site_name)}
    {_property_meta("og:locale", seo.og.locale)}
    {_meta("twitter:card", seo.twitter.card)}
    {_meta("twitter:title", seo.twitter.title)}
    {_meta("twitter:description", seo.twitter.description)}
    {_meta("twitter:image", seo.twitter.image)}
    {json_ld_blocks}
  </head>
  <body>
    <main>
      <h1>{escape_html(seo.h1)}</h1>
      {h2}
      <p>{escape_html(seo.body_text)}</p>
    </main>
    <div id="{escape_html(app_root_id)}"></div>
    <script type="module" src="{escape_html(app_entry)}"></script>
  </body>
</html>"""
