# src/rewriter/constants.py
"""
Read-only constants shared by the fetcher and the transform pipeline.
The upstream origin is fixed on purpose; nothing here is loaded from settings.json.
"""
import re

UPSTREAM_HOST = "buzerant.com"
UPSTREAM_ORIGIN = f"https://{UPSTREAM_HOST}"

# Overview pages get the "main-header" layout, everything else is an article.
INDEX_PATHS = frozenset({"/", "/buzeni", "/vulvar", "/podsunuto", "/brichomluveni"})

LOGO_MARKER = "logo.svg"
LOGO_HEADING_TAG = "h1"
LOGO_HEADING_TEXT = "Buzerant"

BRAND_PATTERN = re.compile(r"Buzerant", re.IGNORECASE)
BRAND_REPLACEMENT = "Bu*erant"

SEPARATOR_GLYPH = "·"
TRAILING_SEPARATOR_PATTERN = re.compile(r"\s*" + SEPARATOR_GLYPH + r"\s*$")

MAIN_HEADER_CLASS = "main-header"
TAGS_CLASS = "tags"
ARTICLE_HEADER_CLASS = "art-header"

REPLACEMENT_STYLESHEET = """
* {
  background-color: white !important;
  color: black !important;
  font-family: system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif !important;
}
body {
  margin: 5% auto;
  background: #f2f2f2;
  color: #444444;
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
  font-size: 16px;
  line-height: 1.8;
  text-shadow: 0 1px 0 #ffffff;
  width: 800px;
  max-width: 90%;
}
.main-header div:nth-child(2) {
  display: inline;
}
.main-header > span {
  font-style: italic;
}
.tags {
  display: flex;
  flex-wrap: wrap;
  gap: 0 1rem;
  font-size: larger;
}
.art-header {
  display: flex;
  justify-content: space-between;
}
a {
  text-decoration: underline;
}
h1, h3 {
  margin-bottom: 0;
}
a:hover {
  opacity: 0.7;
}
footer {
  margin-top: 2em;
  font-style: italic;
}
"""
