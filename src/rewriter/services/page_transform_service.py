from __future__ import annotations

import logging
from typing import List, Tuple

from bs4 import BeautifulSoup, NavigableString
from bs4.element import PreformattedString

from fetcher.utils.url_utils import UrlUtils
from rewriter.constants import (
    ARTICLE_HEADER_CLASS,
    BRAND_PATTERN,
    BRAND_REPLACEMENT,
    LOGO_HEADING_TAG,
    LOGO_HEADING_TEXT,
    LOGO_MARKER,
    MAIN_HEADER_CLASS,
    REPLACEMENT_STYLESHEET,
    TAGS_CLASS,
    TRAILING_SEPARATOR_PATTERN,
)
from rewriter.model import TransformContext, TransformReport

logger = logging.getLogger(__name__)

# Execution order of the pipeline. Later steps rely on the effects of earlier ones:
# the stylesheet is injected only after existing <style> tags are gone, and the
# brand censor runs last so it sees the final text of the document.
PIPELINE_STEPS: Tuple[str, ...] = (
    "strip_presentation",
    "inject_stylesheet",
    "rewrite_anchor_targets",
    "replace_logo",
    "absolutize_image_sources",
    "absolutize_script_sources",
    "trim_trailing_separators",
    "apply_header_classes",
    "censor_brand",
)


class PageTransformService:
    """
    Rewrites one upstream page into its proxied form.

    The document is parsed once and every step in PIPELINE_STEPS mutates the same
    tree in place. Each step re-runs its own selector against the current tree and
    returns the number of nodes it changed. A step whose targets are missing
    changes nothing.
    """

    def __init__(self, page_content: str, path: str = "/"):
        if page_content is None:
            raise ValueError("HTML content cannot be None.")
        # html.parser keeps the document as-is: no html/head/body are invented
        self.soup = BeautifulSoup(page_content, "html.parser")
        self.context = TransformContext(path=path)
        self.report = TransformReport(path=path)

    def run(self) -> "PageTransformService":
        """Applies every pipeline step in order."""
        for step in PIPELINE_STEPS:
            changed = getattr(self, step)()
            self.report.record(step, changed)
        logger.debug("Pipeline finished for %s: %s", self.context.path, self.report.steps)
        return self

    def render(self) -> str:
        """Serializes the current state of the tree."""
        return self.soup.decode()

    # -------- 1. Presentation --------

    def strip_presentation(self) -> int:
        """Drops style elements, stylesheet links and every inline style/class attribute."""
        changed = 0
        for element in self.soup.select('style, link[rel="stylesheet"]'):
            element.decompose()
            changed += 1

        for attr in ("style", "class"):
            for element in self.soup.select(f"[{attr}]"):
                del element[attr]
                changed += 1
        return changed

    def inject_stylesheet(self) -> int:
        """Appends the replacement stylesheet as the last child of <head>."""
        head = self.soup.head
        if head is None:
            logger.debug("No <head> on %s, stylesheet not injected.", self.context.path)
            return 0

        style = self.soup.new_tag("style")
        style.string = REPLACEMENT_STYLESHEET
        head.append(style)
        return 1

    # -------- 2. URLs --------

    def rewrite_anchor_targets(self) -> int:
        """Turns links to the upstream origin into origin-relative paths."""
        changed = 0
        for anchor in self.soup.select("a[href]"):
            rewritten = UrlUtils.to_origin_relative(anchor["href"])
            if rewritten is not None:
                anchor["href"] = rewritten
                changed += 1
        return changed

    def replace_logo(self) -> int:
        """Replaces every logo image with a plain text heading."""
        changed = 0
        for img in self.soup.select(f'img[src*="{LOGO_MARKER}"]'):
            heading = self.soup.new_tag(LOGO_HEADING_TAG)
            heading.string = LOGO_HEADING_TEXT
            img.replace_with(heading)
            self.context.verbatim_ids.add(id(heading))
            changed += 1
        return changed

    def absolutize_image_sources(self) -> int:
        return self._absolutize_sources("img")

    def absolutize_script_sources(self) -> int:
        return self._absolutize_sources("script")

    def _absolutize_sources(self, tag_name: str) -> int:
        changed = 0
        for element in self.soup.select(f"{tag_name}[src]"):
            rewritten = UrlUtils.absolutize_asset_url(element["src"])
            if rewritten is not None:
                element["src"] = rewritten
                changed += 1
        return changed

    # -------- 3. Cosmetics --------

    def trim_trailing_separators(self) -> int:
        """
        Removes the dangling '·' left at the end of list-like span sequences.
        Only a span without a following sibling element is trimmed.
        """
        changed = 0
        for span in self.soup.select("div span"):
            if span.find_next_sibling() is not None:
                continue

            # Script/style contents count as span text here, so '· <script>..</script>' does not end in '·'
            nodes = [node for node in span.find_all(string=True) if not isinstance(node, PreformattedString)]
            if not TRAILING_SEPARATOR_PATTERN.search("".join(nodes)):
                continue

            if self._trim_tail(nodes):
                changed += 1
        return changed

    @staticmethod
    def _trim_tail(nodes: List[NavigableString]) -> bool:
        """
        Strips the separator from the span's last text nodes only,
        so nested markup such as the link in '<a>Tag</a> · ' survives.
        Returns True when the glyph was found and removed.
        """
        tail = len(nodes)
        while tail and not nodes[tail - 1].strip():
            tail -= 1
        if not tail:
            return False

        node = nodes[tail - 1]
        trimmed, hits = TRAILING_SEPARATOR_PATTERN.subn("", node + "".join(nodes[tail:]), count=1)
        if not hits:
            return False

        for blank in nodes[tail:]:
            blank.extract()
        if trimmed:
            node.replace_with(type(node)(trimmed))
        else:
            node.extract()
        return True

    def apply_header_classes(self) -> int:
        """Classes the page header as an overview ('main-header') or article ('art-header')."""
        changed = 0
        for header in self.soup.find_all("header"):
            if not self.context.is_index_page:
                header["class"] = ARTICLE_HEADER_CLASS
                changed += 1
                continue

            header["class"] = MAIN_HEADER_CLASS
            changed += 1
            sibling = header.find_next_sibling()
            if sibling is not None and sibling.name == "div":
                sibling["class"] = TAGS_CLASS
                changed += 1
        return changed

    def censor_brand(self) -> int:
        """Censors the brand name in text nodes. Attributes and comments are not touched."""
        changed = 0
        for node in list(self.soup.find_all(string=True)):
            if isinstance(node, PreformattedString) or self._is_verbatim(node):
                continue

            censored, hits = BRAND_PATTERN.subn(BRAND_REPLACEMENT, node)
            if hits:
                # Keep the string subclass (Script, Stylesheet, ...) so serialization stays raw
                node.replace_with(type(node)(censored))
                changed += hits
        return changed

    def _is_verbatim(self, node: NavigableString) -> bool:
        return any(id(parent) in self.context.verbatim_ids for parent in node.parents)
