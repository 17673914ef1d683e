# src/core/editor/rich_text.py
"""
Headless model of the listing description editor.

The description is stored as HTML made of headings and paragraphs, with
optional text alignment (`style="text-align: ..."`). The editor keeps a parsed
document, serializes it back to normalized markup, and pushes that markup into
the form's `description` field on blur.
"""

from __future__ import annotations

from collections.abc import Callable

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

ALIGNMENTS = ("left", "center", "right", "justify")
BLOCK_TAGS = ("p", "h1", "h2", "h3", "h4", "h5", "h6")
_DROP_TAGS = ("script", "style", "iframe", "object")


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def _root(soup: BeautifulSoup) -> Tag:
    body = soup.body
    if body is None:
        # lxml yields an empty document for empty input
        soup.append(soup.new_tag("body"))
        body = soup.body
    return body


class RichTextEditor:
    """Holds the description document; `get_html()` is what gets persisted."""

    def __init__(self, content: str = "", *, on_blur: Callable[[str], None] | None = None) -> None:
        self._on_blur = on_blur
        self._soup = _parse("")
        self.set_html(content)

    # ---------- content ----------

    def set_html(self, html: str) -> None:
        soup = _parse(html)
        root = _root(soup)
        for tag in root.find_all(_DROP_TAGS):
            tag.decompose()
        self._wrap_loose_text(soup, root)
        self._soup = soup

    def get_html(self) -> str:
        """Normalized markup; an editor with no visible text serializes to ""."""
        if self.is_empty:
            return ""
        return "".join(str(node) for node in _root(self._soup).contents).strip()

    @property
    def plain_text(self) -> str:
        return _root(self._soup).get_text(" ", strip=True)

    @property
    def is_empty(self) -> bool:
        return not self.plain_text

    def blocks(self) -> list[Tag]:
        return [t for t in _root(self._soup).find_all(BLOCK_TAGS, recursive=False)]

    # ---------- formatting ----------

    def set_alignment(self, index: int, align: str) -> None:
        """Align the `index`-th heading/paragraph. `left` clears the style (default alignment)."""
        if align not in ALIGNMENTS:
            raise ValueError(f"alignment must be one of {ALIGNMENTS}, got {align!r}")
        block = self.blocks()[index]
        styles = [s.strip() for s in str(block.get("style", "")).split(";") if s.strip()]
        styles = [s for s in styles if not s.replace(" ", "").startswith("text-align:")]
        if align != "left":
            styles.append(f"text-align: {align}")
        if styles:
            block["style"] = "; ".join(styles)
        elif "style" in block.attrs:
            del block["style"]

    def alignment_of(self, index: int) -> str:
        style = str(self.blocks()[index].get("style", ""))
        for part in style.split(";"):
            key, _, val = part.partition(":")
            if key.strip() == "text-align" and val.strip() in ALIGNMENTS:
                return val.strip()
        return "left"

    # ---------- lifecycle ----------

    def blur(self) -> str:
        html = self.get_html()
        if self._on_blur is not None:
            self._on_blur(html)
        return html

    # ---------- internals ----------

    @staticmethod
    def _wrap_loose_text(soup: BeautifulSoup, root: Tag) -> None:
        for node in list(root.contents):
            if isinstance(node, Comment):
                node.extract()
            elif isinstance(node, NavigableString):
                if node.strip():
                    p = soup.new_tag("p")
                    node.replace_with(p)
                    p.append(node.strip())
                else:
                    node.extract()
