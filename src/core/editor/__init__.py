# src/core/editor/__init__.py
from .rich_text import ALIGNMENTS, BLOCK_TAGS, RichTextEditor

__all__ = ["RichTextEditor", "ALIGNMENTS", "BLOCK_TAGS"]
