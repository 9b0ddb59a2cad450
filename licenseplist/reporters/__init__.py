"""Serializers for the final license list."""

from licenseplist.reporters.html import render_html, write_html
from licenseplist.reporters.markdown import render_markdown, write_markdown
from licenseplist.reporters.plist import write_plist

__all__ = ["render_html", "render_markdown", "write_html", "write_markdown", "write_plist"]
