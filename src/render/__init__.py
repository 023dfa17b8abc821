"""Render BookxNote markup trees as Markdown notes."""

from .markdown import build_deep_link, render

__all__ = ["build_deep_link", "render"]
