"""Output renderers for study search results."""

from __future__ import annotations

from StudyFinder.renderers.console import render_text
from StudyFinder.renderers.json import render_json, render_outcome

__all__ = ["render_json", "render_outcome", "render_text"]
