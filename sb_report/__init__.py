"""Comparison and rendering of per-client benchmark results."""

from sb_report.api import build_comparison, render_json, render_markdown

__all__ = ["build_comparison", "render_json", "render_markdown"]
