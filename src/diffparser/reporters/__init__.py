"""Diff reporters for diffparser."""

from diffparser.reporters.json_reporter import JSONReporter
from diffparser.reporters.markdown_reporter import MarkdownReporter

__all__ = ["JSONReporter", "MarkdownReporter"]
