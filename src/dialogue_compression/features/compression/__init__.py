"""
Compression du dialogue par résumés successifs.
"""

from .summarizer import (
    Summarizer,
    SummaryResult,
    AnthropicSummarizer,
    SUMMARY_PROMPT_TEMPLATE,
    build_summary_prompt,
)
from .engine import CompressionEngine, CompressionOutcome, render_transcript
from .comparison import ComparisonReport, ViewMetrics, compare_views

__all__ = [
    "Summarizer",
    "SummaryResult",
    "AnthropicSummarizer",
    "SUMMARY_PROMPT_TEMPLATE",
    "build_summary_prompt",
    "CompressionEngine",
    "CompressionOutcome",
    "render_transcript",
    "ComparisonReport",
    "ViewMetrics",
    "compare_views",
]
