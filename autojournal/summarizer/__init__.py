"""
autojournal.summarizer — sequential conversation summarization.

Privacy: No conversation content in logs. Counts and latency only.
"""

from autojournal.summarizer.conversation_summarizer import (
    MIN_SUMMARY_CONTENT_LENGTH,
    generate_summaries,
    summarize_conversation,
)

__all__ = [
    "MIN_SUMMARY_CONTENT_LENGTH",
    "generate_summaries",
    "summarize_conversation",
]
