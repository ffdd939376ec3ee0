"""
autojournal/summarizer/conversation_summarizer.py
Sequential batch summarization of parsed conversations.

One request at a time: local backends (Ollama) serve one generation at a
time anyway, and progress reporting stays deterministic. A failure on one
conversation is logged and that conversation is left out — a journal with
fewer entries is the expected outcome, not an error.

Privacy: logs counts and latency only, never conversation content.
"""

import logging
import time
from typing import Callable, List, Optional

from autojournal.llm.base import SummarizerAdapter, SummarizerError
from autojournal.models.record import ConversationRecord, SummaryRecord

logger = logging.getLogger(__name__)

MIN_SUMMARY_CONTENT_LENGTH = 50


def summarize_conversation(
    conversation:     ConversationRecord,
    adapter:          SummarizerAdapter,
    conversation_id:  str,
) -> SummaryRecord:
    """Summarize one conversation. SummarizerError propagates to the caller."""
    summary = adapter.summarize(conversation.content)
    return SummaryRecord(
        summary         = summary,
        conversation_id = conversation_id,
        filename        = conversation.filename,
    )


def generate_summaries(
    conversations: List[ConversationRecord],
    adapter:       SummarizerAdapter,
    progress_cb:   Optional[Callable[[int, int], None]] = None,
) -> List[SummaryRecord]:
    """
    Summarize conversations in input order.

    Conversations under MIN_SUMMARY_CONTENT_LENGTH characters are skipped
    without a request. progress_cb(current, total) fires before each request.
    Returns one SummaryRecord per successful request; failures leave no placeholder.
    """
    if not conversations:
        logger.info("Summarizer: 0 conversations — nothing to summarize.")
        return []

    start     = time.perf_counter()
    results: List[SummaryRecord] = []
    total     = len(conversations)
    processed = 0
    failed    = 0

    for i, conversation in enumerate(conversations):
        if len(conversation.content) < MIN_SUMMARY_CONTENT_LENGTH:
            continue

        processed += 1
        if progress_cb:
            progress_cb(processed, total)

        try:
            results.append(summarize_conversation(
                conversation,
                adapter,
                conversation_id = f"conversation_{i + 1}",
            ))
        except SummarizerError as e:
            failed += 1
            logger.error(f"Failed to generate summary for conversation {i + 1}: {e}")
        except Exception as e:
            failed += 1
            logger.error(
                f"Unexpected summarizer error for conversation {i + 1}: {type(e).__name__}",
                exc_info=True,
            )

    elapsed = time.perf_counter() - start
    logger.info(
        "Summarizer complete: count=%s failed=%s latency_sec=%.2f",
        len(results),
        failed,
        elapsed,
    )
    return results
