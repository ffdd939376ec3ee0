"""
autojournal/models/record.py
Shared dataclass schema. The segmenter, summarizer and journal assembler
all pass these types around. Do not add logic here — data only.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConversationRecord:
    """One exported conversation file, contact-resolved and named."""
    header:    str          # the "=== Content from ... ===" line
    content:   str          # body with phone numbers/emails replaced by names
    filename:  str          # display name (contact, group label, or raw)
    date_dir:  str          # MM_DD export directory, or "unknown"


@dataclass(frozen=True)
class SummaryRecord:
    """Model-generated summary for one conversation."""
    summary:          str
    conversation_id:  str   # conversation_<n>, 1-based input position
    filename:         str
