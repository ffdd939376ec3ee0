"""
autojournal/parsers/transcript_parser.py
Splits a combined transcript into per-conversation records.

The combined transcript is every exported thread file concatenated, each
preceded by a header line:

    === Content from 03_14/+15551234567.txt ===

Blocks whose trimmed body is under MIN_CONTENT_LENGTH characters are empty
or near-empty threads and are dropped. Surviving blocks get a display name
from the conversation namer and have phone numbers/emails replaced with
contact names.
"""

import logging
import re
from pathlib import Path
from typing import List

from autojournal.contacts.directory import ContactDirectory
from autojournal.contacts.rewriter import ContactRewriter
from autojournal.models.record import ConversationRecord
from autojournal.naming.conversation_namer import resolve_name
from autojournal.parsers.encoding import read_text

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 50
UNKNOWN_DATE_DIR   = 'unknown'

HEADER_RE = re.compile(r'===\s+Content\s+from\s+.*?===')
DETAIL_RE = re.compile(r'===\s+Content\s+from\s+(\d{2}_\d{2})/(.+?)\.txt\s+===')


def format_header(date_dir: str, file_name: str) -> str:
    return f"=== Content from {date_dir}/{file_name} ==="


def parse_conversations(text: str, directory: ContactDirectory) -> List[ConversationRecord]:
    """
    Segment a combined transcript into ConversationRecords, in input order.
    Text before the first header is ignored.
    """
    headers  = list(HEADER_RE.finditer(text or ''))
    rewriter = ContactRewriter(directory)
    records: List[ConversationRecord] = []
    dropped  = 0

    for i, match in enumerate(headers):
        body_end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        content  = text[match.end():body_end].strip()

        if len(content) < MIN_CONTENT_LENGTH:
            dropped += 1
            continue

        header = match.group(0)
        detail = DETAIL_RE.match(header)
        if detail:
            date_dir, name = detail.group(1), detail.group(2)
        else:
            date_dir, name = UNKNOWN_DATE_DIR, f"conversation_{i + 1}"

        display_name = resolve_name(name, directory)
        if display_name != name:
            logger.debug(f"Conversation {i + 1} renamed from its export filename")

        records.append(ConversationRecord(
            header   = header,
            content  = rewriter.rewrite(content),
            filename = display_name,
            date_dir = date_dir,
        ))

    logger.info(
        f"Transcript parsed: {len(records)} conversations "
        f"({dropped} empty/short blocks dropped)"
    )
    return records


def build_combined_transcript(export_dir: Path, date_dir: str) -> str:
    """
    Concatenate every *.txt thread file in an export directory, each under
    its own header. Files are read in name order.
    Raises ValueError if the directory is missing or holds no .txt files.
    """
    export_dir = Path(export_dir)
    if not export_dir.is_dir():
        raise ValueError(f"Export directory not found: {export_dir}")

    files = sorted(export_dir.glob('*.txt'))
    if not files:
        raise ValueError(f"No exported .txt files found in {export_dir}")

    parts = []
    for path in files:
        parts.append(format_header(date_dir, path.name) + '\n')
        parts.append(read_text(path) + '\n\n')

    logger.info(f"Combined {len(files)} exported files from {export_dir}")
    return ''.join(parts)


def parse_transcript_file(path: Path, directory: ContactDirectory) -> List[ConversationRecord]:
    """Read a saved combined transcript and segment it."""
    return parse_conversations(read_text(Path(path)), directory)
