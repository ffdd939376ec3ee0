"""
autojournal/journal/assembler.py
Builds the daily journal Markdown document from conversation summaries,
plus the date helpers that tie an export run to its journal day.

Document layout:

    # Daily Journal - 2024-03-14          (heading, optional)

    Generated on 2024-03-15 08:00:00
    Generated with: Ollama llama3.2       (optional)

    ### Alice

    You caught up with Alice about ...

    ---
"""

import logging
import re
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

from autojournal.models.record import SummaryRecord

logger = logging.getLogger(__name__)

DATE_PLACEHOLDER = '{date}'
JOURNAL_EXTENSION = '.md'
DEFAULT_HEADING   = '# Daily Journal - {date}'
NO_CONVERSATIONS  = 'No conversations found for this day.'
SECTION_RULE      = '---'

_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


# ── DATES ────────────────────────────────────────────────────

def format_date(d: date) -> str:
    """YYYY-MM-DD"""
    return d.strftime('%Y-%m-%d')


def format_date_dir(d: date) -> str:
    """MM_DD — the directory name an export for this day is written to."""
    return d.strftime('%m_%d')


def yesterday(today: Optional[date] = None) -> date:
    today = today or date.today()
    return today - timedelta(days=1)


def export_date_range(d: date) -> Tuple[str, str]:
    """(start, end) for a one-day export; end is exclusive."""
    return format_date(d), format_date(d + timedelta(days=1))


def parse_date(text: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError on anything else."""
    text = (text or '').strip()
    if not _DATE_RE.match(text):
        raise ValueError(f"Invalid date format: {text!r}. Use YYYY-MM-DD")
    return datetime.strptime(text, '%Y-%m-%d').date()


# ── TEMPLATES ────────────────────────────────────────────────

def generate_heading(template: str, d: date) -> str:
    return template.replace(DATE_PLACEHOLDER, format_date(d))


def generate_filename(template: str, d: date) -> str:
    return generate_heading(template, d) + JOURNAL_EXTENSION


def _resolve_heading(heading_template: Optional[str], d: date) -> str:
    if heading_template is None:
        return generate_heading(DEFAULT_HEADING, d)
    if heading_template == '':
        return ''
    if not heading_template.strip():
        return generate_heading(DEFAULT_HEADING, d)
    return generate_heading(heading_template, d)


# ── ASSEMBLY ─────────────────────────────────────────────────

def assemble_journal(
    summaries:        List[SummaryRecord],
    llm_info:         Optional[str]      = None,
    target_date:      Optional[date]     = None,
    heading_template: Optional[str]      = None,
    generated_at:     Optional[datetime] = None,
) -> str:
    """
    Render the journal document.

    heading_template: None → default heading; '' → no heading at all;
    anything else → '{date}' replaced with target_date as YYYY-MM-DD.
    """
    journal_date = target_date or date.today()
    generated_at = generated_at or datetime.now()

    heading = _resolve_heading(heading_template, journal_date)

    out = f"{heading}\n\n" if heading else ''
    out += f"Generated on {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
    if llm_info:
        out += f"Generated with: {llm_info}\n"
    out += '\n'

    if not summaries:
        out += f"{NO_CONVERSATIONS}\n"
        return out

    for item in summaries:
        out += f"### {item.filename}\n\n"
        out += f"{item.summary}\n\n"
        out += f"{SECTION_RULE}\n\n"

    return out


def write_journal(content: str, output_dir: Path, filename: str) -> Path:
    """Write (or overwrite) the journal file. Creates output_dir if needed."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename

    existed = path.exists()
    path.write_text(content, encoding='utf-8')
    logger.info(f"Journal entry {'updated' if existed else 'created'}: {path}")
    return path
