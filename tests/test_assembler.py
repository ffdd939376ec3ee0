"""
tests/test_assembler.py
Journal document rendering, filenames and date helpers.
"""

from datetime import date, datetime

import pytest

from autojournal.journal.assembler import (
    NO_CONVERSATIONS,
    assemble_journal,
    export_date_range,
    format_date_dir,
    generate_filename,
    generate_heading,
    parse_date,
    write_journal,
    yesterday,
)
from autojournal.models.record import SummaryRecord

DAY = date(2024, 3, 14)
NOW = datetime(2024, 3, 15, 8, 0, 0)


def _summaries():
    return [
        SummaryRecord(summary='You planned lunch with Alice.', conversation_id='conversation_1', filename='Alice'),
        SummaryRecord(summary='You sorted out dessert.', conversation_id='conversation_2', filename='Alice, Bob'),
    ]


# ── DOCUMENT ─────────────────────────────────────────────────

def test_empty_journal():
    out = assemble_journal([], target_date=DAY, generated_at=NOW)
    assert out == (
        "# Daily Journal - 2024-03-14\n\n"
        "Generated on 2024-03-15 08:00:00\n"
        "\n"
        f"{NO_CONVERSATIONS}\n"
    )


def test_sections_in_order():
    out = assemble_journal(
        _summaries(),
        llm_info     = 'Ollama llama3.2',
        target_date  = DAY,
        generated_at = NOW,
    )
    assert out == (
        "# Daily Journal - 2024-03-14\n\n"
        "Generated on 2024-03-15 08:00:00\n"
        "Generated with: Ollama llama3.2\n"
        "\n"
        "### Alice\n\nYou planned lunch with Alice.\n\n---\n\n"
        "### Alice, Bob\n\nYou sorted out dessert.\n\n---\n\n"
    )


def test_empty_heading_template_omits_heading():
    out = assemble_journal([], target_date=DAY, heading_template='', generated_at=NOW)
    assert out.startswith('Generated on 2024-03-15 08:00:00\n')


def test_whitespace_heading_template_uses_default():
    out = assemble_journal([], target_date=DAY, heading_template='   ', generated_at=NOW)
    assert out.startswith('# Daily Journal - 2024-03-14\n\n')


def test_custom_heading_replaces_every_placeholder():
    out = assemble_journal([], target_date=DAY, heading_template='## {date} ({date})', generated_at=NOW)
    assert out.startswith('## 2024-03-14 (2024-03-14)\n\n')


def test_without_llm_info_no_generated_with_line():
    out = assemble_journal(_summaries(), target_date=DAY, generated_at=NOW)
    assert 'Generated with' not in out


# ── TEMPLATES ────────────────────────────────────────────────

def test_generate_filename():
    assert generate_filename('Daily Journal {date}', DAY) == 'Daily Journal 2024-03-14.md'


def test_generate_heading_without_placeholder():
    assert generate_heading('Journal', DAY) == 'Journal'


# ── DATES ────────────────────────────────────────────────────

def test_format_date_dir():
    assert format_date_dir(DAY) == '03_14'


def test_yesterday_crosses_month():
    assert yesterday(date(2024, 3, 1)) == date(2024, 2, 29)


def test_export_date_range_end_exclusive():
    assert export_date_range(date(2024, 12, 31)) == ('2024-12-31', '2025-01-01')


def test_parse_date():
    assert parse_date(' 2024-03-14 ') == DAY
    for bad in ('03/14/2024', '2024-3-14', '', '2024-02-30'):
        with pytest.raises(ValueError):
            parse_date(bad)


# ── WRITE ────────────────────────────────────────────────────

def test_write_journal_creates_and_overwrites(tmp_path):
    out_dir = tmp_path / 'Autojournal'
    path = write_journal('first', out_dir, 'Daily Journal 2024-03-14.md')
    assert path.read_text(encoding='utf-8') == 'first'
    write_journal('second', out_dir, 'Daily Journal 2024-03-14.md')
    assert path.read_text(encoding='utf-8') == 'second'
