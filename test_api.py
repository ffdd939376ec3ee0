"""
test_api.py
─────────────────────────────────────────────────────────────────────────────
Tests for autojournal.api — JournalAPI class and the FastAPI endpoints.

Coverage:
  - reload_contacts: missing config, missing file, bad format, success
  - load_contacts_automatically: detection and failure tolerance
  - run: empty transcript, full pipeline with a fake backend, skipped failures
  - run_for_date: export directory stitching
  - HTTP: health, lookup, export-command, config, contacts reload, journal

All tests use tmp_path and a mocked summarizer — no network, no exporter.
"""

import json
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from autojournal.api import JournalAPI, _build_app
from autojournal.config import CONFIG_FILENAME
from autojournal.contacts.directory import ContactFormatError
from autojournal.llm.base import RequestRejectedError, SummarizerAdapter

DAY = date(2024, 3, 14)

CONTACTS_CSV = (
    'Phone Number/Email,Name\n'
    '+15551234567,"Alice"\n'
    '+15557654321,"Bob"\n'
)

TRANSCRIPT = (
    "=== Content from 03_14/+15551234567.txt ===\n"
    "Mar 14, 2024 10:00:00 AM\n+15551234567\nAre we still on for lunch tomorrow at noon?\n\n"
    "=== Content from 03_14/+15557654321.txt ===\n"
    "Mar 14, 2024 11:00:00 AM\n+15557654321\nCan you send me the photos from the weekend?\n"
)


# ── HELPERS ──────────────────────────────────────────────────────────────────

def _fake_adapter(*results):
    adapter = MagicMock(spec=SummarizerAdapter)
    adapter.describe.return_value = 'Fake model'
    adapter.is_available.return_value = True
    adapter.summarize.side_effect = list(results)
    return adapter


def _write_contacts(root: Path, rel: str = 'Autojournal/contacts.csv') -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONTACTS_CSV, encoding='utf-8')
    return path


# ── CONTACTS ─────────────────────────────────────────────────────────────────

def test_reload_without_configured_path(tmp_path):
    api = JournalAPI(config={}, project_root=tmp_path)
    with pytest.raises(ValueError):
        api.reload_contacts()


def test_reload_missing_file(tmp_path):
    api = JournalAPI(config={'contacts_path': 'nope.csv'}, project_root=tmp_path)
    with pytest.raises(FileNotFoundError):
        api.reload_contacts()


def test_reload_bad_format(tmp_path):
    (tmp_path / 'contacts.csv').write_text('Name only\n', encoding='utf-8')
    api = JournalAPI(config={'contacts_path': 'contacts.csv'}, project_root=tmp_path)
    with pytest.raises(ContactFormatError):
        api.reload_contacts()


def test_reload_counts_distinct_names(tmp_path):
    _write_contacts(tmp_path)
    api = JournalAPI(config={'contacts_path': 'Autojournal/contacts.csv'}, project_root=tmp_path)
    assert api.reload_contacts() == 2
    assert api.lookup_contact('5551234567') == 'Alice'


def test_load_contacts_automatically_detects_default_file(tmp_path):
    expected = _write_contacts(tmp_path)
    api = JournalAPI(config={}, project_root=tmp_path)
    assert api.load_contacts_automatically() == expected
    assert api.lookup_contact('+15557654321') == 'Bob'


def test_load_contacts_automatically_tolerates_bad_file(tmp_path):
    bad = tmp_path / 'Autojournal' / 'contacts.csv'
    bad.parent.mkdir(parents=True)
    bad.write_text('garbage\n', encoding='utf-8')
    api = JournalAPI(config={}, project_root=tmp_path)
    assert api.load_contacts_automatically() is None
    assert len(api.directory) == 0


# ── PIPELINE ─────────────────────────────────────────────────────────────────

def test_run_empty_transcript_writes_nothing(tmp_path):
    adapter = _fake_adapter()
    api = JournalAPI(config={}, project_root=tmp_path, adapter=adapter)
    summary = api.run('no headers here', target_date=DAY)
    assert summary['status'] == 'empty'
    assert summary['journal_path'] is None
    adapter.summarize.assert_not_called()
    assert not (tmp_path / 'Autojournal').exists()


def test_run_writes_journal(tmp_path):
    _write_contacts(tmp_path)
    adapter = _fake_adapter('You planned lunch with Alice.', 'Bob asked for photos.')
    api = JournalAPI(config={}, project_root=tmp_path, adapter=adapter)

    summary = api.run(TRANSCRIPT, target_date=DAY)

    assert summary['status'] == 'ok'
    assert summary['conversations_found'] == 2
    assert summary['summaries_written'] == 2
    assert summary['skipped'] == 0
    assert summary['llm'] == 'Fake model'

    journal = Path(summary['journal_path'])
    assert journal == tmp_path / 'Autojournal' / 'Daily Journal 2024-03-14.md'
    content = journal.read_text(encoding='utf-8')
    assert content.startswith('# Daily Journal - 2024-03-14\n\n')
    assert content.index('### Alice') < content.index('### Bob')
    assert '+1555' not in adapter.summarize.call_args_list[0][0][0]


def test_run_counts_skipped_failures(tmp_path):
    adapter = _fake_adapter(RequestRejectedError('boom', status=500), 'Second summary.')
    api = JournalAPI(config={'heading_template': ''}, project_root=tmp_path, adapter=adapter)

    summary = api.run(TRANSCRIPT, target_date=DAY)

    assert summary['summaries_written'] == 1
    assert summary['skipped'] == 1
    content = Path(summary['journal_path']).read_text(encoding='utf-8')
    assert content.startswith('Generated on ')


def test_run_for_date_reads_export_dir(tmp_path):
    export_dir = tmp_path / 'Autojournal' / '03_14'
    export_dir.mkdir(parents=True)
    (export_dir / 'Family Group.txt').write_text(
        'Mar 14, 2024 09:00:00 AM\nMe\nDinner at mine on Sunday, everyone welcome!\n',
        encoding='utf-8',
    )
    adapter = _fake_adapter('You invited the family to dinner.')
    api = JournalAPI(config={}, project_root=tmp_path, adapter=adapter)

    summary = api.run_for_date(DAY)

    assert summary['status'] == 'ok'
    content = Path(summary['journal_path']).read_text(encoding='utf-8')
    assert '### Family Group' in content


def test_run_for_date_without_export(tmp_path):
    api = JournalAPI(config={}, project_root=tmp_path, adapter=_fake_adapter())
    with pytest.raises(ValueError):
        api.run_for_date(DAY)


def test_export_command_targets_day_dir(tmp_path):
    api = JournalAPI(config={'imessage_exporter_path': '/usr/local/bin/imessage-exporter'},
                     project_root=tmp_path)
    cmd = api.export_command(DAY)
    assert cmd.startswith('/usr/local/bin/imessage-exporter -f txt -o ')
    assert str(tmp_path / 'Autojournal' / '03_14') in cmd
    assert cmd.endswith('-s 2024-03-14 -e 2024-03-15 -a macOS')


# ── HTTP ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def client(tmp_path):
    return TestClient(_build_app(project_root=tmp_path))


def test_health(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json()['status'] == 'ok'
    assert r.json()['contacts_loaded'] == 0


def test_lookup_unknown_contact(client):
    r = client.get('/contacts/lookup', params={'identifier': '+15551234567'})
    assert r.status_code == 404


def test_contacts_reload_and_lookup(client, tmp_path):
    _write_contacts(tmp_path)
    r = client.post('/contacts/reload', json={'path': 'Autojournal/contacts.csv'})
    assert r.status_code == 200
    assert r.json() == {'status': 'ok', 'contacts': 2}

    r = client.get('/contacts/lookup', params={'identifier': '(555) 123-4567'})
    assert r.json()['name'] == 'Alice'


def test_contacts_reload_errors(client):
    assert client.post('/contacts/reload').status_code == 400
    assert client.post('/contacts/reload', json={'path': 'missing.vcf'}).status_code == 404


def test_export_command_endpoint(client):
    r = client.get('/export-command', params={'date': '2024-03-14'})
    assert r.status_code == 200
    assert '-s 2024-03-14 -e 2024-03-15' in r.json()['command']
    assert client.get('/export-command', params={'date': 'soon'}).status_code == 400


def test_config_update_persists_and_masks_key(client, tmp_path):
    r = client.post('/config', json={'ollama_model': 'mistral', 'openai_api_key': 'sk-secret'})
    assert r.status_code == 200
    assert r.json()['config']['openai_api_key'] == '********'

    saved = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding='utf-8'))
    assert saved['ollama_model'] == 'mistral'
    assert client.get('/health').json()['llm'] == 'Ollama mistral'


def test_config_rejects_unknown_keys(client):
    assert client.post('/config', json={'db_path': 'x'}).status_code == 400


def test_journal_endpoint_empty_transcript(client):
    r = client.post('/journal', json={'transcript': 'nothing to see', 'date': '2024-03-14'})
    assert r.status_code == 200
    assert r.json()['status'] == 'empty'


def test_journal_endpoint_missing_export(client):
    r = client.post('/journal', json={'date': '2024-03-14'})
    assert r.status_code == 400


def test_run_export_reports_missing_exporter(tmp_path):
    api = JournalAPI(config={'imessage_exporter_path': str(tmp_path / 'missing')},
                     project_root=tmp_path)
    result = api.run_export(DAY)
    assert result.success is False
    assert 'not found' in result.error


def test_parse_uses_loaded_directory(tmp_path):
    _write_contacts(tmp_path)
    api = JournalAPI(config={}, project_root=tmp_path)
    api.load_contacts_automatically()
    assert [c.filename for c in api.parse(TRANSCRIPT)] == ['Alice', 'Bob']
