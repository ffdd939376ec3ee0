"""
conftest.py
Shared fixtures. Lives at the project root so `autojournal` is importable
without an editable install.
"""

import pytest

from autojournal.contacts.directory import ContactDirectory


SAMPLE_CONTACTS_CSV = (
    'Phone Number/Email,Name\n'
    '+15551234567,"Alice"\n'
    '+15557654321,"Bob"\n'
    'carol@example.com,"Carol"\n'
)


@pytest.fixture
def directory():
    d = ContactDirectory()
    d.load_csv(SAMPLE_CONTACTS_CSV)
    return d
