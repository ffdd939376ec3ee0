"""
tests/test_rewriter.py
Phone/email replacement inside transcript text.
"""

from autojournal.contacts.directory import ContactDirectory
from autojournal.contacts.rewriter import (
    TOKEN_EMAIL,
    TOKEN_PHONE,
    TOKEN_PLAIN,
    ContactRewriter,
    rewrite_contacts,
    scan_tokens,
)


def test_bare_number_replaced(directory):
    assert rewrite_contacts('Call 5551234567 now', directory) == 'Call Alice now'


def test_all_phone_shapes_replaced(directory):
    text = '+15551234567 / +5551234567 / (555) 123-4567 / 5557654321'
    assert rewrite_contacts(text, directory) == 'Alice / Alice / Alice / Bob'


def test_email_replaced_case_insensitively(directory):
    assert rewrite_contacts('mail CAROL@example.com today', directory) == 'mail Carol today'


def test_unknown_identifiers_left_alone(directory):
    text = 'Ring 5550001111 or dave@example.com'
    assert rewrite_contacts(text, directory) == text


def test_digits_inside_words_not_treated_as_phone(directory):
    text = 'order abc5551234567 shipped'
    assert rewrite_contacts(text, directory) == text


def test_longer_digit_runs_not_truncated(directory):
    text = 'ref 55512345678 ok'
    assert rewrite_contacts(text, directory) == text


def test_substituted_name_is_not_rescanned():
    d = ContactDirectory()
    d.load_csv(
        'Phone Number/Email,Name\n'
        '+15551234567,"+15557654321"\n'
        '+15557654321,"Bob"\n'
    )
    assert rewrite_contacts('from 5551234567', d) == 'from +15557654321'


def test_transcript_sender_lines(directory):
    text = 'Mar 14, 2024 10:00:00 AM\n+15551234567\nLunch?\n\nMar 14, 2024 10:01:00 AM\nMe\nSure'
    out = ContactRewriter(directory).rewrite(text)
    assert '\nAlice\nLunch?' in out
    assert '+1555' not in out


def test_empty_text(directory):
    assert rewrite_contacts('', directory) == ''


def test_scan_tokens_partitions_text():
    text = 'Hi (555) 123-4567, see carol@example.com!'
    tokens = list(scan_tokens(text))
    assert ''.join(t.text for t in tokens) == text
    assert [t.kind for t in tokens] == [
        TOKEN_PLAIN, TOKEN_PHONE, TOKEN_PLAIN, TOKEN_EMAIL, TOKEN_PLAIN,
    ]
    phone = tokens[1]
    assert phone.text == '(555) 123-4567'
    assert phone.start == 3


def test_numbers_after_punctuation_replaced(directory):
    assert rewrite_contacts('Bob-5551234567', directory) == 'Bob-Alice'
    assert rewrite_contacts('call me...5551234567', directory) == 'call me...Alice'
    assert rewrite_contacts('x.+15551234567', directory) == 'x.Alice'
    assert rewrite_contacts('tel:(555) 123-4567', directory) == 'tel:Alice'


def test_digits_after_underscore_not_treated_as_phone(directory):
    text = 'id_5551234567'
    assert rewrite_contacts(text, directory) == text


def test_email_inside_longer_local_part_not_replaced(directory):
    text = 'x.carol@example.com'
    assert rewrite_contacts(text, directory) == text
