"""
autojournal/cli.py
Command-line interface for autojournal.

USAGE:
  python -m autojournal.cli                              # yesterday's export dir
  python -m autojournal.cli --date 2024-03-14
  python -m autojournal.cli --transcript converted_messages.txt --date 2024-03-14
  python -m autojournal.cli --export-command --date 2024-03-14
  python -m autojournal.cli --check-exporter
  python -m autojournal.cli --list-models

EXAMPLES:
  # Export with imessage-exporter, then summarize, in one go
  python -m autojournal.cli --run-export --date 2024-03-14

  # Use OpenAI instead of a local Ollama model
  OPENAI_API_KEY=sk-... python -m autojournal.cli --openai --model gpt-4o-mini
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from autojournal.api import JournalAPI
from autojournal.config import ensure_config
from autojournal.contacts.directory import ContactFormatError
from autojournal.exporters.imessage_exporter import check_exporter
from autojournal.journal.assembler import format_date, parse_date, yesterday
from autojournal.parsers.encoding import read_text

logger = logging.getLogger(__name__)

# ANSI colors
GREEN  = '\033[92m'
YELLOW = '\033[93m'
RED    = '\033[91m'
CYAN   = '\033[96m'
RESET  = '\033[0m'
BOLD   = '\033[1m'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'autojournal',
        description = 'autojournal — summarize a day of text messages into a journal entry',
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """
PRIVACY NOTE:
  With Ollama (default) all processing is local.
  With --openai, conversation text is sent to the OpenAI API.
        """
    )

    parser.add_argument(
        '--date', '-d',
        default = None,
        help    = 'Journal day as YYYY-MM-DD (default: yesterday)',
    )
    parser.add_argument(
        '--transcript', '-t',
        type    = Path,
        default = None,
        help    = 'Process an existing combined transcript file instead of the export directory',
    )
    parser.add_argument(
        '--contacts', '-c',
        default = None,
        help    = 'Contact file (.vcf or .csv); overrides contacts_path in config',
    )
    parser.add_argument(
        '--output-dir', '-o',
        default = None,
        help    = 'Journal/export folder; overrides output_path in config',
    )
    parser.add_argument(
        '--export-command',
        action  = 'store_true',
        help    = 'Print the imessage-exporter command for --date and exit',
    )
    parser.add_argument(
        '--check-exporter',
        action  = 'store_true',
        help    = 'Check that imessage-exporter is installed and exit',
    )
    parser.add_argument(
        '--run-export',
        action  = 'store_true',
        help    = 'Run imessage-exporter for --date before processing',
    )
    parser.add_argument(
        '--openai',
        action  = 'store_true',
        help    = 'Summarize with OpenAI instead of Ollama',
    )
    parser.add_argument(
        '--model', '-m',
        default = None,
        help    = 'Model name for the selected backend',
    )
    parser.add_argument(
        '--list-models',
        action  = 'store_true',
        help    = 'List locally available Ollama models and exit',
    )
    parser.add_argument(
        '--config-root',
        type    = Path,
        default = Path.cwd(),
        help    = 'Directory holding autojournal_config.json (default: current directory)',
    )
    parser.add_argument(
        '--verbose', '-v',
        action  = 'store_true',
        help    = 'Enable debug logging',
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level   = log_level,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )

    # ── CONFIG ───────────────────────────────────────────────
    config = ensure_config(args.config_root)
    if args.output_dir:
        config['output_path'] = args.output_dir
    if args.openai:
        config['use_openai'] = True
    if args.model:
        config['openai_model' if config.get('use_openai') else 'ollama_model'] = args.model

    api = JournalAPI(config=config, project_root=args.config_root)

    # ── LIST MODELS ──────────────────────────────────────────
    if args.list_models:
        from autojournal.llm.ollama_adapter import OllamaAdapter
        adapter = OllamaAdapter(host=config['ollama_url'])
        models  = adapter.list_available_models()
        if models:
            _print(f"\n{BOLD}Available Ollama models:{RESET}")
            for m in models:
                _print(f"  • {m}")
        else:
            _print(f"{YELLOW}No models found. Is Ollama running?{RESET}")
        sys.exit(0)

    # ── EXPORTER CHECK ───────────────────────────────────────
    if args.check_exporter:
        status = check_exporter(config['imessage_exporter_path'])
        if status.installed:
            _ok(f"imessage-exporter {status.version} at {status.path}")
            if status.error:
                _print(f"  {YELLOW}⚠ {status.error}; update imessage_exporter_path in config{RESET}")
            sys.exit(0)
        _print(f"{RED}✗ {status.error}{RESET}")
        _print("  Install it with: brew install imessage-exporter")
        sys.exit(1)

    try:
        target_date = parse_date(args.date) if args.date else yesterday()
    except ValueError as e:
        _print(f"{RED}Error: {e}{RESET}")
        sys.exit(1)

    # ── EXPORT COMMAND ───────────────────────────────────────
    if args.export_command:
        _print(api.export_command(target_date))
        sys.exit(0)

    _print(f"\n{BOLD}{CYAN}autojournal{RESET}")
    _print(f"Journal date     : {CYAN}{format_date(target_date)}{RESET}")
    _print(f"Output folder    : {CYAN}{api.output_dir}{RESET}")
    _print(f"Summarizer       : {CYAN}{api.adapter.describe()}{RESET}")
    _print("")

    # ── CONTACTS ─────────────────────────────────────────────
    _step("Loading contacts...")
    if args.contacts:
        try:
            count = api.reload_contacts(args.contacts)
        except (OSError, ContactFormatError) as e:
            _print(f"{RED}Error: failed to load contacts: {e}{RESET}")
            sys.exit(1)
        _ok(f"{count} contacts loaded")
    else:
        loaded = api.load_contacts_automatically()
        if loaded:
            _ok(f"{len(api.directory.names)} contacts loaded from {loaded}")
        else:
            _print(f"  {YELLOW}⚠ No contacts file — numbers will stay as-is{RESET}")

    # ── EXPORT ───────────────────────────────────────────────
    if args.run_export and not args.transcript:
        _step("Running imessage-exporter...")
        t0     = time.time()
        result = api.run_export(target_date)
        if not result.success:
            _print(f"{RED}Export failed: {result.error or result.stderr}{RESET}")
            sys.exit(1)
        _ok(f"Export finished in {_elapsed(t0)}")

    # ── TRANSCRIPT ───────────────────────────────────────────
    try:
        if args.transcript:
            text = read_text(args.transcript)
        else:
            from autojournal.journal.assembler import format_date_dir
            from autojournal.parsers.transcript_parser import build_combined_transcript
            text = build_combined_transcript(
                api.export_dir_for(target_date),
                format_date_dir(target_date),
            )
    except (OSError, ValueError) as e:
        _print(f"{RED}Error: {e}{RESET}")
        _print("Run the export first:")
        _print(f"  {api.export_command(target_date)}")
        sys.exit(1)

    # ── SUMMARIZE ────────────────────────────────────────────
    if not api.adapter.is_available():
        _print(
            f"\n{YELLOW}⚠ Summarizer unavailable ({api.adapter.describe()}).{RESET}\n"
            f"  Start Ollama and pull the model, or configure an OpenAI key.\n"
        )
        sys.exit(1)

    _step("Generating summaries...")
    t0 = time.time()

    def progress(current, total):
        pct = int((current / total) * 40)
        bar = '█' * pct + '░' * (40 - pct)
        sys.stdout.write(f"\r  [{bar}] {current}/{total}")
        sys.stdout.flush()

    summary = api.run(text, target_date=target_date, progress_cb=progress)
    sys.stdout.write('\n')

    if summary['status'] == 'empty':
        _print(f"\n{YELLOW}No conversations found for {summary['date']}.{RESET}")
        sys.exit(0)

    _ok(f"{summary['summaries_written']} summaries in {_elapsed(t0)}")

    _print(f"\n{BOLD}{GREEN}✓ Complete{RESET}")
    _print(f"  Conversations : {summary['conversations_found']}")
    _print(f"  Summarized    : {summary['summaries_written']}")
    if summary['skipped']:
        _print(f"  {YELLOW}Skipped       : {summary['skipped']} (see log){RESET}")
    _print(f"  Journal       : {summary['journal_path']}\n")


# ── PRINT HELPERS ────────────────────────────────────────────

def _step(msg):  _print(f"  {CYAN}→{RESET} {msg}")
def _ok(msg):    _print(f"  {GREEN}✓{RESET} {msg}")
def _print(msg): print(msg)

def _elapsed(t0: float) -> str:
    s = time.time() - t0
    return f"{s:.1f}s" if s < 60 else f"{int(s//60)}m {int(s%60)}s"


if __name__ == '__main__':
    main()
