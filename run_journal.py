#!/usr/bin/env python3
"""
run_journal.py — Fully automated autojournal pipeline
Uses autojournal_config.json. Run from project root.

  python run_journal.py                    # export + journal for yesterday
  python run_journal.py --date 2024-03-14  # a specific day
  python run_journal.py --skip-export      # journal from an existing export dir
  python run_journal.py --api              # start API server

Config is created on first run. Auto-detects contacts.vcf / contacts.csv
in the output folder if contacts_path is not set.
"""

import argparse
import sys
from pathlib import Path

def main():
    parser = argparse.ArgumentParser(description="autojournal — automated pipeline")
    parser.add_argument("--date", help="Journal day as YYYY-MM-DD (default: yesterday)")
    parser.add_argument("--skip-export", action="store_true", help="Use the existing export dir")
    parser.add_argument("--api", action="store_true", help="Start API server")
    args = parser.parse_args()

    root = Path(__file__).parent
    sys.path.insert(0, str(root))

    from autojournal.config import ensure_config

    ensure_config(root)

    if args.api:
        import uvicorn
        from autojournal.api import _build_app
        app = _build_app(project_root=root)
        print("Starting API at http://127.0.0.1:8766")
        uvicorn.run(app, host="127.0.0.1", port=8766, log_level="info")
        return

    from autojournal.api import JournalAPI
    from autojournal.journal.assembler import parse_date, yesterday

    try:
        target = parse_date(args.date) if args.date else yesterday()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    api = JournalAPI(project_root=root)
    api.load_contacts_automatically()

    if not args.skip_export:
        print(f"Exporting messages for {target}...")
        result = api.run_export(target)
        if not result.success:
            print(f"Export failed: {result.error or result.stderr}", file=sys.stderr)
            print(f"Run manually:\n  {api.export_command(target)}", file=sys.stderr)
            sys.exit(1)

    try:
        summary = api.run_for_date(target)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    if summary["status"] == "empty":
        print(f"No conversations found for {summary['date']}")
        return
    print(
        f"Done: {summary['summaries_written']}/{summary['conversations_found']} "
        f"conversations → {summary['journal_path']}"
    )

if __name__ == "__main__":
    main()
