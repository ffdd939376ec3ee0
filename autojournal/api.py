"""
autojournal/api.py
─────────────────────────────────────────────────────────────────────────────
autojournal — pipeline facade and local HTTP API

TWO USAGE MODES:
  1. Importable class:
         from autojournal.api import JournalAPI
         api = JournalAPI(project_root=Path("~/notes").expanduser())
         api.reload_contacts()
         summary = api.run_for_date(date(2024, 3, 14))

  2. FastAPI HTTP server (for editor plugins / shortcuts via fetch()):
         python run_journal.py --api
         uvicorn autojournal.api:app --port 8766

ENDPOINTS:
  POST /journal            — segment → summarize → write journal; returns summary
  POST /contacts/reload    — reload the contact directory from disk
  GET  /contacts/lookup    — resolve one phone number / email
  GET  /export-command     — imessage-exporter command for a day
  GET  /config             — current config (API key masked)
  POST /config             — update and persist config
  GET  /health             — server status

CORS: localhost-only. The runner binds to 127.0.0.1.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from autojournal import __version__
from autojournal.config import (
    DEFAULT_CONFIG,
    auto_detect_contacts,
    load_config,
    resolve_path,
    save_config,
)
from autojournal.contacts.directory import ContactDirectory, ContactFormatError
from autojournal.exporters.imessage_exporter import (
    ExportResult,
    build_export_command,
    format_export_command,
    run_export,
)
from autojournal.journal.assembler import (
    assemble_journal,
    export_date_range,
    format_date,
    format_date_dir,
    generate_filename,
    parse_date,
    write_journal,
    yesterday,
)
from autojournal.llm.base import SummarizerAdapter
from autojournal.llm.factory import build_adapter
from autojournal.models.record import ConversationRecord
from autojournal.parsers.transcript_parser import build_combined_transcript, parse_conversations
from autojournal.summarizer import generate_summaries

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# IMPORTABLE CLASS
# ═══════════════════════════════════════════════════════════════════════════

class JournalAPI:
    """
    Owns one ContactDirectory and one summarizer backend and runs the
    journal pipeline against them.

    Usage:
        api = JournalAPI(project_root=Path("."))
        api.reload_contacts("Autojournal/contacts.vcf")
        conversations = api.parse(transcript_text)
        summary = api.run(transcript_text, target_date=date(2024, 3, 14))
    """

    def __init__(
        self,
        config:       Optional[Dict[str, Any]]    = None,
        project_root: Optional[Path]              = None,
        adapter:      Optional[SummarizerAdapter] = None,
    ):
        self.project_root = Path(project_root) if project_root else Path.cwd()
        if config is None:
            self.config = load_config(self.project_root)
        else:
            self.config = {**DEFAULT_CONFIG, **config}
        self.directory = ContactDirectory()
        self._adapter  = adapter

    # ── INTERNAL ──────────────────────────────────────────────────────────

    @property
    def adapter(self) -> SummarizerAdapter:
        if self._adapter is None:
            self._adapter = build_adapter(self.config)
        return self._adapter

    @property
    def output_dir(self) -> Path:
        return resolve_path(self.config.get("output_path") or ".", self.project_root)

    # ── CONTACTS ──────────────────────────────────────────────────────────

    def reload_contacts(self, path: Optional[str] = None) -> int:
        """
        Load the contact file (argument, else config contacts_path).
        Returns the number of distinct contact names.
        Raises ValueError if no path is configured, FileNotFoundError if the
        file is missing, ContactFormatError on unreadable contents.
        """
        value = path or self.config.get("contacts_path")
        if not value:
            raise ValueError("Contacts path not configured")

        contacts_file = resolve_path(str(value), self.project_root)
        if not contacts_file.is_file():
            raise FileNotFoundError(f"Contacts file not found: {contacts_file}")

        self.directory.load_file(contacts_file)
        count = len(self.directory.names)
        logger.info(f"Contacts loaded successfully: {count} contacts from {contacts_file.name}")
        return count

    def load_contacts_automatically(self) -> Optional[Path]:
        """
        Load contacts from config, else from contacts.vcf / contacts.csv in
        the output folder. Logs and continues on failure — transcripts are
        still processed, just without name replacement.
        """
        configured = self.config.get("contacts_path")
        if configured:
            candidate: Optional[Path] = resolve_path(configured, self.project_root)
        else:
            candidate = auto_detect_contacts(self.project_root, self.config.get("output_path", ""))

        if candidate is None or not candidate.is_file():
            logger.info("No contacts file found - proceeding without contact replacement")
            return None

        try:
            self.directory.load_file(candidate)
        except (OSError, ContactFormatError) as e:
            logger.warning(f"Error loading contacts automatically: {e}")
            return None

        logger.info(f"Contacts loaded from {candidate}")
        return candidate

    def lookup_contact(self, identifier: str) -> Optional[str]:
        return self.directory.lookup(identifier)

    def update_config(self, update: Dict[str, Any]) -> Path:
        """Merge and persist config. The backend is rebuilt on next use."""
        self.config.update(update)
        self._adapter = None
        return save_config(self.config, self.project_root)

    # ── PIPELINE ──────────────────────────────────────────────────────────

    def parse(self, text: str) -> List[ConversationRecord]:
        """Segment a combined transcript with the current directory."""
        return parse_conversations(text, self.directory)

    def run(
        self,
        text:        str,
        target_date: Optional[date]                        = None,
        progress_cb: Optional[Callable[[int, int], None]]  = None,
    ) -> Dict[str, Any]:
        """
        Full pipeline for one combined transcript:
          contacts → segment → summarize → assemble → write.

        Returns a summary dict. status is "empty" (nothing written) when no
        conversation survives segmentation.
        """
        target_date = target_date or date.today()

        if not len(self.directory):
            self.load_contacts_automatically()

        conversations = self.parse(text)
        if not conversations:
            logger.warning("No conversations found in the transcript")
            return {
                "status":              "empty",
                "date":                format_date(target_date),
                "conversations_found": 0,
                "summaries_written":   0,
                "skipped":             0,
                "journal_path":        None,
                "llm":                 None,
            }

        adapter   = self.adapter
        summaries = generate_summaries(conversations, adapter, progress_cb=progress_cb)

        content = assemble_journal(
            summaries,
            llm_info         = adapter.describe(),
            target_date      = target_date,
            heading_template = self.config.get("heading_template"),
        )
        filename = generate_filename(
            self.config.get("filename_template") or DEFAULT_CONFIG["filename_template"],
            target_date,
        )
        journal_path = write_journal(content, self.output_dir, filename)

        summary = {
            "status":              "ok",
            "date":                format_date(target_date),
            "conversations_found": len(conversations),
            "summaries_written":   len(summaries),
            "skipped":             len(conversations) - len(summaries),
            "journal_path":        str(journal_path),
            "llm":                 adapter.describe(),
        }
        logger.info(
            f"Journal run complete: {summary['summaries_written']}/"
            f"{summary['conversations_found']} conversations summarized"
        )
        return summary

    def export_dir_for(self, target_date: date) -> Path:
        return self.output_dir / format_date_dir(target_date)

    def run_for_date(
        self,
        target_date: date,
        progress_cb: Optional[Callable[[int, int], None]] = None,
    ) -> Dict[str, Any]:
        """Process the exporter output for target_date (<output_path>/<MM_DD>/)."""
        date_dir = format_date_dir(target_date)
        text = build_combined_transcript(self.export_dir_for(target_date), date_dir)
        return self.run(text, target_date=target_date, progress_cb=progress_cb)

    # ── EXPORTER ──────────────────────────────────────────────────────────

    def export_command(self, target_date: date) -> str:
        start, end = export_date_range(target_date)
        argv = build_export_command(
            self.config.get("imessage_exporter_path", ""),
            self.export_dir_for(target_date),
            start,
            end,
        )
        return format_export_command(argv)

    def run_export(self, target_date: date) -> ExportResult:
        start, end = export_date_range(target_date)
        return run_export(
            self.config.get("imessage_exporter_path", ""),
            self.export_dir_for(target_date),
            start,
            end,
        )


# ═══════════════════════════════════════════════════════════════════════════
# FASTAPI HTTP APP
# ═══════════════════════════════════════════════════════════════════════════

class JournalRequest(BaseModel):
    transcript: Optional[str] = None   # combined transcript; reads the export dir if empty
    date:       Optional[str] = None   # YYYY-MM-DD; yesterday if empty


class ContactsReloadRequest(BaseModel):
    path: Optional[str] = None         # overrides config contacts_path


def _masked(config: Dict[str, Any]) -> Dict[str, Any]:
    shown = dict(config)
    if shown.get("openai_api_key"):
        shown["openai_api_key"] = "********"
    return shown


def _build_app(project_root: Optional[Path] = None) -> FastAPI:
    """Build the FastAPI application around one JournalAPI instance."""
    _api = JournalAPI(project_root=project_root)

    _app = FastAPI(
        title       = "autojournal API",
        description = "Message transcripts → contact-resolved daily journal",
        version     = __version__,
        docs_url    = "/docs",
        redoc_url   = None,
    )

    _app.add_middleware(
        CORSMiddleware,
        allow_origins     = [
            "http://localhost",
            "http://localhost:8766",
            "http://127.0.0.1",
            "http://127.0.0.1:8766",
            "app://obsidian.md",
            "null",   # file:// origin
        ],
        allow_methods     = ["GET", "POST", "OPTIONS"],
        allow_headers     = ["Content-Type"],
        allow_credentials = False,
    )

    def _target_date(value: Optional[str]) -> date:
        try:
            return parse_date(value) if value else yesterday()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    # ── ENDPOINTS ───────────────────────────────────────────────────────

    @_app.post("/journal", summary="Build the journal for one day")
    def journal(req: JournalRequest):
        """
        Segment the transcript (or the export directory for the day),
        summarize each conversation and write the journal file.
        """
        target = _target_date(req.date)
        try:
            if req.transcript:
                return _api.run(req.transcript, target_date=target)
            return _api.run_for_date(target)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except Exception as exc:
            logger.error(f"Journal endpoint error: {exc}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Journal run failed: {exc}")

    @_app.post("/contacts/reload", summary="Reload contacts from disk")
    def reload_contacts(req: Optional[ContactsReloadRequest] = None):
        try:
            count = _api.reload_contacts(req.path if req else None)
        except FileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        except ValueError as exc:   # includes ContactFormatError
            raise HTTPException(status_code=400, detail=str(exc))
        return {"status": "ok", "contacts": count}

    @_app.get("/contacts/lookup", summary="Resolve a phone number or email")
    def lookup_contact(identifier: str = Query(..., min_length=1)):
        name = _api.lookup_contact(identifier)
        if name is None:
            raise HTTPException(status_code=404, detail="Contact not found")
        return {"identifier": identifier, "name": name}

    @_app.get("/export-command", summary="imessage-exporter command for a day")
    def export_command(date: Optional[str] = Query(None, description="YYYY-MM-DD")):
        target = _target_date(date)
        return {
            "date":       format_date(target),
            "export_dir": str(_api.export_dir_for(target)),
            "command":    _api.export_command(target),
        }

    @_app.get("/config", summary="Get config")
    def get_config():
        return {"config": _masked(_api.config)}

    @_app.post("/config", summary="Save config")
    def save_config_endpoint(update: Dict[str, Any] = Body(...)):
        unknown = sorted(set(update or {}) - set(DEFAULT_CONFIG))
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown config keys: {unknown}")
        _api.update_config(update or {})
        return {"status": "ok", "config": _masked(_api.config)}

    @_app.get("/health", summary="Health check")
    def health():
        return {
            "status":          "ok",
            "contacts_loaded": len(_api.directory.names),
            "llm":             _api.adapter.describe(),
            "version":         __version__,
        }

    return _app


# Module-level app instance — used by uvicorn autojournal.api:app
app = _build_app()
