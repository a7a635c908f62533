"""
Journal entry HTML -> PDF export rendered with WeasyPrint.

Each export builds a plain-dict context from the entries (in the caller's app
context), renders it through a Jinja2 template and hands the HTML to a backend
callable ``backend(html, out_path)``. The default backend is WeasyPrint; tests
pass a fake one.

The backend always writes to a temporary file next to the destination. The
file is moved into place with ``os.replace`` only once rendering has finished
and the export was not cancelled, so the destination is either complete or
absent.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from flask import current_app
from jinja2 import BaseLoader, Environment, select_autoescape

from moodjournal.core.errors import ExportCancelled, ExportFailed
from moodjournal.core.utils.markup import markup_to_text, split_paragraphs
from moodjournal.domains.journal.models import JournalEntry, mood_color

logger = logging.getLogger(__name__)

ExportBackend = Callable[[str, Path], Any]

DEFAULT_FILENAME = "journal_entry"
FILENAME_MAX_LENGTH = 50
ALL_ENTRIES_PREFIX = "AllJournalEntries"
ALL_ENTRIES_CONTEXT = "all journal entries"

_INVALID_FILENAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')

ENTRY_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ document_title }}</title>
  <style>
    @page {
      size: A4;
      margin: 2cm;
      @top-left { content: "{{ header }}"; font-size: {{ '14pt' if batch else '10pt' }}; font-weight: 600; color: #9e9e9e; }
      @bottom-center {
        {% if batch %}
        content: counter(page) " / " counter(pages);
        {% else %}
        content: "Generated on {{ generated_at }}";
        {% endif %}
        font-size: 9pt; color: #9e9e9e;
      }
    }
    html, body { font-family: Arial, Helvetica, sans-serif; font-size: 12pt; color: #111; }
    .entry { page-break-inside: auto; }
    .entry h1 { font-size: 24pt; font-weight: 600; margin: 0 0 10px 0; }
    .batch .entry h1 { font-size: 18pt; }
    .meta-row { display: flex; justify-content: space-between; gap: 8px; font-size: 12pt; }
    .batch .meta-row { font-size: 10pt; }
    .meta-row .mood { text-align: right; }
    .rule { border: 0; border-top: 1px solid #e0e0e0; margin: 10px 0; }
    .category { font-style: italic; font-size: 11pt; }
    .tags { font-size: 11pt; }
    .tags .names { color: #1e88e5; }
    .body { margin-top: 10px; line-height: 1.5; }
    .batch .body { font-size: 11pt; line-height: 1.4; }
    .body p { margin: 0 0 12px 0; }
    .secondary { margin-top: 15px; font-size: 10pt; color: #9e9e9e; }
    .separator { border: 0; border-top: 2px solid #bdbdbd; margin: 20px 0; }
  </style>
</head>
<body class="{{ 'batch' if batch else 'single' }}">
  {% for e in entries %}
  <section class="entry">
    <h1>{{ e.title }}</h1>
    <div class="meta-row">
      <div>Date: {{ e.date_label }}</div>
      <div class="mood" style="color: {{ e.mood_color }};">Mood: {{ e.mood }}</div>
    </div>
    {% if not batch %}<hr class="rule">{% endif %}
    {% if e.category or batch %}
    <div class="meta-row">
      <div class="category">Category: {{ e.category }}</div>
      {% if batch and e.tags %}<div class="tags"><span class="names">Tags: {{ e.tags | join(', ') }}</span></div>{% endif %}
    </div>
    {% endif %}
    {% if not batch and e.tags %}
    <div class="tags">Tags: <span class="names">{{ e.tags | join(', ') }}</span></div>
    {% endif %}
    <div class="body">
      {% for paragraph in e.paragraphs %}
      <p>{% for line in paragraph %}{{ line }}{% if not loop.last %}<br>{% endif %}{% endfor %}</p>
      {% endfor %}
    </div>
    {% if not batch and e.secondary_moods %}
    <div class="secondary">Secondary Moods: {{ e.secondary_moods | join(', ') }}</div>
    {% endif %}
  </section>
  {% if batch %}<hr class="separator">{% endif %}
  {% endfor %}
</body>
</html>
"""


def _format_day(value) -> str:
    return value.strftime("%B %d, %Y")


def render_html(context: Dict[str, Any], template: str = ENTRY_TEMPLATE) -> str:
    env = Environment(loader=BaseLoader(), autoescape=select_autoescape())
    tmpl = env.from_string(template)
    return tmpl.render(**context)


def render_with_weasyprint(html: str, out_pdf_path: Path) -> int:
    try:
        from weasyprint import HTML
    except Exception as e:
        raise RuntimeError(
            "WeasyPrint is not installed. Install with: pip install weasyprint\n"
            "Docs: https://doc.courtbouillon.org/weasyprint/stable/first_steps.html#installation"
        ) from e
    doc = HTML(string=html, base_url=str(Path.cwd())).render()
    out_pdf_path.parent.mkdir(parents=True, exist_ok=True)
    doc.write_pdf(target=str(out_pdf_path))
    return len(getattr(doc, "pages", []) or [])


def sanitize_filename(title: Optional[str]) -> str:
    """Filesystem-safe base name derived from an entry title."""
    parts = [part for part in _INVALID_FILENAME_RE.split(title or "") if part]
    sanitized = "_".join(parts).rstrip(".")
    sanitized = sanitized[:FILENAME_MAX_LENGTH]
    return sanitized if sanitized.strip() else DEFAULT_FILENAME


def entry_context(entry: JournalEntry) -> Dict[str, Any]:
    """Snapshot an entry into template-ready plain values."""
    return {
        "title": entry.title or "",
        "entry_date": entry.entry_date,
        "date_label": _format_day(entry.entry_date),
        "mood": entry.primary_mood.value,
        "mood_color": mood_color(entry.primary_mood),
        "category": entry.category or "",
        "tags": list(entry.tag_names),
        "paragraphs": split_paragraphs(markup_to_text(entry.description)),
        "secondary_moods": [mood.value for mood in entry.secondary_moods],
    }


def _timestamp(now: datetime) -> str:
    return now.strftime("%Y%m%d_%H%M%S")


def _resolve_output_dir(output_dir) -> Path:
    if output_dir is None:
        output_dir = current_app.config["EXPORT_DIR"]
    return Path(output_dir).expanduser()


def _check_cancelled(cancel_event: Optional[threading.Event], context: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ExportCancelled(context)


def _write_document(
    html: str,
    destination: Path,
    backend: ExportBackend,
    cancel_event: Optional[threading.Event],
    context: str,
) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(destination.parent), prefix=".export-", suffix=".part")
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        _check_cancelled(cancel_event, context)
        backend(html, tmp_path)
        _check_cancelled(cancel_event, context)
        os.replace(tmp_path, destination)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    return destination


def _render_entry(
    context: Dict[str, Any],
    output_dir: Path,
    backend: Optional[ExportBackend],
    cancel_event: Optional[threading.Event],
) -> str:
    label = f"journal entry '{context['title']}'"
    try:
        now = datetime.now()
        destination = output_dir / f"{sanitize_filename(context['title'])}.pdf"
        if destination.exists():
            destination = output_dir / f"{sanitize_filename(context['title'])}_{_timestamp(now)}.pdf"
        html = render_html(
            {
                "document_title": context["title"] or "Journal Entry",
                "header": f"Journal Entry - {context['date_label']}",
                "generated_at": now.strftime("%B %d, %Y %H:%M"),
                "batch": False,
                "entries": [context],
            }
        )
        _write_document(html, destination, backend or render_with_weasyprint, cancel_event, label)
    except ExportCancelled:
        logger.info("Export of %s cancelled", label)
        raise
    except Exception as exc:
        logger.exception("Export of %s failed", label)
        raise ExportFailed(label, exc) from exc
    logger.info("Exported %s to %s", label, destination)
    return str(destination)


def _render_all(
    contexts: List[Dict[str, Any]],
    output_dir: Path,
    backend: Optional[ExportBackend],
    cancel_event: Optional[threading.Event],
) -> str:
    try:
        now = datetime.now()
        destination = output_dir / f"{ALL_ENTRIES_PREFIX}_{_timestamp(now)}.pdf"
        ordered = sorted(contexts, key=lambda ctx: ctx["entry_date"], reverse=True)
        html = render_html(
            {
                "document_title": "My Journal Entries",
                "header": "My Journal Entries",
                "generated_at": now.strftime("%B %d, %Y %H:%M"),
                "batch": True,
                "entries": ordered,
            }
        )
        _write_document(html, destination, backend or render_with_weasyprint, cancel_event, ALL_ENTRIES_CONTEXT)
    except ExportCancelled:
        logger.info("Export of %s cancelled", ALL_ENTRIES_CONTEXT)
        raise
    except Exception as exc:
        logger.exception("Export of %s failed", ALL_ENTRIES_CONTEXT)
        raise ExportFailed(ALL_ENTRIES_CONTEXT, exc) from exc
    logger.info("Exported %d entries to %s", len(ordered), destination)
    return str(destination)


def export_entry(
    entry: JournalEntry,
    output_dir=None,
    backend: Optional[ExportBackend] = None,
    cancel_event: Optional[threading.Event] = None,
) -> str:
    """Render one entry to ``<sanitized title>.pdf`` and return the written path."""
    return _render_entry(entry_context(entry), _resolve_output_dir(output_dir), backend, cancel_event)


def export_all(
    entries: Iterable[JournalEntry],
    output_dir=None,
    backend: Optional[ExportBackend] = None,
    cancel_event: Optional[threading.Event] = None,
) -> str:
    """Render every entry, newest first, into one paginated document."""
    contexts = [entry_context(entry) for entry in entries]
    return _render_all(contexts, _resolve_output_dir(output_dir), backend, cancel_event)


# ---------------------------------------------------------------------------
# Background jobs
# ---------------------------------------------------------------------------

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            workers = int(current_app.config.get("EXPORT_WORKERS", 1) or 1)
            _executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="export")
        return _executor


def shutdown_export_workers(wait: bool = True) -> None:
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=wait)
            _executor = None


class ExportJob:
    """Handle on an export running on the export worker pool."""

    def __init__(self, future: Future, cancel_event: threading.Event, context: str):
        self._future = future
        self._cancel_event = cancel_event
        self.context = context

    def cancel(self) -> None:
        self._cancel_event.set()
        self._future.cancel()

    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> str:
        """Written file path; raises ExportCancelled or ExportFailed."""
        try:
            return self._future.result(timeout)
        except CancelledError as exc:
            raise ExportCancelled(self.context) from exc


def submit_export_entry(
    entry: JournalEntry,
    output_dir=None,
    backend: Optional[ExportBackend] = None,
) -> ExportJob:
    context = entry_context(entry)
    target_dir = _resolve_output_dir(output_dir)
    cancel_event = threading.Event()
    future = _get_executor().submit(_render_entry, context, target_dir, backend, cancel_event)
    return ExportJob(future, cancel_event, f"journal entry '{context['title']}'")


def submit_export_all(
    entries: Iterable[JournalEntry],
    output_dir=None,
    backend: Optional[ExportBackend] = None,
) -> ExportJob:
    contexts = [entry_context(entry) for entry in entries]
    target_dir = _resolve_output_dir(output_dir)
    cancel_event = threading.Event()
    future = _get_executor().submit(_render_all, contexts, target_dir, backend, cancel_event)
    return ExportJob(future, cancel_event, ALL_ENTRIES_CONTEXT)
