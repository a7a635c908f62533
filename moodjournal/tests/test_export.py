"""Export renderer tests with a fake backend in place of WeasyPrint."""

from __future__ import annotations

import threading
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

from moodjournal.core.errors import ExportCancelled, ExportFailed
from moodjournal.domains.journal.models import Mood
from moodjournal.domains.journal.services import export_service, journal_service
from moodjournal.domains.journal.services.export_service import sanitize_filename


class FakeBackend:
    """Records rendered HTML and writes a stub PDF."""

    def __init__(self):
        self.html = []

    def __call__(self, html: str, out_path: Path) -> int:
        self.html.append(html)
        Path(out_path).write_bytes(b"%PDF-1.4 fake")
        return 1


def _failing_backend(html, out_path):
    Path(out_path).write_bytes(b"%PDF-1.4 partial")
    raise RuntimeError("renderer exploded")


@pytest.fixture
def entry(app):
    return journal_service.create_entry(
        title='Trip: "Lisbon"',
        description="<p>Tram 28 &amp; pastries.</p><p>Late walk<br>by the river.</p>",
        primary_mood=Mood.EXCITED,
        category="Travel",
        secondary_mood_1=Mood.GRATEFUL,
        tag_names=["Travel", "Vacation"],
        entry_date=date(2026, 6, 2),
    )


def _files(directory: Path):
    return sorted(p.name for p in directory.iterdir()) if directory.exists() else []


# ==================== Filename Tests ====================


@pytest.mark.unit
def test_sanitize_filename():
    assert sanitize_filename("a/b") == "a_b"
    assert sanitize_filename("Trip...") == "Trip"
    assert sanitize_filename("x" * 80) == "x" * 50
    assert sanitize_filename("") == "journal_entry"
    assert sanitize_filename("???") == "journal_entry"
    assert sanitize_filename(None) == "journal_entry"


# ==================== Single Entry Tests ====================


def test_export_entry_writes_pdf_to_export_dir(app, entry):
    backend = FakeBackend()
    path = Path(export_service.export_entry(entry, backend=backend))

    export_dir = Path(app.config["EXPORT_DIR"])
    assert path.parent == export_dir
    assert path.name == "Trip_ _Lisbon.pdf"
    assert path.read_bytes().startswith(b"%PDF")
    assert _files(export_dir) == [path.name]


def test_export_entry_renders_expected_content(app, entry):
    backend = FakeBackend()
    export_service.export_entry(entry, backend=backend)
    html = backend.html[0]

    assert "Journal Entry - June 02, 2026" in html
    assert "Trip: &#34;Lisbon&#34;" in html
    assert "Mood: Excited" in html
    assert "Category: Travel" in html
    assert "Travel, Vacation" in html
    assert "Tram 28 &amp; pastries." in html
    assert "Late walk<br>by the river." in html
    assert "Secondary Moods: Grateful" in html
    assert "Generated on" in html


def test_export_entry_collision_appends_timestamp(app, entry, tmp_path):
    out = tmp_path / "out"
    first = Path(export_service.export_entry(entry, output_dir=out, backend=FakeBackend()))
    second = Path(export_service.export_entry(entry, output_dir=out, backend=FakeBackend()))

    assert first != second
    assert second.name.startswith("Trip_ _Lisbon_")
    assert len(second.stem) == len("Trip_ _Lisbon") + len("_20260602_120000")
    assert len(_files(out)) == 2


def test_export_entry_failure_leaves_no_file(app, entry, tmp_path):
    """A failed render raises ExportFailed and writes nothing."""
    out = tmp_path / "out"
    with pytest.raises(ExportFailed) as excinfo:
        export_service.export_entry(entry, output_dir=out, backend=_failing_backend)

    assert "Lisbon" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, RuntimeError)
    assert _files(out) == []


def test_export_entry_cancelled_before_start(app, entry, tmp_path):
    out = tmp_path / "out"
    cancel = threading.Event()
    cancel.set()
    backend = FakeBackend()

    with pytest.raises(ExportCancelled):
        export_service.export_entry(entry, output_dir=out, backend=backend, cancel_event=cancel)
    assert backend.html == []
    assert _files(out) == []


def test_export_uses_weasyprint_by_default(app, entry, tmp_path):
    with patch("moodjournal.domains.journal.services.export_service.render_with_weasyprint") as mock_render:
        path = export_service.export_entry(entry, output_dir=tmp_path)
    mock_render.assert_called_once()
    assert Path(path).name == "Trip_ _Lisbon.pdf"


# ==================== Export All Tests ====================


def test_export_all_orders_newest_first_with_page_numbers(app, entry, tmp_path):
    journal_service.create_entry(
        title="Older day",
        description="<p>Before the trip.</p>",
        primary_mood=Mood.CALM,
        category="",
        entry_date=date(2026, 5, 30),
    )
    backend = FakeBackend()
    older_first = sorted(journal_service.get_all_entries(), key=lambda e: e.entry_date)

    path = Path(export_service.export_all(older_first, output_dir=tmp_path, backend=backend))

    assert path.name.startswith("AllJournalEntries_") and path.suffix == ".pdf"
    html = backend.html[0]
    assert "My Journal Entries" in html
    assert "counter(page)" in html and "counter(pages)" in html
    assert html.index("Lisbon") < html.index("Older day")


def test_export_all_failure_wraps_error(app, entry, tmp_path):
    with pytest.raises(ExportFailed) as excinfo:
        export_service.export_all([entry], output_dir=tmp_path, backend=_failing_backend)
    assert excinfo.value.context == "all journal entries"
    assert list(tmp_path.glob("*.pdf")) == []


# ==================== Background Job Tests ====================


def test_export_job_completes(app, entry, tmp_path):
    job = export_service.submit_export_entry(entry, output_dir=tmp_path, backend=FakeBackend())
    path = job.result(timeout=10)
    assert job.done()
    assert Path(path).exists()


def test_cancelled_export_job_leaves_no_file(app, entry, tmp_path):
    """Cancelling an in-flight export leaves nothing at the destination."""
    out = tmp_path / "out"
    started = threading.Event()
    release = threading.Event()

    def slow_backend(html, out_path):
        started.set()
        release.wait(10)
        Path(out_path).write_bytes(b"%PDF-1.4 late")

    job = export_service.submit_export_all([entry], output_dir=out, backend=slow_backend)
    assert started.wait(10)
    job.cancel()
    release.set()

    with pytest.raises(ExportCancelled):
        job.result(timeout=10)
    assert job.cancelled()
    assert _files(out) == []
