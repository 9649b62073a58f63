"""ZIP export of the project buffers and of packaged lessons."""

from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Mapping

from litelab_engine.buffer import BufferKind, Snapshot
from litelab_engine.runtime import telemetry

PROJECT_ARCHIVE_NAME = "project-source.zip"
MISSING_BODY = "<p>No body available</p>"


def build_archive(files: Mapping[str, str | bytes]) -> bytes:
    """Return a deflated ZIP containing ``files`` in insertion order."""

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def export_project(snapshot: Snapshot) -> bytes:
    """``index.html``, ``styles.css`` and ``app.js`` from the three buffers."""

    files = {kind.filename: snapshot.get(kind) for kind in BufferKind}
    with telemetry.span("archive::project", component="archive"):
        return build_archive(files)


def lesson_archive_name(question: Mapping[str, Any]) -> str:
    return f"lesson-{question.get('question_id')}.zip"


def export_lesson_archive(question: Mapping[str, Any]) -> bytes:
    manifest = {
        "id": question.get("question_id"),
        "title": question.get("title"),
        "link": question.get("link"),
    }
    files = {
        "lesson.json": json.dumps(manifest, indent=2),
        "question.html": question.get("body") or MISSING_BODY,
    }
    with telemetry.span("archive::lesson", component="archive"):
        return build_archive(files)


__all__ = [
    "build_archive",
    "export_project",
    "export_lesson_archive",
    "lesson_archive_name",
    "PROJECT_ARCHIVE_NAME",
]
