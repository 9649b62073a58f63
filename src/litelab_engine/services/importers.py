"""Turn user supplied files into project snapshots.

Every importer is pure: it returns a new ``Snapshot`` and never touches a
session. Callers hand the result to ``EditingSession.load_project``.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Mapping, Optional

from litelab_engine.buffer import EMPTY_SNAPSHOT, BufferKind, Snapshot
from litelab_engine.errors import ImportFormatError

_STYLE_RE = re.compile(r"<style[^>]*>(.*?)</style>", re.IGNORECASE | re.DOTALL)
_SCRIPT_RE = re.compile(r"<script[^>]*>(.*?)</script>", re.IGNORECASE | re.DOTALL)
_BODY_RE = re.compile(r"<body[^>]*>(.*?)</body>", re.IGNORECASE | re.DOTALL)


def read_text_file(path: Path | str) -> str:
    """Read a picked file as UTF-8; binary or other encodings are ImportFormatError."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise ImportFormatError("File is not UTF-8 text") from exc


def import_markup(text: str, current: Optional[Snapshot] = None) -> Snapshot:
    """Split a full HTML page into buffers.

    The first inline ``<style>`` and ``<script>`` replace the style and
    script buffers; the ``<body>`` contents (or the whole text) become the
    markup buffer.
    """

    base = current or EMPTY_SNAPSHOT
    style = _STYLE_RE.search(text)
    script = _SCRIPT_RE.search(text)
    body = _BODY_RE.search(text)
    return Snapshot(
        markup=body.group(1).strip() if body else text,
        style=style.group(1) if style else base.style,
        script=script.group(1) if script else base.script,
    )


def import_style(text: str, current: Optional[Snapshot] = None) -> Snapshot:
    return (current or EMPTY_SNAPSHOT).replace(BufferKind.STYLE, text)


def import_script(text: str, current: Optional[Snapshot] = None) -> Snapshot:
    return (current or EMPTY_SNAPSHOT).replace(BufferKind.SCRIPT, text)


def _has_code(data: Mapping[str, Any]) -> bool:
    return any(data.get(key) for key in ("html", "css", "js"))


def import_project_json(text: str) -> Snapshot:
    """Accept ``{"code": {...}}`` or a flat ``{"html", "css", "js"}`` object."""

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImportFormatError(f"Invalid JSON: {exc.msg}") from exc
    if not isinstance(parsed, dict):
        raise ImportFormatError("Invalid JSON shape")

    code = parsed.get("code")
    if isinstance(code, Mapping) and code:
        return Snapshot.from_json(code)
    if _has_code(parsed):
        return Snapshot.from_json(parsed)
    raise ImportFormatError("Invalid JSON shape")


__all__ = [
    "import_markup",
    "import_style",
    "import_script",
    "import_project_json",
    "read_text_file",
]
