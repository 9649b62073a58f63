"""Template generator that turns a title and blurb into a starter snippet."""

from __future__ import annotations

import re

from .models import Snippet, SnippetKind, new_id
from .normalize import normalize


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower())


def _markup(title: str, body: str, include_button: bool) -> str:
    text = (
        f'<section class="{slugify(title)}">\n  <h2>{title}</h2>\n  <p>{body}</p>\n'
    )
    if include_button:
        text += '  <a class="btn" href="#">Action</a>\n'
    return text + "</section>\n"


def _style(title: str, responsive: bool) -> str:
    slug = slugify(title)
    text = (
        f".{slug} {{\n  padding: 16px;\n  border-radius: 8px;\n"
        "  background: linear-gradient(90deg,#fff,#f3f4f6);\n}\n"
    )
    if responsive:
        text += f"@media(max-width:768px){{ .{slug} {{ padding:12px }} }}\n"
    return text


def _script(title: str, body: str) -> str:
    return (
        f"const el = document.querySelector('.{slugify(title)}');\n"
        f"if (el) el.innerHTML = `<h2>{title}</h2><p>{body}</p>`;\n"
    )


def _page(title: str, body: str) -> str:
    return (
        "<!doctype html>\n<html>\n<head><meta charset=\"utf-8\">"
        '<meta name="viewport" content="width=device-width,initial-scale=1">'
        f"</head>\n<body>\n<section>\n  <h2>{title}</h2>\n  <p>{body}</p>\n"
        "</section>\n</body>\n</html>\n"
    )


def generate_snippet(
    kind: SnippetKind | str,
    title: str = "",
    body: str = "",
    *,
    responsive: bool = True,
    include_button: bool = True,
) -> Snippet:
    kind = SnippetKind.parse(kind)
    title = title or "Component"
    body = body or "Description..."
    if kind is SnippetKind.MARKUP:
        generated = _markup(title, body, include_button)
    elif kind is SnippetKind.STYLE:
        generated = _style(title, responsive)
    elif kind is SnippetKind.SCRIPT:
        generated = _script(title, body)
    else:
        generated = _page(title, body)
    return Snippet(
        id=new_id(),
        label=f"{kind.json_key.upper()}: {title}",
        body=normalize(generated, kind),
        kind=kind,
        description="Generated by Smart Assistant",
    )


__all__ = ["generate_snippet", "slugify"]
