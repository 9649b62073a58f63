"""Beginner-friendly clean-up applied to markup snippets before insertion."""

from __future__ import annotations

import re

from .models import SnippetKind

VOID_TAGS: tuple[str, ...] = ("img", "input", "br", "hr", "meta", "link")

_OUTERMOST = re.compile(r"^<([a-z0-9-]+)(?:\s|/|>)", re.IGNORECASE)


def _self_close(tag: str, text: str) -> str:
    text = re.sub(rf"</{tag}\s*>", "", text, flags=re.IGNORECASE)
    return re.sub(
        rf"<{tag}\b([^>]*?)\s*/?>",
        lambda match: f"<{tag}{match.group(1)} />",
        text,
        flags=re.IGNORECASE,
    )


def normalize(body: str, kind: SnippetKind | str) -> str:
    """Return ``body`` ready to splice into a buffer of ``kind``.

    Only markup is rewritten: bare text is wrapped in a ``<div>``, void tags
    become self-closing, a missing closing tag for the outermost element is
    appended, and the result ends with exactly one newline.
    """

    if SnippetKind.parse(kind) is not SnippetKind.MARKUP:
        return body

    text = body.strip()
    if not text.startswith("<"):
        indented = text.replace("\n", "\n  ")
        return f"<div>\n  {indented}\n</div>\n"

    for tag in VOID_TAGS:
        text = _self_close(tag, text)

    opening = _OUTERMOST.match(text)
    if opening:
        tag = opening.group(1).lower()
        closing = re.compile(rf"</{re.escape(tag)}>\s*$", re.IGNORECASE)
        if tag not in VOID_TAGS and not closing.search(text):
            text = f"{text}\n</{tag}>"

    return text.rstrip("\n") + "\n"


__all__ = ["normalize", "VOID_TAGS"]
