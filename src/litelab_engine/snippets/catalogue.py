"""Built-in snippet catalogue. Never mutated at runtime."""

from __future__ import annotations

from .models import Snippet, SnippetKind

MARKUP = SnippetKind.MARKUP
STYLE = SnippetKind.STYLE
SCRIPT = SnippetKind.SCRIPT
ALL = SnippetKind.ALL

CATALOGUE: tuple[Snippet, ...] = (
    Snippet(
        label="Section (semantic)",
        kind=MARKUP,
        body="<section>\n  <h2>Title</h2>\n  <p>Description...</p>\n</section>\n",
        description="Semantic section block",
    ),
    Snippet(
        label="Header",
        kind=MARKUP,
        body="<header>\n  <nav><!-- links --></nav>\n</header>\n",
        description="Top navigation header",
        tags=("nav",),
    ),
    Snippet(
        label="Footer",
        kind=MARKUP,
        body="<footer>\n  <p>&copy; 2025 MyCompany</p>\n</footer>\n",
        description="Simple footer",
    ),
    Snippet(
        label="Button (accessible)",
        kind=MARKUP,
        body='<button class="btn" role="button">Click me</button>\n',
        description="Accessible button",
        tags=("a11y",),
    ),
    Snippet(
        label="Card",
        kind=MARKUP,
        body=(
            '<article class="card">\n  <h3>Card title</h3>\n'
            "  <p>Card body</p>\n</article>\n"
        ),
        description="Basic card layout",
    ),
    Snippet(
        label="Image",
        kind=MARKUP,
        body='<img src="path/to/img.jpg" alt="description" />\n',
        description="Responsive-ish image",
        tags=("media",),
    ),
    Snippet(
        label="Flex row center",
        kind=STYLE,
        body=(
            ".row-center {\n  display: flex;\n  align-items: center;\n"
            "  justify-content: center;\n}\n"
        ),
        description="Basic flex centered row",
        tags=("layout",),
    ),
    Snippet(
        label="Flex column gap",
        kind=STYLE,
        body=(
            ".col-gap {\n  display: flex;\n  flex-direction: column;\n"
            "  gap: 12px;\n}\n"
        ),
        description="Vertical column with gap",
        tags=("layout",),
    ),
    Snippet(
        label="Responsive grid 3 cols",
        kind=STYLE,
        body=(
            ".grid-3 {\n  display: grid;\n  grid-template-columns: repeat(3, 1fr);\n"
            "  gap: 16px;\n}\n@media (max-width: 768px) {\n"
            "  .grid-3 { grid-template-columns: 1fr; }\n}\n"
        ),
        description="Grid with responsive breakpoint",
        tags=("layout", "responsive"),
    ),
    Snippet(
        label="CSS variable theme",
        kind=STYLE,
        body=":root {\n  --bg: #fff;\n  --fg: #111;\n  --accent: #3b82f6;\n}\n",
        description="Root theme variables",
        tags=("theme",),
    ),
    Snippet(
        label="Button primary (tailored)",
        kind=STYLE,
        body=(
            ".btn-primary {\n  padding: 10px 14px;\n  border-radius: 10px;\n"
            "  background: linear-gradient(90deg,#3b82f6,#1e3a8a);\n"
            "  color: #fff;\n  font-weight: 700;\n}\n"
        ),
        description="Styled primary button",
    ),
    Snippet(
        label="querySelector + text",
        kind=SCRIPT,
        body=(
            "const el = document.querySelector('.selector');\n"
            "if (el) el.textContent = 'New text';\n"
        ),
        description="Find element and update text",
        tags=("dom",),
    ),
    Snippet(
        label="Event listener",
        kind=SCRIPT,
        body=(
            "const btn = document.querySelector('.btn');\n"
            "btn?.addEventListener('click', (e) => {\n"
            "  // handle click\n});\n"
        ),
        description="Add click listener",
        tags=("dom", "events"),
    ),
    Snippet(
        label="Event delegation (list)",
        kind=SCRIPT,
        body=(
            "document.querySelector('.list')?.addEventListener('click', (e) => {\n"
            "  const button = e.target.closest('[data-action]');\n"
            "  if (!button) return;\n"
            "  const action = button.getAttribute('data-action');\n"
            "  // handle action\n});\n"
        ),
        description="Delegate click events",
        tags=("dom", "events"),
    ),
    Snippet(
        label="Fetch JSON (async)",
        kind=SCRIPT,
        body=(
            "async function loadJson(url){\n  const res = await fetch(url);\n"
            "  if (!res.ok) throw new Error('Network error');\n"
            "  return await res.json();\n}\n"
        ),
        description="Fetch helper",
        tags=("network",),
    ),
    Snippet(
        label="Debounce utility",
        kind=SCRIPT,
        body=(
            "function debounce(fn, ms = 250){\n  let t;\n"
            "  return (...args) => { clearTimeout(t); "
            "t = setTimeout(() => fn(...args), ms); };\n}\n"
        ),
        description="Debounce function",
    ),
    Snippet(
        label="Basic starter (HTML+CSS+JS)",
        kind=ALL,
        body=(
            "<!doctype html>\n<html>\n<head>\n"
            '  <meta charset="utf-8" />\n'
            '  <meta name="viewport" content="width=device-width,initial-scale=1" />\n'
            '  <link rel="stylesheet" href="styles.css">\n'
            "  <title>App</title>\n</head>\n<body>\n"
            '  <div id="app"></div>\n  <script src="app.js"></script>\n'
            "</body>\n</html>\n"
        ),
        description="Starter scaffold",
        tags=("starter",),
    ),
)


__all__ = ["CATALOGUE"]
