"""UI-agnostic editing engine for a three-buffer HTML/CSS/JS sandbox."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "diagnostics",
    "errors",
    "input",
    "keymaps",
    "runtime",
    "services",
    "session",
    "snippets",
]

__version__ = "0.1.0"
