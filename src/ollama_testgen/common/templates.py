"""Test-generation prompt templates.

A template is plain text with exactly one kind of slot, ``{{input}}``, which
receives the code or behaviour the user wants a test for.
"""
from __future__ import annotations
from pathlib import Path

DEFAULT_TEMPLATE_PATH = "configs/prompt_template.txt"
PLACEHOLDER = "{{input}}"

def load_template(path: str = DEFAULT_TEMPLATE_PATH, *, check: bool = True) -> str:
    """
    Read a prompt template.

    Args:
        path: Path to template.
        check: Reject templates without the {{input}} slot.

    Raises:
        OSError: Template cannot be read.
        ValueError: Template has no {{input}} slot and check is set.
    """
    template = Path(path).read_text(encoding="utf-8")
    if check:
        _require_placeholder(template, path)
    return template

def _require_placeholder(template: str, origin: str = "template") -> None:
    if PLACEHOLDER not in template:
        raise ValueError(f"{origin} has no {PLACEHOLDER} placeholder; user input would be dropped")

def render_prompt(template: str, user_input: str) -> str:
    """Substitute user input into every {{input}} slot of the template."""
    _require_placeholder(template)
    return template.replace(PLACEHOLDER, user_input)
