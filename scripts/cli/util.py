"""CLI utilities: prompts, formatting, logging mute/restore."""

from __future__ import annotations

import logging
from datetime import date

from warehouse_kernel.domain.validation import parse_int, parse_iso_date, sanitize_input

W = 72


def banner(title: str) -> None:
    print()
    print("=" * W)
    print(f"  {title}".center(W))
    print("=" * W)


def fmt_date(d: date | None) -> str:
    return d.isoformat() if d else "-"


def prompt(label: str) -> str:
    """Raw input with the CLI indent.  EOFError propagates to the main loop."""
    return input(f"  {label}: ").strip()


def prompt_text(label: str, default: str | None = None) -> str:
    """
    Prompt for free text, stripping quote, semicolon and backslash characters.

    With a ``default``, blank input keeps it; otherwise blank input re-prompts.
    """
    shown = f"{label} [{default}]" if default is not None else label
    while True:
        value = sanitize_input(prompt(shown))
        if value:
            return value
        if default is not None:
            return default
        print("  Value cannot be empty.")


def prompt_int(label: str, default: int | None = None, minimum: int | None = None) -> int:
    shown = f"{label} [{default}]" if default is not None else label
    while True:
        raw = prompt(shown)
        if not raw and default is not None:
            return default
        value = parse_int(raw)
        if value is None:
            print("  Please enter a whole number.")
        elif minimum is not None and value < minimum:
            print(f"  Please enter a number >= {minimum}.")
        else:
            return value


def prompt_date(label: str, default: date | None = None) -> date:
    shown = f"{label} (YYYY-MM-DD) [{fmt_date(default)}]" if default else f"{label} (YYYY-MM-DD)"
    while True:
        raw = prompt(shown)
        if not raw and default is not None:
            return default
        value = parse_iso_date(raw)
        if value is None:
            print("  Please enter a date as YYYY-MM-DD.")
        else:
            return value


def prompt_status(label: str, status_type, default=None):
    """Prompt for an enum member by number, name or display string."""
    members = list(status_type)
    for i, member in enumerate(members, 1):
        print(f"    {i}. {member.value}")
    shown = f"{label} [{default.value}]" if default is not None else label
    while True:
        raw = prompt(shown)
        if not raw and default is not None:
            return default
        number = parse_int(raw)
        if number is not None and 1 <= number <= len(members):
            return members[number - 1]
        for member in members:
            if raw.lower() in (member.value.lower(), member.name.lower()):
                return member
        print("  Unknown status, pick one of the numbers above.")


def confirm(question: str) -> bool:
    return prompt(f"{question} (y/n)").lower() in ("y", "yes")


def enable_quiet_logging():
    """Mute console handlers so CLI output stays clean. Returns list to pass to restore_logging."""
    wk_logger = logging.getLogger("warehouse_kernel")
    muted = []
    for h in wk_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            muted.append((h, h.level))
            h.setLevel(logging.CRITICAL + 1)
    return muted


def restore_logging(muted):
    """Restore muted handlers after a quiet-logging section."""
    for h, orig_level in muted:
        h.setLevel(orig_level)
