"""Conventional commit header classification.

The header grammar is ``<type>(<scope>)?(!)?: <subject>``, read with a
small hand-written scanner. It is tolerant: anything after the type is
optional, and a message that does not start with a word character simply
yields an empty classification.
"""
from __future__ import annotations

import string
from dataclasses import dataclass


WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")
LEADING_SPACE = frozenset(" \t\n\r\f")
SCOPE_FORBIDDEN = frozenset("()\r\n")


@dataclass(frozen=True)
class CommitClassification:
    """Fields read from one commit header.

    Attributes:
        type: Commit type such as ``feat`` or ``fix``
        scope: Text inside the first parenthesis pair, possibly empty
        breaking: The breaking marker as written (``"!"`` or ``""``)
        subject: Header remainder starting at the colon
    """

    type: str = ""
    scope: str = ""
    breaking: str = ""
    subject: str = ""

    @property
    def is_breaking(self) -> bool:
        return self.breaking == "!"

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "scope": self.scope,
            "breaking": self.is_breaking,
            "subject": self.subject,
        }


EMPTY = CommitClassification()


def _scan_scope_group(message: str, pos: int) -> int:
    """Return the end of the optional ``(scope)`` group starting at ``pos``.

    A closed group may not contain parentheses or line breaks. When no such
    group closes, a lone ``(`` is still consumed.
    """
    if pos >= len(message) or message[pos] != "(":
        return pos
    end = pos + 1
    while end < len(message) and message[end] not in SCOPE_FORBIDDEN:
        end += 1
    if end < len(message) and message[end] == ")":
        return end + 1
    return pos + 1


def effective_scope(raw: str) -> str:
    """Take the text between the first ``(`` and the first ``)`` after it.

    Without a ``(`` the scope is empty. Without a closing ``)`` the rest of
    the text is used, so ``(!`` yields ``!``.
    """
    _, found, after = raw.partition("(")
    if not found:
        return ""
    before, _, _ = after.partition(")")
    return before


def classify_commit(message: str) -> CommitClassification:
    """Classify a commit message by its conventional commit header."""
    pos = 0
    length = len(message)
    while pos < length and message[pos] in LEADING_SPACE:
        pos += 1

    type_start = pos
    while pos < length and message[pos] in WORD_CHARS:
        pos += 1
    if pos == type_start:
        return EMPTY
    commit_type = message[type_start:pos]

    # the raw scope capture spans the parenthesis group and the marker
    scope_start = pos
    pos = _scan_scope_group(message, pos)
    breaking = ""
    if pos < length and message[pos] == "!":
        breaking = "!"
        pos += 1
    raw_scope = message[scope_start:pos]

    subject = ""
    if pos < length and message[pos] == ":":
        subject = message[pos:].split("\n", 1)[0]

    return CommitClassification(
        type=commit_type,
        scope=effective_scope(raw_scope),
        breaking=breaking,
        subject=subject,
    )
