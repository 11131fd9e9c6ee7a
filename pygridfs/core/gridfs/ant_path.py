"""
Ant-style path patterns for GridFS filename lookups.

Translates a glob-style location pattern into an anchored regular expression
that MongoDB can evaluate against the ``filename`` field.

Grammar:
    ?       exactly one character other than a separator
    *       zero or more characters other than a separator
    **      as a whole path segment, zero or more whole segments
    [abc]   character class; a leading ``!`` negates it (``[!abc]``)
    /       path separator, matches ``/`` or the platform separator

Everything else is matched literally. An unterminated ``[`` is a literal.
"""

from __future__ import annotations

import os
import re


_WILDCARDS = frozenset("*?[]")


class AntPath:
    """A glob-style location pattern."""

    def __init__(self, path: str, separator: str = os.sep):
        self.path = path
        separators = ["/"]
        if separator and separator != "/":
            separators.append(separator)
        self._separators = tuple(separators)

        escaped = "".join(re.escape(s) for s in self._separators)
        if len(self._separators) == 1:
            self._sep_re = escaped
        else:
            self._sep_re = f"[{escaped}]"
        self._non_sep_re = f"[^{escaped}]"

    def __repr__(self) -> str:
        return f"AntPath({self.path!r})"

    def is_pattern(self) -> bool:
        """Whether the path contains any wildcard character."""
        return any(ch in _WILDCARDS for ch in self.path)

    def to_regex(self) -> str:
        """Translate the pattern into an anchored regular expression."""
        segments = self._split(self.path)
        last = len(segments) - 1
        parts: list[str] = []
        need_separator = False

        for index, segment in enumerate(segments):
            if segment == "**":
                if index == last:
                    parts.append(".*" if index == 0 else f"(?:{self._sep_re}.*)?")
                elif index == 0:
                    parts.append(f"(?:{self._non_sep_re}+{self._sep_re})*")
                else:
                    parts.append(
                        f"{self._sep_re}(?:{self._non_sep_re}+{self._sep_re})*")
                need_separator = False
                continue

            if need_separator:
                parts.append(self._sep_re)
            parts.append(self._translate_segment(segment))
            need_separator = True

        return "^" + "".join(parts) + "$"

    def matches(self, filename: str) -> bool:
        """Check a filename against the pattern locally."""
        return re.match(self.to_regex(), filename) is not None

    def _split(self, path: str) -> list[str]:
        for sep in self._separators[1:]:
            path = path.replace(sep, "/")
        segments: list[str] = []
        for segment in path.split("/"):
            # "**/**" matches the same names as a single "**"
            if segment == "**" and segments and segments[-1] == "**":
                continue
            segments.append(segment)
        return segments

    def _translate_segment(self, segment: str) -> str:
        out: list[str] = []
        i = 0
        n = len(segment)
        while i < n:
            ch = segment[i]
            if ch == "*":
                out.append(f"{self._non_sep_re}*")
                # Collapse runs of '*' inside a segment
                while i + 1 < n and segment[i + 1] == "*":
                    i += 1
            elif ch == "?":
                out.append(self._non_sep_re)
            elif ch == "[":
                end = self._find_class_end(segment, i)
                if end < 0:
                    out.append(re.escape(ch))
                else:
                    out.append(self._translate_class(segment[i + 1:end]))
                    i = end
            else:
                out.append(re.escape(ch))
            i += 1
        return "".join(out)

    @staticmethod
    def _find_class_end(segment: str, start: int) -> int:
        """Index of the ']' closing the class opened at ``start``, or -1."""
        j = start + 1
        if j < len(segment) and segment[j] == "!":
            j += 1
        # A ']' right after the opening bracket is a member, not the end
        if j < len(segment) and segment[j] == "]":
            j += 1
        return segment.find("]", j)

    @staticmethod
    def _translate_class(body: str) -> str:
        negate = body.startswith("!")
        if negate:
            body = body[1:]
        body = body.replace("\\", "\\\\").replace("[", "\\[")
        if body.startswith("]"):
            body = "\\" + body
        if not negate and body.startswith("^"):
            body = "\\" + body
        return "[" + ("^" if negate else "") + body + "]"


def is_pattern(path: str) -> bool:
    """Shortcut for ``AntPath(path).is_pattern()``."""
    return AntPath(path).is_pattern()


def glob_to_regex(pattern: str, separator: str = os.sep) -> str:
    """Shortcut for ``AntPath(pattern, separator).to_regex()``."""
    return AntPath(pattern, separator).to_regex()
