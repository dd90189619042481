"""PHPDoc block parsing.

Turns the raw text of a ``/** ... */`` comment into a DocComment:

- the first non-empty line is the summary
- following plain lines form the description
- ``@tag value`` lines open a new tag entry; plain lines after a tag
  continue that tag's last value, joined with a newline
"""

from __future__ import annotations

import re

from phpsense.index.models import DocComment

_OPEN = re.compile(r"^/\*\*")
_CLOSE = re.compile(r"\*/$")
_LINE_PREFIX = re.compile(r"^\s*\*\s?")
_TAG = re.compile(r"^@(\w+)(?:\s+(.*))?$")


def _clean_lines(raw: str) -> list[str]:
    body = _CLOSE.sub("", _OPEN.sub("", raw.strip()))
    lines = (_LINE_PREFIX.sub("", line).strip() for line in body.split("\n"))
    return [line for line in lines if line]


def parse_doc_comment(raw: str) -> DocComment:
    doc = DocComment()
    section = "summary"
    current_tag: str | None = None

    for line in _clean_lines(raw):
        if line.startswith("@"):
            m = _TAG.match(line)
            if m is None:
                # "@" followed by a non-word character, e.g. "@-"
                continue
            current_tag = m.group(1)
            doc.tags.setdefault(current_tag, []).append(m.group(2) or "")
            section = "tags"
        elif section == "summary":
            doc.summary = line
            section = "description"
        elif section == "description":
            doc.description = f"{doc.description}\n{line}" if doc.description else line
        elif current_tag is not None:
            values = doc.tags[current_tag]
            values[-1] = f"{values[-1]}\n{line}"

    return doc
