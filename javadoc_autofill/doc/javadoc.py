"""
Javadoc text <-> Comment conversion.

Parsing keeps the description verbatim (minus the `*` gutter) and splits
block tags into Tag objects; rendering produces the conventional layout:

    /**
     * description
     *
     * @param name content
     */
"""
import re
from typing import List, Tuple

from .model import Comment, Tag, TagKind

_BLOCK_TAG = re.compile(r"^@([A-Za-z][\w.-]*)(?:\s+(.*))?$")

# tags whose first word is a name rather than content
_NAMED_LABELS = {"param", "throws", "exception"}


def _strip_gutter(raw: str) -> str:
    line = raw.lstrip()
    if line.startswith("*"):
        line = line.lstrip("*")
        if line.startswith(" "):
            line = line[1:]
    return line.rstrip()


def _trim_blank_lines(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _split_name(rest: str) -> Tuple[str, str]:
    parts = rest.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


def _make_tag(label: str, rest: str) -> Tag:
    if label in _NAMED_LABELS:
        name, content = _split_name(rest)
        if label == "param":
            if name.startswith("<") and name.endswith(">"):
                return Tag(TagKind.TYPE_PARAM, label, name[1:-1], content)
            return Tag(TagKind.PARAM, label, name, content)
        if label == "throws":
            return Tag(TagKind.THROWS, label, name, content)
        return Tag(TagKind.OTHER, label, name, content)
    if label == "return":
        return Tag(TagKind.RETURN, label, None, rest)
    return Tag(TagKind.OTHER, label, None, rest)


def parse_javadoc(text: str) -> Comment:
    inner = text[3:] if text.startswith("/**") else text
    if inner.endswith("*/"):
        inner = inner[:-2]

    description: List[str] = []
    tags: List[Tag] = []
    continuation: List[List[str]] = []

    for raw in inner.splitlines():
        line = _strip_gutter(raw)
        m = _BLOCK_TAG.match(line)
        if m:
            tags.append(_make_tag(m.group(1), (m.group(2) or "").strip()))
            continuation.append([])
        elif not tags:
            description.append(line)
        else:
            continuation[-1].append(line)

    for tag, extra in zip(tags, continuation):
        tag.content = "\n".join(_trim_blank_lines([tag.content] + extra))

    return Comment(description="\n".join(_trim_blank_lines(description)), tags=tags)


def render_javadoc(comment: Comment, indent: str = "", newline: str = "\n", compact: bool = False) -> str:
    """
    Render a Comment as a Javadoc block. The first line carries no indent;
    every following line is prefixed with `indent` so the block can be
    spliced in at the column where the old block (or the declaration) began.
    """
    body = comment.description.splitlines()

    if compact and not comment.tags and len(body) <= 1:
        return f"/** {body[0]} */" if body else "/** */"

    lines: List[str] = list(body)
    if comment.tags:
        if lines:
            lines.append("")
        for tag in comment.tags:
            lines.extend(tag.render().splitlines() or [""])

    out = ["/**"] + [(" * " + line).rstrip() for line in lines] + [" */"]
    return (newline + indent).join(out)

