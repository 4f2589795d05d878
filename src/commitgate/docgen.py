"""Markdown API reference built from JSDoc comments.

Only doc blocks that end on the line directly above a function
declaration are picked up, the same adjacency rule the pre-commit
documentation scan uses.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from commitgate.config import GateConfig
from commitgate.scan import FUNCTION_DECL_RE
from commitgate.staged import is_test_file

logger = logging.getLogger(__name__)

FUNCTION_NAME_RE = re.compile(r"function\s*\*?\s*([A-Za-z_$][\w$]*)")
PARAM_TAG_RE = re.compile(r"^@param\s+(?:\{(?P<type>[^}]*)\}\s+)?(?P<name>\[?[\w$.\]=]+)\s*(?:-\s*)?(?P<desc>.*)$")
RETURNS_TAG_RE = re.compile(r"^@returns?\s+(?:\{(?P<type>[^}]*)\}\s*)?(?P<desc>.*)$")


@dataclass(frozen=True)
class ParamDoc:
    name: str
    type: str
    description: str


@dataclass(frozen=True)
class DocEntry:
    """Documentation for one function declaration."""

    name: str
    line: int
    summary: str
    params: tuple[ParamDoc, ...] = ()
    returns: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)


def _block_lines(lines: list[str], end: int) -> list[str] | None:
    """Cleaned inner lines of the /** ... */ block ending at ``end``."""
    start = end
    while start >= 0 and "/**" not in lines[start]:
        if start < end and "*/" in lines[start]:
            return None
        start -= 1
    if start < 0:
        return None

    inner: list[str] = []
    for raw in lines[start : end + 1]:
        text = raw.strip()
        if text.startswith("/**"):
            text = text[3:]
        if text.endswith("*/"):
            text = text[:-2]
        text = text.strip()
        if text.startswith("*"):
            text = text[1:].strip()
        inner.append(text)
    return inner


def _parse_block(name: str, line: int, block: list[str]) -> DocEntry:
    summary: list[str] = []
    params: list[ParamDoc] = []
    returns = ""
    tags: list[str] = []
    in_tags = False

    for text in block:
        if text.startswith("@"):
            in_tags = True
            param = PARAM_TAG_RE.match(text)
            ret = RETURNS_TAG_RE.match(text)
            if param:
                params.append(ParamDoc(param["name"], param["type"] or "", param["desc"].strip()))
            elif ret:
                parts = [f"`{ret['type']}`"] if ret["type"] else []
                if ret["desc"].strip():
                    parts.append(ret["desc"].strip())
                returns = " ".join(parts)
            else:
                tags.append(text)
        elif not in_tags and text:
            summary.append(text)

    return DocEntry(
        name=name,
        line=line,
        summary=" ".join(summary),
        params=tuple(params),
        returns=returns,
        tags=tuple(tags),
    )


def extract_doc_entries(text: str) -> list[DocEntry]:
    """Doc entries for every documented function declaration in ``text``."""
    lines = text.splitlines()
    entries: list[DocEntry] = []
    for index, line in enumerate(lines):
        if not FUNCTION_DECL_RE.match(line) or index == 0:
            continue
        if not lines[index - 1].rstrip().endswith("*/"):
            continue
        name_match = FUNCTION_NAME_RE.search(line)
        if name_match is None:
            continue
        block = _block_lines(lines, index - 1)
        if block is None:
            continue
        entries.append(_parse_block(name_match.group(1), index + 1, block))
    return entries


def render_markdown(documented: dict[str, list[DocEntry]]) -> str:
    lines: list[str] = [
        "# API Reference",
        "",
        "_Generated by `commitgate docs` from JSDoc comments. Do not edit by hand._",
        "",
    ]
    if not documented:
        lines.extend(["No documented functions found.", ""])
        return "\n".join(lines)

    for path, entries in documented.items():
        lines.extend([f"## {path}", ""])
        for entry in entries:
            lines.extend([f"### `{entry.name}`", ""])
            if entry.summary:
                lines.extend([entry.summary, ""])
            if entry.params:
                lines.extend(["| Param | Type | Description |", "| --- | --- | --- |"])
                for param in entry.params:
                    type_cell = f"`{param.type}`" if param.type else ""
                    lines.append(f"| `{param.name}` | {type_cell} | {param.description} |")
                lines.append("")
            if entry.returns:
                lines.extend([f"**Returns:** {entry.returns}", ""])
            for tag in entry.tags:
                lines.append(f"- `{tag}`")
            if entry.tags:
                lines.append("")
    return "\n".join(lines)


def generate_docs(repo_root: Path, config: GateConfig) -> tuple[Path, int]:
    """Write the API reference and return its path and the number of entries.

    Raises:
        RuntimeError: If the configured source directory does not exist
    """
    source_dir = repo_root / config.docs_source_dir
    if not source_dir.is_dir():
        raise RuntimeError(f"docs source directory not found: {source_dir}")

    documented: dict[str, list[DocEntry]] = {}
    count = 0
    for path in sorted(source_dir.rglob("*")):
        if not path.is_file() or not path.name.endswith(config.source_extensions):
            continue
        if "node_modules" in path.parts:
            continue
        rel = path.relative_to(repo_root).as_posix()
        if is_test_file(rel):
            continue
        entries = extract_doc_entries(path.read_text(encoding="utf-8", errors="replace"))
        if entries:
            documented[rel] = entries
            count += len(entries)
        logger.debug("docs: %s -> %d entr(ies)", rel, len(entries))

    output = repo_root / config.docs_output
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_markdown(documented), encoding="utf-8")
    return output, count
