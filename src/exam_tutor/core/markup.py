"""
Markup parser for generated tutorial and explanation text.

Turns Markdown-like text with embedded ``$...$`` LaTeX spans into typed
block nodes. Parsing is line oriented, stateless and total: malformed
delimiters are kept as literal text, so the parser can be re-run on a
growing prefix of a streamed response after every fragment.
"""
import re
import logging
from typing import Callable, List, Optional

from src.exam_tutor.models.markup_models import BlockKind, BlockNode, InlineKind, InlineSpan

logger = logging.getLogger(__name__)

_MATH_SPAN = re.compile(r"\$([^$]+)\$")
_BOLD_SPAN = re.compile(r"\*\*(.+?)\*\*")
_ORDERED_ITEM = re.compile(r"^(\d+)\.\s")
_HEADING_PREFIXES = (("### ", 3), ("## ", 2), ("# ", 1))
_BULLET_PREFIXES = ("- ", "• ")

RULE_WIDTH = 40
BOLD_ON = "\033[1m"
BOLD_OFF = "\033[0m"


def _tokenize_bold(text: str) -> List[InlineSpan]:
    spans = []
    position = 0
    for match in _BOLD_SPAN.finditer(text):
        if match.start() > position:
            spans.append(InlineSpan(kind=InlineKind.TEXT, content=text[position:match.start()]))
        spans.append(InlineSpan(kind=InlineKind.BOLD, content=match.group(1)))
        position = match.end()
    if position < len(text):
        spans.append(InlineSpan(kind=InlineKind.TEXT, content=text[position:]))
    return spans


def tokenize_inline(text: str) -> List[InlineSpan]:
    """
    Split a line payload into Math, Bold and Text spans.

    Math is recognized first, so ``**`` inside ``$...$`` is never bold.
    Unterminated delimiters stay in the surrounding text span.
    """
    spans = []
    position = 0
    for match in _MATH_SPAN.finditer(text):
        spans.extend(_tokenize_bold(text[position:match.start()]))
        spans.append(InlineSpan(kind=InlineKind.MATH, content=match.group(1)))
        position = match.end()
    spans.extend(_tokenize_bold(text[position:]))
    return spans


def _block(kind: BlockKind, payload: str = "", **attributes) -> BlockNode:
    return BlockNode(kind=kind, spans=tuple(tokenize_inline(payload)), **attributes)


def parse_line(line: str) -> BlockNode:
    """Classify a single line. Earlier rules win.

    Classified lines lose surrounding whitespace; paragraphs keep the raw line.
    """
    trimmed = line.strip()

    for prefix, level in _HEADING_PREFIXES:
        if trimmed.startswith(prefix):
            return _block(BlockKind.HEADING, trimmed[len(prefix):], level=level)

    if trimmed == "---":
        return _block(BlockKind.RULE)

    for prefix in _BULLET_PREFIXES:
        if trimmed.startswith(prefix):
            return _block(BlockKind.LIST_ITEM, trimmed[len(prefix):], ordered=False)

    ordered = _ORDERED_ITEM.match(trimmed)
    if ordered:
        return _block(
            BlockKind.LIST_ITEM,
            trimmed[ordered.end():],
            ordered=True,
            marker=ordered.group(1),
        )

    if not trimmed:
        return _block(BlockKind.BREAK)

    return _block(BlockKind.PARAGRAPH, line)


def parse(text: str) -> List[BlockNode]:
    """Parse raw generated text into one block node per line."""
    if not text:
        return []
    return [parse_line(line) for line in text.split("\n")]


def plain_text(nodes: List[BlockNode]) -> str:
    """Concatenate node contents with all markup delimiters removed."""
    return "\n".join(node.plain_text for node in nodes)


def _render_span(span: InlineSpan, typeset: Optional[Callable[[str], str]]) -> str:
    if span.kind == InlineKind.BOLD:
        return f"{BOLD_ON}{span.content}{BOLD_OFF}"
    if span.kind == InlineKind.MATH:
        if typeset is not None:
            try:
                return typeset(span.content)
            except Exception as e:
                logger.debug(f"Typesetting failed for {span.content!r}: {e}")
        return f"`{span.content}`"
    return span.content


def render_node(node: BlockNode, typeset: Optional[Callable[[str], str]] = None) -> str:
    """
    Render one node as terminal text.

    Args:
        node: Parsed block node
        typeset: Optional math renderer. When it is missing or raises,
            math falls back to code-styled literal text.
    """
    text = "".join(_render_span(span, typeset) for span in node.spans)

    if node.kind == BlockKind.HEADING:
        if node.level == 1:
            return f"{text}\n{'=' * max(len(node.plain_text), 3)}"
        if node.level == 2:
            return f"{text}\n{'-' * max(len(node.plain_text), 3)}"
        return f"{BOLD_ON}{text}{BOLD_OFF}"
    if node.kind == BlockKind.RULE:
        return "-" * RULE_WIDTH
    if node.kind == BlockKind.LIST_ITEM:
        marker = f"{node.marker}." if node.ordered else "•"
        return f"  {marker} {text}"
    if node.kind == BlockKind.BREAK:
        return ""
    return text


def render_text(nodes: List[BlockNode], typeset: Optional[Callable[[str], str]] = None) -> str:
    return "\n".join(render_node(node, typeset) for node in nodes)
