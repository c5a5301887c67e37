"""Plain text rendering of Notion results for the terminal."""

from src.notion.blocks import (
    Block,
    Bookmark,
    BulletedListItem,
    Code,
    Divider,
    Heading,
    NumberedListItem,
    Paragraph,
    ToDo,
    block_text,
)
from src.notion.models import MoveResult, NotionPage, PageSummary

UNTITLED = "(Untitled)"


def display_title(title: str) -> str:
    """Title to show for a page, with a placeholder for untitled pages."""
    return title or UNTITLED


def render_summaries(summaries: list[PageSummary]) -> str:
    """Render search results, one object per two lines."""
    lines = [f"{len(summaries)} results found"]
    for summary in summaries:
        lines.append(f"  • [{summary.kind}] {display_title(summary.title)}")
        lines.append(f"    ID: {summary.id}")
    return "\n".join(lines)


def render_pages(pages: list[NotionPage], *, max_properties: int = 3) -> str:
    """Render database query results with a few property values each."""
    lines = [f"{len(pages)} results found"]
    for page in pages:
        lines.append(f"  • {display_title(page.title)}")
        lines.append(f"    ID: {page.id}")
        for name, value in list(page.properties.items())[:max_properties]:
            lines.append(f"    {name}: {value}")
    return "\n".join(lines)


def render_page(page: NotionPage, blocks: list[Block]) -> str:
    """Render a page title followed by its content."""
    body = blocks_to_markdown(blocks)
    header = f"Title: {display_title(page.title)}"
    return f"{header}\n\n{body}" if body else header


def render_move(result: MoveResult) -> str:
    """Render the outcome of a move."""
    lines = [
        "Page moved!" if result.archived_original else "Page copied!",
        f"  New ID: {result.created.id}",
    ]
    if result.created.url:
        lines.append(f"  URL: {result.created.url}")
    if result.skipped_blocks:
        lines.append(f"  Skipped {result.skipped_blocks} unsupported blocks")
    return "\n".join(lines)


def blocks_to_markdown(blocks: list[Block]) -> str:
    """Convert blocks to markdown-like text.

    Supports the following block types:
    - heading -> #, ## or ### prefix
    - to_do -> - [ ] Item or - [x] Item
    - bulleted_list_item -> - Item
    - numbered_list_item -> 1. Item
    - code -> fenced code block
    - bookmark -> <url> with optional caption
    - divider -> ---
    - paragraph -> Plain text

    Unsupported blocks are skipped.

    :param blocks: Decoded blocks.
    :returns: Markdown formatted text.
    """
    if not blocks:
        return ""

    lines: list[str] = []
    numbered_counter = 1

    for block in blocks:
        line = _block_to_line(block, numbered_counter)
        if line is not None:
            lines.append(line)
        if isinstance(block, NumberedListItem):
            numbered_counter += 1
        else:
            numbered_counter = 1

    return "\n".join(lines)


def _block_to_line(block: Block, numbered_counter: int) -> str | None:  # noqa: PLR0911
    """Convert a single block to a markdown line.

    :param block: The block.
    :param numbered_counter: Current counter for numbered lists.
    :returns: Markdown line or None.
    """
    text = block_text(block)

    match block:
        case Divider():
            return "---"
        case Heading():
            return f"{'#' * block.level} {text}"
        case ToDo():
            checkbox = "[x]" if block.checked else "[ ]"
            return f"- {checkbox} {text}"
        case BulletedListItem():
            return f"- {text}"
        case NumberedListItem():
            return f"{numbered_counter}. {text}"
        case Code():
            return f"```{block.language}\n{text}\n```"
        case Bookmark():
            return f"<{block.url}> {text}".rstrip()
        case Paragraph():
            return text
        case _:
            # Unknown block type - skip
            return None
