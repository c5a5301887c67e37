"""Command line entry point for the Notion client."""

import argparse
import logging
import sys
from collections.abc import Callable, Sequence

from src.cli.config import MissingApiKeyError, resolve_config
from src.cli.render import (
    display_title,
    render_move,
    render_page,
    render_pages,
    render_summaries,
)
from src.notion.blocks import Block
from src.notion.client import DEFAULT_LIMIT, NotionClient
from src.notion.exceptions import NotionClientError
from src.notion.filters import SortSpec, parse_direction
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)

Handler = Callable[[NotionClient, argparse.Namespace], str]


def _handle_search(client: NotionClient, args: argparse.Namespace) -> str:
    return render_summaries(client.search(args.query, limit=args.limit))


def _handle_read(client: NotionClient, args: argparse.Namespace) -> str:
    page = client.get_page(args.page_id)
    blocks = client.get_blocks(args.page_id)
    return render_page(page, blocks)


def _handle_create(client: NotionClient, args: argparse.Namespace) -> str:
    created = client.create_page(args.parent, args.title, content=args.content)
    lines = ["Page created!", f"  ID: {created.id}"]
    if created.url:
        lines.append(f"  URL: {created.url}")
    return "\n".join(lines)


def _appended(blocks: list[Block]) -> str:
    return f"Content appended! ({len(blocks)} blocks)"


def _handle_append(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_paragraph(args.page_id, args.content))


def _handle_append_code(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_code(args.page_id, args.code, language=args.language))


def _handle_append_bookmark(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_bookmark(args.page_id, args.url, caption=args.caption))


def _handle_append_heading(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_heading(args.page_id, args.text, level=args.level))


def _handle_append_divider(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_divider(args.page_id))


def _handle_append_list(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_list(args.page_id, args.items.split(",")))


def _handle_append_link(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(
        client.append_link(
            args.page_id,
            args.link_text,
            args.url,
            prefix=args.prefix,
            suffix=args.suffix,
        )
    )


def _handle_append_todo(client: NotionClient, args: argparse.Namespace) -> str:
    return _appended(client.append_todo(args.page_id, args.text, checked=args.checked))


def _handle_update(client: NotionClient, args: argparse.Namespace) -> str:
    page = client.update_page(args.page_id, title=args.title, icon=args.icon)
    lines = ["Page updated!", f"  Title: {display_title(page.title)}"]
    if page.icon:
        lines.append(f"  Icon: {page.icon}")
    return "\n".join(lines)


def _handle_delete(client: NotionClient, args: argparse.Namespace) -> str:
    page = client.archive_page(args.page_id)
    if page.archived:
        return "Page archived (moved to trash)!"
    return "Page archive requested, but the page is not reported as archived"


def _handle_delete_block(client: NotionClient, args: argparse.Namespace) -> str:
    block = client.delete_block(args.block_id)
    return f"Block deleted: {block.id or args.block_id}"


def _handle_query(client: NotionClient, args: argparse.Namespace) -> str:
    sorts = None
    if args.sort:
        sorts = [SortSpec(property=args.sort, direction=parse_direction(args.direction))]
    pages = client.query_database(
        args.database_id,
        filter_expr=args.filter,
        sorts=sorts,
        limit=args.limit,
    )
    return render_pages(pages)


def _handle_get_block_ids(client: NotionClient, args: argparse.Namespace) -> str:
    return "\n".join(client.get_block_ids(args.page_id))


def _handle_move(client: NotionClient, args: argparse.Namespace) -> str:
    result = client.move_page(
        args.page_id,
        args.parent,
        archive_original=not args.keep_original,
    )
    return render_move(result)


def _add_command(
    subparsers: "argparse._SubParsersAction[argparse.ArgumentParser]",
    name: str,
    help_text: str,
    handler: Handler,
) -> argparse.ArgumentParser:
    command = subparsers.add_parser(name, help=help_text)
    command.set_defaults(handler=handler)
    return command


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(prog="notion", description="A simple Notion CLI tool")
    parser.add_argument("--timeout", type=int, default=None, help="Request timeout in seconds")
    parser.add_argument("--api-key", default=None, help="Notion integration token")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    command = _add_command(subparsers, "search", "Search for pages and databases", _handle_search)
    command.add_argument("query", help="Search query")
    command.add_argument("-l", "--limit", type=int, default=DEFAULT_LIMIT, help="Maximum results")

    command = _add_command(subparsers, "read", "Read a page's content", _handle_read)
    command.add_argument("page_id", help="Page ID")

    command = _add_command(subparsers, "create", "Create a new page", _handle_create)
    command.add_argument("-p", "--parent", required=True, help="Parent page ID")
    command.add_argument("-t", "--title", required=True, help="Page title")
    command.add_argument("-c", "--content", default=None, help="Page content")

    command = _add_command(subparsers, "append", "Append a paragraph", _handle_append)
    command.add_argument("page_id", help="Page ID")
    command.add_argument("content", help="Content to append")

    command = _add_command(subparsers, "append-code", "Append a code block", _handle_append_code)
    command.add_argument("page_id", help="Page ID")
    command.add_argument("code", help="Code content")
    command.add_argument("-l", "--language", default="plain text", help="Programming language")

    command = _add_command(
        subparsers, "append-bookmark", "Append a bookmark", _handle_append_bookmark
    )
    command.add_argument("page_id", help="Page ID")
    command.add_argument("url", help="Bookmark URL")
    command.add_argument("-c", "--caption", default=None, help="Caption")

    command = _add_command(subparsers, "append-heading", "Append a heading", _handle_append_heading)
    command.add_argument("page_id", help="Page ID")
    command.add_argument("text", help="Heading text")
    command.add_argument("-l", "--level", type=int, choices=(1, 2, 3), default=2)

    command = _add_command(subparsers, "append-divider", "Append a divider", _handle_append_divider)
    command.add_argument("page_id", help="Page ID")

    command = _add_command(
        subparsers, "append-list", "Append a bulleted list", _handle_append_list
    )
    command.add_argument("page_id", help="Page ID")
    command.add_argument("items", help="List items (comma-separated)")

    command = _add_command(
        subparsers, "append-link", "Append a paragraph with a link", _handle_append_link
    )
    command.add_argument("page_id", help="Page ID")
    command.add_argument("--link-text", required=True, help="Link text")
    command.add_argument("--url", required=True, help="Link URL")
    command.add_argument("--prefix", default=None, help="Text before the link")
    command.add_argument("--suffix", default=None, help="Text after the link")

    command = _add_command(subparsers, "append-todo", "Append a to-do item", _handle_append_todo)
    command.add_argument("page_id", help="Page ID")
    command.add_argument("text", help="To-do text")
    command.add_argument("--checked", action="store_true", help="Mark the item as done")

    command = _add_command(subparsers, "update", "Update a page's title or icon", _handle_update)
    command.add_argument("page_id", help="Page ID")
    command.add_argument("-t", "--title", default=None, help="New title")
    command.add_argument("-i", "--icon", default=None, help="New icon (emoji)")

    command = _add_command(subparsers, "delete", "Delete (archive) a page", _handle_delete)
    command.add_argument("page_id", help="Page ID")

    command = _add_command(subparsers, "delete-block", "Delete a block", _handle_delete_block)
    command.add_argument("block_id", help="Block ID")

    command = _add_command(subparsers, "query", "Query a database", _handle_query)
    command.add_argument("database_id", help="Database ID")
    command.add_argument(
        "-f",
        "--filter",
        default=None,
        help="Filter as PropertyName[:type]=value; types: title, rich_text, select, "
        "checkbox, number",
    )
    command.add_argument("-s", "--sort", default=None, help="Sort by property")
    command.add_argument("--direction", default="desc", help="Sort direction (asc or desc)")
    command.add_argument("-l", "--limit", type=int, default=DEFAULT_LIMIT, help="Maximum results")

    command = _add_command(
        subparsers, "get-block-ids", "List the block IDs of a page", _handle_get_block_ids
    )
    command.add_argument("page_id", help="Page ID")

    command = _add_command(subparsers, "move", "Move a page to a new parent", _handle_move)
    command.add_argument("page_id", help="Page ID")
    command.add_argument("-p", "--parent", required=True, help="New parent page ID")
    command.add_argument(
        "--keep-original",
        action="store_true",
        help="Copy the page without archiving the original",
    )

    return parser


def run(argv: Sequence[str] | None = None, client: NotionClient | None = None) -> int:
    """Parse arguments, run one command and print its result.

    :param argv: Arguments, defaulting to ``sys.argv[1:]``.
    :param client: Pre-built client, mainly for tests.
    :returns: Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        configure_logging("DEBUG" if args.verbose else None)
        if client is None:
            config = resolve_config(api_key=args.api_key, timeout=args.timeout)
            client = NotionClient(
                token=config.api_key,
                timeout=config.timeout,
                api_version=config.api_version,
            )
        output = args.handler(client, args)
    except (NotionClientError, MissingApiKeyError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if output:
        print(output)
    return 0


def main() -> None:
    """Entry point for the ``notion`` console script."""
    sys.exit(run())
