"""Notion API client for searching, reading and editing pages and databases."""

import logging
from typing import Any

from src.notion.blocks import (
    MAX_CHILDREN_PER_REQUEST,
    Block,
    bookmark,
    bulleted_list,
    code,
    decode_block,
    decode_blocks,
    divider,
    encode_blocks,
    heading,
    is_supported,
    link_paragraph,
    paragraph,
    to_do,
)
from src.notion.exceptions import NotionClientError, PartialMoveError
from src.notion.filters import SortSpec, build_filter, compile_sorts
from src.notion.identifiers import normalize_id
from src.notion.models import MoveResult, NotionPage, PageSummary
from src.notion.pagination import paginate
from src.notion.parser import (
    build_icon,
    build_title_property,
    parse_page,
    parse_summary,
)
from src.notion.transport import NOTION_VERSION, REQUEST_TIMEOUT, NotionTransport

logger = logging.getLogger(__name__)

# Default maximum number of results for search and database queries
DEFAULT_LIMIT = 100


class NotionClient:
    """Client for interacting with the Notion API.

    Each method validates its identifiers before any request is made, builds
    the request payload and returns typed results. Rate-limit retries happen
    inside the transport; no method re-issues requests itself.
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        api_version: str = NOTION_VERSION,
        transport: NotionTransport | None = None,
    ) -> None:
        """Initialise the Notion client.

        :param token: Notion integration token. Required unless a transport
            is given.
        :param timeout: Timeout in seconds for each HTTP exchange.
        :param api_version: Notion API version header value.
        :param transport: Pre-built transport, mainly for tests.
        :raises ValueError: If neither a token nor a transport is provided.
        """
        if transport is None:
            if not token:
                raise ValueError(
                    "Notion integration token not provided. Set NOTION_API_KEY "
                    "or pass the token parameter."
                )
            transport = NotionTransport(token=token, timeout=timeout, api_version=api_version)

        self._transport = transport
        logger.debug("NotionClient initialised")

    # Search

    def search(self, query: str, *, limit: int = DEFAULT_LIMIT) -> list[PageSummary]:
        """Search pages and databases shared with the integration.

        :param query: Text to search for in titles.
        :param limit: Maximum number of results, fetched across pages.
        :returns: Matching pages and databases in API order.
        :raises NotionClientError: If any request fails.
        """
        logger.info(f"Searching for query={query!r}")
        results = paginate(
            self._transport,
            "POST",
            "search",
            body={"query": query},
            limit=limit,
        )
        logger.info(f"Search returned {len(results)} results")
        return [parse_summary(item) for item in results]

    # Page endpoints

    def get_page(self, page_id: str) -> NotionPage:
        """Retrieve a single page.

        :param page_id: Notion page ID.
        :returns: Page with its properties.
        :raises NotionClientError: If the ID is invalid or the request fails.
        """
        page_id = normalize_id(page_id)
        logger.info(f"Retrieving page: {page_id}")
        return parse_page(self._transport.request("GET", f"pages/{page_id}"))

    def create_page(
        self,
        parent_id: str,
        title: str,
        *,
        content: str | None = None,
        children: list[Block] | None = None,
    ) -> PageSummary:
        """Create a page under a parent page.

        :param parent_id: Parent page ID.
        :param title: Page title.
        :param content: Optional text added as a first paragraph.
        :param children: Optional blocks added after the paragraph.
        :returns: Summary of the created page.
        :raises ValueError: If more than 100 blocks are given.
        :raises NotionClientError: If the ID is invalid or the request fails.
        """
        parent_id = normalize_id(parent_id)

        blocks: list[Block] = []
        if content:
            blocks.append(paragraph(content))
        blocks.extend(children or [])
        if len(blocks) > MAX_CHILDREN_PER_REQUEST:
            raise ValueError(
                f"A page can be created with at most {MAX_CHILDREN_PER_REQUEST} blocks, "
                f"got {len(blocks)}"
            )

        logger.info(f"Creating page {title!r} under parent: {parent_id}")
        payload: dict[str, Any] = {
            "parent": {"page_id": parent_id},
            "properties": build_title_property(title),
            "children": encode_blocks(blocks),
        }
        return parse_summary(self._transport.request("POST", "pages", body=payload))

    def update_page(
        self,
        page_id: str,
        *,
        title: str | None = None,
        icon: str | None = None,
    ) -> NotionPage:
        """Update a page's title and/or emoji icon.

        :param page_id: Notion page ID.
        :param title: New title.
        :param icon: New emoji icon.
        :returns: Updated page.
        :raises ValueError: If neither title nor icon is given.
        :raises NotionClientError: If the ID is invalid or the request fails.
        """
        if title is None and icon is None:
            raise ValueError("At least one of title or icon must be specified")

        page_id = normalize_id(page_id)
        payload: dict[str, Any] = {}
        if title is not None:
            payload["properties"] = build_title_property(title)
        if icon is not None:
            payload["icon"] = build_icon(icon)

        logger.info(f"Updating page: {page_id}")
        return parse_page(self._transport.request("PATCH", f"pages/{page_id}", body=payload))

    def archive_page(self, page_id: str) -> NotionPage:
        """Archive (soft-delete) a page.

        :param page_id: Notion page ID.
        :returns: The archived page.
        :raises NotionClientError: If the ID is invalid or the request fails.
        """
        page_id = normalize_id(page_id)
        logger.info(f"Archiving page: {page_id}")
        return parse_page(
            self._transport.request("PATCH", f"pages/{page_id}", body={"archived": True})
        )

    # Block (page content) endpoints

    def get_blocks(self, block_id: str) -> list[Block]:
        """Get all child blocks of a page or block.

        :param block_id: The Notion page or block ID.
        :returns: Decoded blocks in page order.
        :raises NotionClientError: If the ID is invalid or any request fails.
        """
        block_id = normalize_id(block_id)
        logger.info(f"Retrieving page content: {block_id}")
        results = paginate(self._transport, "GET", f"blocks/{block_id}/children")
        logger.info(f"Retrieved {len(results)} blocks from: {block_id}")
        return decode_blocks(results)

    def get_block_ids(self, block_id: str) -> list[str]:
        """Get the IDs of all child blocks of a page or block."""
        return [block.id for block in self.get_blocks(block_id) if block.id]

    def append_blocks(self, block_id: str, blocks: list[Block]) -> list[Block]:
        """Append blocks to a page or block.

        Blocks are sent in chunks of at most 100, the API limit per request.

        :param block_id: The Notion page or block ID.
        :param blocks: Blocks to append.
        :returns: The created blocks as returned by the API.
        :raises ValueError: If a block is unsupported.
        :raises NotionClientError: If the ID is invalid or a request fails.
        """
        block_id = normalize_id(block_id)
        encoded = encode_blocks(blocks)
        if not encoded:
            logger.debug(f"No blocks to append to: {block_id}")
            return []

        return self._append_encoded(block_id, encoded)

    def _append_encoded(self, block_id: str, encoded: list[dict[str, Any]]) -> list[Block]:
        logger.info(f"Appending {len(encoded)} blocks to: {block_id}")
        created: list[Block] = []
        for start in range(0, len(encoded), MAX_CHILDREN_PER_REQUEST):
            chunk = encoded[start : start + MAX_CHILDREN_PER_REQUEST]
            response = self._transport.request(
                "PATCH", f"blocks/{block_id}/children", body={"children": chunk}
            )
            created.extend(decode_blocks(response.get("results", [])))
        return created

    def append_paragraph(self, block_id: str, text: str) -> list[Block]:
        """Append a paragraph of plain text."""
        return self.append_blocks(block_id, [paragraph(text)])

    def append_code(
        self, block_id: str, text: str, *, language: str = "plain text"
    ) -> list[Block]:
        """Append a code block."""
        return self.append_blocks(block_id, [code(text, language)])

    def append_bookmark(
        self, block_id: str, url: str, *, caption: str | None = None
    ) -> list[Block]:
        """Append a bookmark with an optional caption."""
        return self.append_blocks(block_id, [bookmark(url, caption)])

    def append_heading(self, block_id: str, text: str, *, level: int = 2) -> list[Block]:
        """Append a heading of level 1, 2 or 3.

        :raises ValueError: If the level is out of range.
        """
        return self.append_blocks(block_id, [heading(text, level)])

    def append_divider(self, block_id: str) -> list[Block]:
        """Append a divider."""
        return self.append_blocks(block_id, [divider()])

    def append_list(self, block_id: str, items: list[str]) -> list[Block]:
        """Append a bulleted list, one item per non-empty entry.

        :raises ValueError: If every entry is empty.
        """
        list_blocks = bulleted_list(items)
        if not list_blocks:
            raise ValueError("At least one non-empty list item is required")
        return self.append_blocks(block_id, list(list_blocks))

    def append_link(
        self,
        block_id: str,
        link_text: str,
        url: str,
        *,
        prefix: str | None = None,
        suffix: str | None = None,
    ) -> list[Block]:
        """Append a paragraph containing a link."""
        return self.append_blocks(
            block_id, [link_paragraph(link_text, url, prefix=prefix, suffix=suffix)]
        )

    def append_todo(self, block_id: str, text: str, *, checked: bool = False) -> list[Block]:
        """Append a to-do item."""
        return self.append_blocks(block_id, [to_do(text, checked=checked)])

    def delete_block(self, block_id: str) -> Block:
        """Delete (archive) a block.

        :param block_id: The block ID to delete.
        :returns: The deleted block.
        :raises NotionClientError: If the ID is invalid or the request fails.
        """
        block_id = normalize_id(block_id)
        logger.info(f"Deleting block: {block_id}")
        return decode_block(self._transport.request("DELETE", f"blocks/{block_id}"))

    # Database endpoints

    def query_database(
        self,
        database_id: str,
        *,
        filter_expr: str | None = None,
        sorts: list[SortSpec] | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[NotionPage]:
        """Query pages from a database, handling pagination automatically.

        :param database_id: Notion database ID.
        :param filter_expr: Optional filter expression such as ``Status:select=Done``.
        :param sorts: Optional sort order.
        :param limit: Maximum number of results.
        :returns: Matching pages in API order.
        :raises NotionClientError: If the ID or filter is invalid, or a request fails.
        """
        database_id = normalize_id(database_id)

        body: dict[str, Any] = {}
        if filter_expr is not None:
            body["filter"] = build_filter(filter_expr)
        if sorts:
            body["sorts"] = compile_sorts(sorts)

        logger.info(f"Querying database: {database_id}")
        results = paginate(
            self._transport,
            "POST",
            f"databases/{database_id}/query",
            body=body,
            limit=limit,
        )
        logger.info(f"Retrieved {len(results)} pages from database: {database_id}")
        return [parse_page(page) for page in results]

    # Compound operations

    def move_page(
        self,
        page_id: str,
        new_parent_id: str,
        *,
        archive_original: bool = True,
    ) -> MoveResult:
        """Move a page by copying it under a new parent and archiving the original.

        Nested blocks are copied under their copied parents. The whole source
        tree is read before the copy is created. The move is not atomic: if
        any step after the copy was created fails, ``PartialMoveError``
        carries the ID of the copy and the copy is not rolled back.

        :param page_id: Page to move.
        :param new_parent_id: New parent page ID.
        :param archive_original: Whether to archive the original after copying.
        :returns: Details of the created copy.
        :raises PartialMoveError: If a step after the create fails.
        :raises NotionClientError: If the IDs are invalid or reading/creating fails.
        """
        page_id = normalize_id(page_id)
        new_parent_id = normalize_id(new_parent_id)

        source = self.get_page(page_id)
        blocks = self.get_blocks(page_id)
        copyable = [block for block in blocks if is_supported(block)]
        children, nested_skipped = self._read_children(copyable)
        skipped = len(blocks) - len(copyable) + nested_skipped
        copied = len(copyable) + sum(len(nested) for nested in children.values())
        if skipped:
            logger.warning(f"Skipping {skipped} unsupported blocks while moving page: {page_id}")

        first_chunk = copyable[:MAX_CHILDREN_PER_REQUEST]
        created = self.create_page(new_parent_id, source.title, children=first_chunk)
        logger.info(f"Copied page {page_id} to {created.id}")

        try:
            remaining = copyable[MAX_CHILDREN_PER_REQUEST:]
            if remaining:
                self._append_encoded(created.id, encode_blocks(remaining))
            self._copy_children(copyable, created.id, children)
            if archive_original:
                self.archive_page(page_id)
        except NotionClientError as e:
            logger.error(f"Move of page {page_id} failed after creating copy {created.id}")
            raise PartialMoveError(created.id, e) from e

        return MoveResult(
            source_id=page_id,
            created=created,
            archived_original=archive_original,
            copied_blocks=copied,
            skipped_blocks=skipped,
        )

    def _read_children(self, blocks: list[Block]) -> tuple[dict[str, list[Block]], int]:
        """Read the nested children of blocks, recursively.

        :param blocks: Blocks whose children should be read.
        :returns: Supported children keyed by parent block ID, and the number
            of unsupported children skipped.
        """
        children: dict[str, list[Block]] = {}
        skipped = 0
        pending = [block.id for block in blocks if block.has_children and block.id]

        while pending:
            parent_id = pending.pop()
            nested = self.get_blocks(parent_id)
            supported = [block for block in nested if is_supported(block)]
            skipped += len(nested) - len(supported)
            children[parent_id] = supported
            pending.extend(block.id for block in supported if block.has_children and block.id)

        return children, skipped

    def _copy_children(
        self,
        sources: list[Block],
        target_id: str,
        children: dict[str, list[Block]],
    ) -> None:
        """Append the children of each source block under its copy.

        Copies are matched to sources by position under ``target_id``, which
        holds exactly the copied blocks.

        :raises NotionClientError: If the copies do not line up with the sources.
        """
        if not any(source.id in children for source in sources):
            return

        copies = self.get_blocks(target_id)
        if len(copies) != len(sources):
            raise NotionClientError(
                f"Expected {len(sources)} copied blocks under {target_id}, found {len(copies)}"
            )

        for source, copy in zip(sources, copies, strict=True):
            nested = children.get(source.id) if source.id else None
            if not nested:
                continue
            if copy.id is None:
                raise NotionClientError(f"Copied block under {target_id} has no ID")
            self._append_encoded(copy.id, encode_blocks(nested))
            self._copy_children(nested, copy.id, children)
