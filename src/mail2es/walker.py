"""Depth-first walk of a message tree into part entries of a document.

Parts are numbered ``part-<depth>.<rank>``. The depth is bumped when a leaf is
the first node visited inside a multipart (or contained message), and the rank
counts leaves at that depth. Inside multipart/alternative only the last
rendering is kept: each alternative replaces the entry of the previous one.

The depth is never decreased when leaving a multipart, so siblings that follow
a nested multipart keep the deeper depth.
"""

from dataclasses import dataclass
from email.message import Message
from typing import Callable

import humanize

from .config import Config
from .content_types import ContentType, is_whitelisted, resolve_content_type
from .normalize import normalize_body
from .parsing import PartKind, child_parts, contained_message, decoded_octets, part_kind


Trace = Callable[[str], None]


def _no_trace(line: str) -> None:
    pass


@dataclass
class TraversalState:
    """Numbering state threaded through one message's walk."""
    depth: int = 0
    rank: int = 0
    last_entry_id: str = ""
    last_part: Message | None = None
    last_kind: PartKind | None = None


class TreeWalker:
    """Walks a parsed message and adds indexable parts to a document."""

    def __init__(self, config: Config | None = None, trace: Trace | None = None):
        self.config = config or Config()
        self._trace = trace if trace is not None and self.config.verbose else _no_trace

    def walk(
        self,
        document: dict,
        part: Message,
        parent: Message | None,
        state: TraversalState,
    ) -> None:
        """Visit part (and everything below it), mutating document and state."""
        kind = part_kind(part)
        self._trace_visit(part, parent, kind, state)

        if kind is PartKind.CONTAINER:
            state.last_part = part
            state.last_kind = kind
            self.walk(document, contained_message(part), None, state)
        elif kind is PartKind.MULTIPART:
            # children must see this node as the one visited just before them
            state.last_part = part
            state.last_kind = kind
            for child in child_parts(part):
                self.walk(document, child, part, state)
        elif kind is PartKind.LEAF:
            self._visit_leaf(document, part, parent, state)
        # PARTIAL and UNKNOWN: nothing to index

        state.last_part = part
        state.last_kind = kind

    def _visit_leaf(
        self,
        document: dict,
        part: Message,
        parent: Message | None,
        state: TraversalState,
    ) -> None:
        if parent is not None and part_kind(parent) in (PartKind.MULTIPART, PartKind.CONTAINER):
            if parent is state.last_part:
                # first leaf of a new level
                state.depth += 1
                state.rank = 0
            elif parent.get_content_type() == "multipart/alternative":
                self._trace(f"    replaces {state.last_entry_id}")
                document.pop(state.last_entry_id, None)

        state.rank += 1
        entry_id = f"part-{state.depth}.{state.rank}"
        state.last_entry_id = entry_id

        filename = part.get_filename()
        content_type = resolve_content_type(ContentType.from_part(part), filename)
        if not is_whitelisted(content_type):
            self._trace(f"    [{entry_id}] skipped")
            return

        octets = decoded_octets(part)
        document[entry_id] = self.format_part(octets, content_type, filename)
        self._trace(f"    [{entry_id}] {humanize.naturalsize(len(octets), binary=True)}")

    def format_part(
        self,
        octets: bytes,
        content_type: ContentType,
        filename: str | None,
    ) -> dict[str, str]:
        """Build the part entry: content-type, optional filename, body or file."""
        body = normalize_body(octets, content_type)
        entry = {"content-type": str(content_type)}
        if filename:
            entry["filename"] = filename
        entry[body.representation.key] = body.value
        return entry

    def _trace_visit(
        self,
        part: Message,
        parent: Message | None,
        kind: PartKind,
        state: TraversalState,
    ) -> None:
        parent_type = parent.get_content_type() if parent is not None else "null"
        indent = " " * (4 * state.depth)
        self._trace(f"{indent}({state.depth}) {parent_type} > {part.get_content_type()} [{kind.value}]")
