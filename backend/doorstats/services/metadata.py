"""Game metadata from Synchronet's ``xtrn.ini``.

The file is made of ``[sec:KEY]`` sections, each naming a category, and
``[prog:KEY:CODE]`` program blocks naming one external program. Both kinds
of block carry their display name on a ``name=`` line::

    [sec:GAMES]
    name=Games

    [prog:GAMES:TW2002]
    name=Trade Wars 2002

Parsing is split in two: ``classify_lines`` turns raw lines into typed events
and ``MetadataBuilder`` folds those events into a lookup table and a library
listing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from doorstats.models import LibraryGame

logger = logging.getLogger(__name__)

SECTION_PREFIX = "[sec:"
PROGRAM_PREFIX = "[prog:"
NAME_PREFIX = "name="


@dataclass(frozen=True)
class SectionStart:
    key: str


@dataclass(frozen=True)
class NameDeclaration:
    value: str


@dataclass(frozen=True)
class ProgramStart:
    category_key: str
    door_code: str


ConfigEvent = Union[SectionStart, NameDeclaration, ProgramStart]


class _State(Enum):
    TOP_LEVEL = "top_level"
    AWAITING_PROGRAM_NAME = "awaiting_program_name"


def _parse_program_header(line: str) -> Optional[ProgramStart]:
    parts = line.split(":")
    if len(parts) != 3 or "]" not in parts[2]:
        return None
    return ProgramStart(category_key=parts[1], door_code=parts[2].removesuffix("]"))


def classify_lines(lines: Iterable[str]) -> Iterator[ConfigEvent]:
    """Classify config lines into section, program and name events.

    After a program header only the first following ``name=`` line is
    reported; anything in between, headers included, is skipped. Outside a
    program block, ``name=`` lines belong to the current section.
    """
    state = _State.TOP_LEVEL
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        if state is _State.AWAITING_PROGRAM_NAME:
            if line.startswith(NAME_PREFIX):
                state = _State.TOP_LEVEL
                yield NameDeclaration(line.removeprefix(NAME_PREFIX))
            continue

        if line.startswith(SECTION_PREFIX):
            yield SectionStart(line.removeprefix(SECTION_PREFIX).removesuffix("]"))
        elif line.startswith(NAME_PREFIX):
            yield NameDeclaration(line.removeprefix(NAME_PREFIX))
        elif line.startswith(PROGRAM_PREFIX):
            program = _parse_program_header(line)
            if program is not None:
                state = _State.AWAITING_PROGRAM_NAME
                yield program


@dataclass(frozen=True)
class GameMetadata:
    door_code: Optional[str] = None
    category: Optional[str] = None


NOT_FOUND = GameMetadata()


class MetadataTable:
    """Name lookup and library listing built from one read of ``xtrn.ini``."""

    def __init__(
        self,
        entries: Optional[Dict[str, GameMetadata]] = None,
        library: Optional[List[LibraryGame]] = None
    ):
        self._entries = entries or {}
        self.library = library or []

    def resolve(self, game_name: str) -> GameMetadata:
        return self._entries.get(game_name, NOT_FOUND)

    def __len__(self) -> int:
        return len(self._entries)


class MetadataBuilder:
    """Fold config events into a ``MetadataTable``."""

    def __init__(self, sysop_category: str):
        self.sysop_category = sysop_category
        self.current_section: Optional[str] = None
        self.category_names: Dict[str, str] = {}
        self.pending_program: Optional[ProgramStart] = None
        self.entries: Dict[str, GameMetadata] = {}
        self.library: List[LibraryGame] = []

    def feed(self, event: ConfigEvent) -> None:
        if isinstance(event, SectionStart):
            self.current_section = event.key
        elif isinstance(event, ProgramStart):
            self.pending_program = event
        elif self.pending_program is not None:
            self._add_program(self.pending_program, event.value)
            self.pending_program = None
        else:
            self.category_names[self.current_section] = event.value

    def _add_program(self, program: ProgramStart, game_name: str) -> None:
        category = self.category_names.get(program.category_key, "")

        # The first block declaring a name owns it. Sysop-only programs are
        # redacted to "not found" instead of exposing their real metadata.
        if game_name not in self.entries:
            if category == self.sysop_category:
                self.entries[game_name] = NOT_FOUND
            else:
                self.entries[game_name] = GameMetadata(program.door_code, category)

        if program.category_key != self.sysop_category:
            self.library.append(LibraryGame(
                game_name=game_name,
                category=category,
                door_code=program.door_code
            ))

    def build(self) -> MetadataTable:
        return MetadataTable(dict(self.entries), list(self.library))


def parse_metadata(lines: Iterable[str], sysop_category: str) -> MetadataTable:
    builder = MetadataBuilder(sysop_category)
    for event in classify_lines(lines):
        builder.feed(event)
    return builder.build()


def load_metadata(path: Union[str, Path], sysop_category: str) -> MetadataTable:
    """Read ``xtrn.ini``; an unreadable file yields an empty table."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            table = parse_metadata(handle, sysop_category)
    except OSError as e:
        logger.error(f"Error opening xtrn.ini file {path}: {e}")
        return MetadataTable()

    logger.info(f"Loaded {len(table)} games from {path} ({len(table.library)} in library)")
    return table
