"""Reading and writing stored song documents.

Songs are persisted as JSON objects shaped like::

    {"id": ..., "title": ..., "artist": ..., "duration": ..., "audio_url": ...,
     "tuning": "E_STANDARD", "capo": 0, "transpose": 0,
     "song_blocks": [{"id": "block_1", "type": "lyrics", ...}, ...]}

Validation of that shape is done with pydantic models; the rest of the package
only sees the ``songsheet.models`` dataclasses. Loading is lenient: missing
fields take defaults and a malformed block is skipped rather than rejecting
the whole song.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from songsheet.exceptions import DocumentError
from songsheet.models import (
    DEFAULT_BLOCK_HEIGHT,
    DEFAULT_STRING_COUNT,
    NOTATION_MARKERS,
    VALID_STRING_COUNTS,
    Block,
    DrumTabBlock,
    LyricsBlock,
    ReferenceBlock,
    Song,
    TabBlock,
    TabNote,
)
from songsheet.tunings import DEFAULT_TUNING

logger = logging.getLogger(__name__)

WELCOME_CONTENT = (
    "[Verse 1]\n"
    "[G]This is where your lyrics go.\n"
    "Put chords in [C]brackets, right where they should [G]be.\n"
    "The [D]live preview below will update as you [G]type."
)


class TabNoteModel(BaseModel):
    """Stored form of a ``TabNote``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    string: int = Field(..., ge=0)
    fret: int
    position: float
    notation: str | None = None
    bend_target: int | None = Field(None, alias="bendTarget")

    @field_validator("notation")
    @classmethod
    def drop_unknown_notation(cls, v):
        if v is not None and v not in NOTATION_MARKERS:
            return None
        return v


class _BlockModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    label: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("label", mode="before")
    @classmethod
    def blank_label(cls, v):
        return "" if v is None else v


class LyricsBlockModel(_BlockModel):
    type: Literal["lyrics"]
    content: str = ""
    height: int = DEFAULT_BLOCK_HEIGHT


class TabDataModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    notes: list[Any] = Field(default_factory=list)

    @field_validator("notes", mode="before")
    @classmethod
    def notes_list(cls, v):
        return v if isinstance(v, list) else []


class TabBlockModel(_BlockModel):
    type: Literal["tab"]
    strings: int = DEFAULT_STRING_COUNT
    edit_mode: bool = Field(False, alias="editMode")
    data: TabDataModel = Field(default_factory=TabDataModel)

    @field_validator("strings", mode="before")
    @classmethod
    def supported_strings(cls, v):
        if v not in VALID_STRING_COUNTS:
            return DEFAULT_STRING_COUNT
        return v

    @field_validator("data", mode="before")
    @classmethod
    def data_mapping(cls, v):
        return v if isinstance(v, Mapping | TabDataModel) else {}


class DrumTabBlockModel(_BlockModel):
    type: Literal["drum_tab"]
    content: str = ""
    height: int = DEFAULT_BLOCK_HEIGHT


class ReferenceBlockModel(_BlockModel):
    type: Literal["reference"]
    original_id: str = Field("", alias="originalId")

    @field_validator("original_id", mode="before")
    @classmethod
    def coerce_original_id(cls, v):
        if v is None:
            return ""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


BlockModel = Annotated[
    LyricsBlockModel | TabBlockModel | DrumTabBlockModel | ReferenceBlockModel,
    Field(discriminator="type"),
]

BLOCK_ADAPTER: TypeAdapter[Any] = TypeAdapter(BlockModel)


class SongDocument(BaseModel):
    """Stored form of a ``Song``."""

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    title: str = ""
    artist: str = ""
    duration: str = ""
    audio_url: str | None = None
    tuning: str = DEFAULT_TUNING
    capo: int = Field(0, ge=0)
    transpose: int = 0
    song_blocks: list[Any] = Field(default_factory=list)

    @field_validator("title", "artist", "duration", mode="before")
    @classmethod
    def text_or_blank(cls, v):
        if v is None:
            return ""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("tuning", mode="before")
    @classmethod
    def default_tuning(cls, v):
        return v or DEFAULT_TUNING

    @field_validator("capo", "transpose", mode="before")
    @classmethod
    def zero_if_missing(cls, v):
        return 0 if v is None else v

    @field_validator("song_blocks", mode="before")
    @classmethod
    def blocks_list(cls, v):
        return v if isinstance(v, list) else []


def _notes_from_raw(raw_notes: list[Any], block_id: str) -> list[TabNote]:
    notes: list[TabNote] = []
    for raw in raw_notes:
        try:
            note = TabNoteModel.model_validate(raw)
        except ValidationError as e:
            logger.debug("Skipping malformed note in block %s: %s", block_id, e)
            continue
        notes.append(
            TabNote(
                string=note.string,
                fret=note.fret,
                position=note.position,
                notation=note.notation,
                bend_target=note.bend_target if note.notation == "b" else None,
            )
        )
    return notes


def _to_block(model: BaseModel) -> Block:
    if isinstance(model, LyricsBlockModel):
        return LyricsBlock(id=model.id, label=model.label, content=model.content, height=model.height)
    if isinstance(model, TabBlockModel):
        return TabBlock(
            id=model.id,
            label=model.label,
            strings=model.strings,
            edit_mode=model.edit_mode,
            notes=_notes_from_raw(model.data.notes, model.id),
        )
    if isinstance(model, DrumTabBlockModel):
        return DrumTabBlock(id=model.id, label=model.label, content=model.content, height=model.height)
    if isinstance(model, ReferenceBlockModel):
        return ReferenceBlock(id=model.id, label=model.label, original_id=model.original_id)
    msg = f"Unsupported block model: {type(model).__name__}"
    raise TypeError(msg)


def _unique_id(block_id: str, seen: set[str]) -> str:
    if block_id not in seen:
        return block_id
    n = 2
    while f"{block_id}_{n}" in seen:
        n += 1
    return f"{block_id}_{n}"


def load_blocks(raw_blocks: list[Any]) -> list[Block]:
    """Validate stored blocks, skipping malformed ones.

    A repeated id keeps its first block unchanged and gives later blocks a
    ``_2``, ``_3``... suffix.
    """
    blocks: list[Block] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_blocks):
        try:
            model = BLOCK_ADAPTER.validate_python(raw)
        except ValidationError as e:
            logger.warning("Skipping malformed block at index %d: %s", i, e.errors()[0]["msg"])
            continue
        block = _to_block(model)
        unique = _unique_id(block.id, seen)
        if unique != block.id:
            logger.warning("Renaming duplicate block id %r to %r", block.id, unique)
            block.id = unique
        seen.add(block.id)
        blocks.append(block)
    return blocks


def load_song(data: Mapping[str, Any]) -> Song:
    """Build a ``Song`` from a stored document.

    Parameters
    ----------
    data : Mapping[str, Any]
        Decoded JSON document.

    Returns
    -------
    Song
        The song, with defaults for anything missing.

    Raises
    ------
    DocumentError
        If ``data`` is not a mapping or its song-level fields are invalid.

    Examples
    --------
    >>> song = load_song({"title": "Demo", "song_blocks": [
    ...     {"id": "block_1", "type": "lyrics", "label": "Verse", "content": "[G]Hi"},
    ...     {"id": "block_2", "type": "mystery"},
    ... ]})
    >>> song.tuning, song.capo, [b.label for b in song.blocks]
    ('E_STANDARD', 0, ['Verse'])
    """
    if not isinstance(data, Mapping):
        msg = f"Song document must be a mapping, got {type(data).__name__}"
        raise DocumentError(msg)
    try:
        document = SongDocument.model_validate(dict(data))
    except ValidationError as e:
        msg = f"Invalid song document: {e}"
        raise DocumentError(msg) from e

    return Song(
        id=document.id,
        title=document.title,
        artist=document.artist,
        duration=document.duration,
        audio_url=document.audio_url,
        tuning=document.tuning,
        capo=document.capo,
        transpose=document.transpose,
        blocks=load_blocks(document.song_blocks),
    )


def _note_model(note: TabNote) -> TabNoteModel:
    return TabNoteModel(
        string=note.string,
        fret=note.fret,
        position=note.position,
        notation=note.notation,
        bend_target=note.bend_target,
    )


def _block_model(block: Block) -> BaseModel:
    if isinstance(block, LyricsBlock):
        return LyricsBlockModel(type="lyrics", id=block.id, label=block.label, content=block.content, height=block.height)
    if isinstance(block, TabBlock):
        notes = [_note_model(note).model_dump(by_alias=True, exclude_none=True) for note in block.notes]
        return TabBlockModel(
            type="tab",
            id=block.id,
            label=block.label,
            strings=block.strings,
            edit_mode=block.edit_mode,
            data=TabDataModel(notes=notes),
        )
    if isinstance(block, DrumTabBlock):
        return DrumTabBlockModel(type="drum_tab", id=block.id, label=block.label, content=block.content, height=block.height)
    if isinstance(block, ReferenceBlock):
        return ReferenceBlockModel(type="reference", id=block.id, label=block.label, original_id=block.original_id)
    msg = f"Unsupported block: {type(block).__name__}"
    raise TypeError(msg)


def dump_block(block: Block) -> dict[str, Any]:
    """Serialize one block to its stored JSON shape."""
    return _block_model(block).model_dump(by_alias=True)


def dump_song(song: Song) -> dict[str, Any]:
    """Serialize a ``Song`` to its stored JSON shape.

    ``load_song(dump_song(song))`` gives back an equal song.
    """
    document = SongDocument(
        id=song.id,
        title=song.title,
        artist=song.artist,
        duration=song.duration,
        audio_url=song.audio_url,
        tuning=song.tuning,
        capo=song.capo,
        transpose=song.transpose,
        song_blocks=[dump_block(block) for block in song.blocks],
    )
    return document.model_dump()


def new_song() -> Song:
    """Return a blank song holding the welcome lyrics block."""
    block = LyricsBlock(
        id=f"block_{time.time_ns() // 1_000_000}",
        label="Verse 1",
        content=WELCOME_CONTENT,
    )
    return Song(blocks=[block])
