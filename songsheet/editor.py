"""Editing session over a single song document.

``SongEditor`` owns one ``Song`` plus the transient state of the editing UI:
the selected fretboard note, a pending fret choice after a click on an empty
spot, whether a note is being dragged, and the chord queue used for quick
chord entry into lyrics. All block and fretboard edits go through it so that
ids stay unique and references stay consistent.

Usage::

    editor = SongEditor()
    tab = editor.add_block("tab")
    editor.toggle_edit_mode(tab.id)
    editor.click_fretboard(tab.id, x=180, y=90)
    editor.confirm_fret(5)
    print(editor.render().to_text())
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import Any

from songsheet.document import dump_song, load_song, new_song
from songsheet.exceptions import BlockNotFoundError, InvalidReferenceError, SongsheetError
from songsheet.fretboard.geometry import DEFAULT_GEOMETRY, FretboardGeometry
from songsheet.fretboard.notes import (
    add_note,
    delete_note,
    drop_note,
    get_fret_from_coordinate,
    move_note,
    set_notation,
)
from songsheet.fretboard.renderer import OverlayNote, render_notes_overlay
from songsheet.importer.models import ImportResult
from songsheet.importer.parser import parse_pasted_song
from songsheet.lyrics import insert_chord, transpose_lyrics
from songsheet.models import (
    VALID_STRING_COUNTS,
    Block,
    BlockType,
    DrumTabBlock,
    LyricsBlock,
    MusicalContext,
    ReferenceBlock,
    Song,
    TabBlock,
    TabNote,
)
from songsheet.render import RenderedOutput, render_document
from songsheet.tunings import get_tuning

logger = logging.getLogger(__name__)

# Label stem for new blocks of each type; a running number is appended
BASE_LABELS: dict[str, str] = {
    "lyrics": "Verse",
    "tab": "Tab",
    "drum_tab": "Drum Tab",
}


@dataclass(frozen=True)
class NoteSelection:
    """The selected note: a block id and an index into its notes."""

    block_id: str
    index: int


@dataclass(frozen=True)
class PendingFret:
    """A clicked fretboard spot waiting for the player to confirm a fret.

    Parameters
    ----------
    block_id : str
        Tab block that was clicked.
    string : int
        String under the click.
    position : float
        Horizontal coordinate of the click.
    fret : int
        Fret under the click, offered as the default choice.
    """

    block_id: str
    string: int
    position: float
    fret: int


def _shift_note(note: TabNote, semitones: int) -> TabNote:
    bend_target = None if note.bend_target is None else note.bend_target + semitones
    return replace(note, fret=note.fret + semitones, bend_target=bend_target)


class SongEditor:
    """Edits one song in place.

    Parameters
    ----------
    song : Song | None
        The document to edit, or None to start from the new-song template.
    geometry : FretboardGeometry
        Diagram geometry used to turn coordinates into notes.
    """

    def __init__(self, song: Song | None = None, geometry: FretboardGeometry = DEFAULT_GEOMETRY):
        self.song = song if song is not None else new_song()
        self.geometry = geometry
        self.selection: NoteSelection | None = None
        self.pending: PendingFret | None = None
        self.dragging = False
        self.chord_queue: list[str] = []
        self.chord_queue_index = 0
        self._id_counter = 0

    @classmethod
    def from_document(cls, data: Mapping[str, Any], geometry: FretboardGeometry = DEFAULT_GEOMETRY) -> SongEditor:
        return cls(load_song(data), geometry)

    def to_document(self) -> dict[str, Any]:
        return dump_song(self.song)

    @property
    def context(self) -> MusicalContext:
        return self.song.context

    # Blocks

    def block(self, block_id: str) -> Block:
        """Return the block with ``block_id``.

        Raises
        ------
        BlockNotFoundError
            If the song has no such block.
        """
        block = self.song.find_block(block_id)
        if block is None:
            raise BlockNotFoundError(block_id)
        return block

    def tab_block(self, block_id: str) -> TabBlock:
        block = self.block(block_id)
        if not isinstance(block, TabBlock):
            msg = f"Block {block_id!r} is a {block.block_type} block, not a tab block"
            raise SongsheetError(msg)
        return block

    def new_block_id(self) -> str:
        """Return a ``block_<n>`` id not used in the song."""
        existing = self.song.block_ids()
        while True:
            self._id_counter += 1
            candidate = f"block_{self._id_counter}"
            if candidate not in existing:
                return candidate

    def _next_label(self, base: str) -> str:
        count = sum(1 for block in self.song.blocks if block.label.startswith(base))
        return f"{base} {count + 1}"

    def add_block(self, block_type: BlockType, label: str | None = None) -> Block:
        """Append an empty block of ``block_type``.

        Without a label, new blocks are numbered per type: "Verse 1",
        "Verse 2", "Tab 1"...

        Raises
        ------
        SongsheetError
            For "reference"; use ``add_reference`` instead.
        """
        if block_type == "reference":
            msg = "Reference blocks are created with add_reference"
            raise SongsheetError(msg)
        if block_type not in BASE_LABELS:
            msg = f"Unknown block type: {block_type!r}"
            raise SongsheetError(msg)

        block_id = self.new_block_id()
        label = label or self._next_label(BASE_LABELS[block_type])
        block: Block
        if block_type == "lyrics":
            block = LyricsBlock(id=block_id, label=label)
        elif block_type == "tab":
            block = TabBlock(id=block_id, label=label)
        else:
            block = DrumTabBlock(id=block_id, label=label)
        self.song.blocks.append(block)
        return block

    def add_reference(self, original_id: str, label: str | None = None) -> ReferenceBlock:
        """Append a repeat of another block.

        Raises
        ------
        InvalidReferenceError
            If ``original_id`` is missing or is itself a reference.
        """
        original = self.song.find_block(original_id)
        if original is None:
            raise InvalidReferenceError(original_id, "no such block")
        if isinstance(original, ReferenceBlock):
            raise InvalidReferenceError(original_id, "block is a reference")

        block = ReferenceBlock(
            id=self.new_block_id(),
            label=label or f"Reference to {original.label}",
            original_id=original_id,
        )
        self.song.blocks.append(block)
        return block

    def remove_block(self, block_id: str) -> list[Block]:
        """Delete a block together with every reference to it.

        Returns
        -------
        list[Block]
            The removed blocks, the named block first.
        """
        target = self.block(block_id)
        removed = [target]
        kept: list[Block] = []
        for block in self.song.blocks:
            if block is target:
                continue
            if isinstance(block, ReferenceBlock) and block.original_id == block_id:
                removed.append(block)
                continue
            kept.append(block)
        self.song.blocks = kept

        if self.selection is not None and self.selection.block_id == block_id:
            self.clear_selection()
        if self.pending is not None and self.pending.block_id == block_id:
            self.pending = None
        return removed

    def move_block(self, block_id: str, new_index: int) -> None:
        """Move a block to ``new_index`` (clamped to the list)."""
        block = self.block(block_id)
        self.song.blocks.remove(block)
        new_index = max(0, min(new_index, len(self.song.blocks)))
        self.song.blocks.insert(new_index, block)

    def rename_block(self, block_id: str, label: str) -> None:
        label = label.strip()
        if label:
            self.block(block_id).label = label

    def update_block(self, block_id: str, **changes: Any) -> Block:
        """Set fields on a block.

        Raises
        ------
        BlockNotFoundError
            If the song has no such block.
        SongsheetError
            If a field does not exist on the block or is its id.
        """
        block = self.block(block_id)
        names = {f.name for f in fields(block)} - {"id"}
        unknown = set(changes) - names
        if unknown:
            msg = f"Cannot set {sorted(unknown)} on a {block.block_type} block"
            raise SongsheetError(msg)
        if "strings" in changes and changes["strings"] not in VALID_STRING_COUNTS:
            msg = f"Unsupported string count: {changes['strings']!r}"
            raise SongsheetError(msg)
        for name, value in changes.items():
            setattr(block, name, value)
        return block

    def toggle_edit_mode(self, block_id: str) -> bool:
        """Switch a tab block in or out of edit mode; leaving drops its selection."""
        block = self.tab_block(block_id)
        block.edit_mode = not block.edit_mode
        if not block.edit_mode:
            if self.selection is not None and self.selection.block_id == block_id:
                self.clear_selection()
            if self.pending is not None and self.pending.block_id == block_id:
                self.pending = None
        return block.edit_mode

    # Fretboard

    def click_fretboard(self, block_id: str, x: float, y: float) -> PendingFret | None:
        """Handle a click on an empty spot of a tab block's diagram.

        Any note selection is cleared. If the block is in edit mode and the
        click lands on the fretboard, the spot is held as a pending fret until
        ``confirm_fret`` or ``cancel_fret``.
        """
        block = self.tab_block(block_id)
        if not block.edit_mode:
            return None
        self.clear_selection()

        hit = get_fret_from_coordinate(x, y, block.strings, self.geometry)
        if hit is None:
            self.pending = None
            return None
        self.pending = PendingFret(block_id=block_id, string=hit.string, position=hit.position, fret=hit.fret)
        return self.pending

    def confirm_fret(self, fret: int | None = None) -> TabNote | None:
        """Place the pending note at ``fret`` (default: the fret clicked)."""
        pending = self.pending
        self.pending = None
        if pending is None:
            return None
        block = self.song.find_block(pending.block_id)
        if not isinstance(block, TabBlock):
            return None
        chosen = pending.fret if fret is None else fret
        return add_note(block, pending.string, chosen, pending.position, self.context)

    def cancel_fret(self) -> None:
        self.pending = None

    def select_note(self, block_id: str, index: int) -> bool:
        """Press on a note. Pressing the already selected note starts a drag.

        Returns
        -------
        bool
            True if a drag started.
        """
        block = self.tab_block(block_id)
        if not block.edit_mode or not 0 <= index < len(block.notes):
            return False
        selection = NoteSelection(block_id=block_id, index=index)
        if self.selection == selection:
            self.dragging = True
            return True
        self.selection = selection
        self.dragging = False
        return False

    def clear_selection(self) -> None:
        self.selection = None
        self.dragging = False

    def _selected(self) -> tuple[TabBlock, int] | None:
        if self.selection is None:
            return None
        block = self.song.find_block(self.selection.block_id)
        if not isinstance(block, TabBlock) or not 0 <= self.selection.index < len(block.notes):
            self.clear_selection()
            return None
        return block, self.selection.index

    def drag_to(self, x: float, y: float) -> TabNote | None:
        """Move the dragged note under the pointer, keeping its fret."""
        selected = self._selected()
        if selected is None or not self.dragging:
            return None
        block, index = selected
        hit = get_fret_from_coordinate(x, y, block.strings, self.geometry)
        if hit is None:
            return None
        return move_note(block, index, hit.string, hit.position)

    def end_drag(self, x: float | None = None, y: float | None = None) -> TabNote | None:
        """Finish a drag.

        With a drop point the note is re-placed there, fret included, the same
        way a click places a note. Without one the note stays where the drag
        left it.
        """
        if not self.dragging:
            return None
        self.dragging = False
        selected = self._selected()
        if selected is None or x is None or y is None:
            return None
        block, index = selected
        return drop_note(block, index, x, y, self.context, self.geometry)

    def delete_selected(self) -> TabNote | None:
        selected = self._selected()
        if selected is None:
            return None
        block, index = selected
        self.clear_selection()
        return delete_note(block, index)

    def set_selected_notation(self, notation: str | None, bend_target: int | None = None) -> TabNote | None:
        """Apply a notation marker from the palette to the selected note."""
        selected = self._selected()
        if selected is None:
            return None
        block, index = selected
        return set_notation(block, index, notation, self.context, bend_target)

    def overlay(self, block_id: str, *, include_transpose: bool = False) -> list[OverlayNote]:
        """Note glyphs for a tab block's diagram, marking the selected note."""
        block = self.tab_block(block_id)
        selected = None
        if self.selection is not None and self.selection.block_id == block_id:
            selected = self.selection.index
        return render_notes_overlay(
            block,
            self.context,
            selected,
            self.geometry,
            include_transpose=include_transpose,
        )

    # Musical context

    def transpose(self, amount: int) -> int:
        """Shift the song's transpose by ``amount`` semitones.

        Stored lyrics and notes are left alone; the shift is applied when
        rendering.
        """
        self.song.transpose += amount
        return self.song.transpose

    def bake_transpose(self) -> None:
        """Write the current transpose into the stored content and reset it to 0.

        Lyrics chords are rewritten and tab frets shifted so the rendered
        output is the same before and after.
        """
        amount = self.song.transpose
        if amount == 0:
            return
        for block in self.song.blocks:
            if isinstance(block, LyricsBlock):
                block.content = transpose_lyrics(block.content, amount)
            elif isinstance(block, TabBlock):
                block.notes = [_shift_note(note, -amount) for note in block.notes]
        self.song.transpose = 0
        logger.debug("Baked transpose %+d into song %r", amount, self.song.title)

    def set_capo(self, capo: int) -> None:
        if capo < 0:
            msg = f"Capo must be >= 0, got {capo}"
            raise SongsheetError(msg)
        self.song.capo = capo

    def set_tuning(self, tuning: str) -> None:
        if get_tuning(tuning) is None:
            msg = f"Unknown tuning: {tuning!r}"
            raise SongsheetError(msg)
        self.song.tuning = tuning

    # Chord entry

    def set_chord_queue(self, chords: Sequence[str]) -> None:
        self.chord_queue = [chord for chord in chords if chord]
        self.chord_queue_index = 0

    def insert_queued_chord(self, block_id: str, caret: int) -> int:
        """Insert the next queued chord into a lyrics block at ``caret``.

        The queue cycles. Returns the caret position after the inserted
        chord, or ``caret`` unchanged if the queue is empty.
        """
        block = self.block(block_id)
        if not isinstance(block, LyricsBlock):
            msg = f"Block {block_id!r} is not a lyrics block"
            raise SongsheetError(msg)
        if not self.chord_queue:
            return caret
        chord = self.chord_queue[self.chord_queue_index]
        block.content, caret = insert_chord(block.content, caret, chord)
        self.chord_queue_index = (self.chord_queue_index + 1) % len(self.chord_queue)
        return caret

    # Import and rendering

    def import_text(self, text: str, *, replace: bool = True) -> ImportResult:
        """Import a pasted chord sheet into the song.

        Imported blocks get fresh ids. When replacing, the capo and tuning
        found in the text become the song's settings and transpose is reset.
        When appending, the song keeps its settings and imported tab notes are
        re-stored so they still play at the frets written in the text.
        """
        result = parse_pasted_song(text)
        imported = MusicalContext(tuning=result.metadata.tuning, capo=result.metadata.capo)
        if replace:
            self.song.blocks = []
            self.clear_selection()
            self.pending = None
            self.song.capo = imported.capo
            self.song.tuning = imported.tuning
            self.song.transpose = 0
        shift = self.context.total_offset(rendering=False) - imported.total_offset(rendering=False)
        for block in result.blocks:
            block.id = self.new_block_id()
            if isinstance(block, TabBlock) and shift:
                block.notes = [_shift_note(note, shift) for note in block.notes]
            self.song.blocks.append(block)
        logger.info("Imported %d blocks into song %r", len(result.blocks), self.song.title)
        return result

    def render(self, **kwargs: Any) -> RenderedOutput:
        """Render the song under its current context (see ``render_document``)."""
        return render_document(self.song.blocks, self.context, geometry=self.geometry, **kwargs)
