"""Song sheets with inline chords, fretboard tabs and drum grids.

A song is an ordered list of lyrics, tab, drum tab and reference blocks,
rendered under a tuning, capo and transpose for preview and print.

Examples
--------
>>> from songsheet import transpose_chord, parse_line_for_render

>>> # Transpose a chord symbol
>>> transpose_chord("Bb", 1)
'B'

>>> # Split a lyrics line into aligned chord and lyric lines
>>> pair = parse_line_for_render("[C]Test [G]line")
>>> pair.chord_line
'C     G'
>>> pair.lyric_line
' Test  line'

>>> # Render a whole song
>>> from songsheet import Song, LyricsBlock, render_document
>>> song = Song(transpose=2, blocks=[LyricsBlock(id="a", label="Verse", content="[G]Hello")])
>>> print(render_document(song.blocks, song.context).to_text())
Verse
A
 Hello
"""

from songsheet.document import dump_song, load_song, new_song
from songsheet.editor import SongEditor
from songsheet.exceptions import (
    BlockNotFoundError,
    DocumentError,
    DrumGridError,
    InvalidReferenceError,
    SongsheetError,
)
from songsheet.lyrics import parse_line_for_render, transpose_lyrics
from songsheet.models import (
    Block,
    DrumTabBlock,
    LyricsBlock,
    MusicalContext,
    ReferenceBlock,
    Song,
    TabBlock,
    TabNote,
)
from songsheet.pitch_class import transpose_chord
from songsheet.render import PrintView, render_document, render_print, render_setlist

__all__ = [
    "Block",
    "BlockNotFoundError",
    "DocumentError",
    "DrumGridError",
    "DrumTabBlock",
    "InvalidReferenceError",
    "LyricsBlock",
    "MusicalContext",
    "PrintView",
    "ReferenceBlock",
    "Song",
    "SongEditor",
    "SongsheetError",
    "TabBlock",
    "TabNote",
    "dump_song",
    "load_song",
    "new_song",
    "parse_line_for_render",
    "render_document",
    "render_print",
    "render_setlist",
    "transpose_chord",
    "transpose_lyrics",
]
