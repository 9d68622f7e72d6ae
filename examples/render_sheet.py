#!/usr/bin/env python3
"""CLI tool to render a song as a chord sheet.

Reads either a stored song document (``.json``) or a chord sheet pasted from
the web (any other file) and prints it as text, HTML, printable pages, or a
song document.

Usage:
    python examples/render_sheet.py <input_file> [options]

Examples:
    python examples/render_sheet.py testdata/song.json
    python examples/render_sheet.py testdata/song.json --transpose 2 --html
    python examples/render_sheet.py testdata/pasted_sheet.txt --to-json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from songsheet import SongEditor, SongsheetError, dump_song, load_song
from songsheet.models import Song
from songsheet.render import DEFAULT_LINES_PER_PAGE, PrintView, render_print


def load_input(path: Path) -> Song:
    """Load a song document, or import a pasted sheet into a new song."""
    text = path.read_text()
    if path.suffix.lower() == ".json":
        return load_song(json.loads(text))

    editor = SongEditor()
    editor.import_text(text)
    editor.song.title = path.stem.replace("_", " ").title()
    return editor.song


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Render a song document or pasted chord sheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s testdata/song.json
  %(prog)s testdata/song.json --print --view drummer
  %(prog)s testdata/pasted_sheet.txt --to-json
        """,
    )
    parser.add_argument("input", type=Path, help="Song document (.json) or pasted sheet")
    parser.add_argument("-t", "--transpose", type=int, default=0, help="Semitones to transpose by")
    parser.add_argument("--capo", type=int, default=None, help="Override the song's capo")
    parser.add_argument("--bake", action="store_true", help="Write the transpose into the song")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--html", action="store_true", help="Output the live preview HTML")
    output.add_argument("--print", dest="print_view", action="store_true", help="Output printable pages")
    output.add_argument("--to-json", action="store_true", help="Output the song document")

    parser.add_argument(
        "--view",
        choices=[view.value for view in PrintView],
        default=PrintView.FULL.value,
        help="Print view (with --print)",
    )
    parser.add_argument("--lines-per-page", type=int, default=DEFAULT_LINES_PER_PAGE, help="Page height (with --print)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.lines_per_page < 1:
        parser.error(f"--lines-per-page must be at least 1, got {args.lines_per_page}")

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        editor = SongEditor(load_input(args.input))
        if args.capo is not None:
            editor.set_capo(args.capo)
        editor.transpose(args.transpose)
        if args.bake:
            editor.bake_transpose()
    except (SongsheetError, json.JSONDecodeError) as e:
        print(f"Error reading song: {e}", file=sys.stderr)
        return 1

    if args.to_json:
        print(json.dumps(dump_song(editor.song), indent=2))
    elif args.html:
        print(editor.render().to_html())
    elif args.print_view:
        try:
            pages = render_print(editor.song, view=PrintView(args.view), lines_per_page=args.lines_per_page)
        except SongsheetError as e:
            print(f"Error printing song: {e}", file=sys.stderr)
            return 1
        print(pages.to_text(page_break="\n\f\n"))
    else:
        print(f"{editor.song.title} - {editor.song.artist or 'Unknown Artist'}\n")
        print(editor.render().to_text())

    return 0


if __name__ == "__main__":
    sys.exit(main())
