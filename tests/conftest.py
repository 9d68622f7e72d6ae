"""Shared fixtures and Hypothesis profile."""

import json
import os
from pathlib import Path

import pytest
from hypothesis import settings

TESTDATA_DIR = Path(__file__).parent.parent / "testdata"


def configure_hypo() -> None:
    settings.register_profile("fast", max_examples=25)
    if os.environ.get("HYPO_SLOW") != "1":
        settings.load_profile("fast")


configure_hypo()


@pytest.fixture
def song_document() -> dict:
    """Load the stored song document from song.json."""
    with open(TESTDATA_DIR / "song.json") as f:
        return json.load(f)


@pytest.fixture
def pasted_sheet() -> str:
    """Load the pasted chord sheet from pasted_sheet.txt."""
    return (TESTDATA_DIR / "pasted_sheet.txt").read_text()
