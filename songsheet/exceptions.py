"""Exception types for songsheet.

Malformed musical input (chord symbols, coordinates, grid lines) never raises;
these are reserved for caller errors against a document.
"""


class SongsheetError(ValueError):
    """Base exception for songsheet."""


class DocumentError(SongsheetError):
    """Raised when a stored song document cannot be read at all."""


class BlockNotFoundError(SongsheetError):
    """Raised when an editing operation names a block the song does not have."""

    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f"No block with id {block_id!r}")


class InvalidReferenceError(SongsheetError):
    """Raised when a reference block would point at a missing or reference block."""

    def __init__(self, original_id: str, reason: str):
        self.original_id = original_id
        self.reason = reason
        super().__init__(f"Cannot reference {original_id!r}: {reason}")


class DrumGridError(SongsheetError):
    """Raised when a drum grid edit is missing required values."""
