"""
Exceptions raised while loading Tiled JSON files.

Only one custom type exists. Failures to read a file are NOT wrapped:
they surface as Python's own OSError family (FileNotFoundError,
PermissionError, IsADirectoryError, ...), so callers can tell

    "could not read the path"        -> OSError
    "could not interpret the bytes"  -> TiledDecodeError

apart with two except clauses.
"""

from typing import Optional


class TiledDecodeError(ValueError):
    """
    File contents are not valid JSON, or a value has the wrong shape.

    Attributes:
    -----------
    message : str
        What went wrong, e.g. "expected integer, got string"
    location : str or None
        JSON path of the offending value, e.g. "layers[0].data[3]"
    path : str or None
        File being decoded (filled in by the loader functions)
    """

    def __init__(self, message: str, location: Optional[str] = None,
                 path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.location = location
        self.path = path

    def __str__(self) -> str:
        text = self.message
        if self.location:
            text = f"{self.location}: {text}"
        if self.path:
            text = f"{self.path}: {text}"
        return text
