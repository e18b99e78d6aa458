"""
Reading and writing Tiled JSON files.

=============================================================================
ERRORS
=============================================================================

Every load function fails in exactly one of two ways:

    OSError           - the file could not be read (missing, permission
                        denied, is a directory, ...). Raised unchanged.
    TiledDecodeError  - the bytes are not UTF-8 JSON, or a value does not
                        fit its field. `path` and `location` tell where.

Nothing is returned on failure, so a default-constructed Map is never
mistaken for a successful parse.

=============================================================================
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import TiledDecodeError
from .schema import Map, ObjectTemplate, Tileset

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _reject_constant(name: str):
    # json.loads() accepts NaN/Infinity, which are not JSON
    raise TiledDecodeError(f"invalid JSON constant {name}")


def _read_json(filepath: Path) -> Any:
    """Read a whole file and parse it as JSON."""
    # OSError from open()/read() propagates untouched
    with open(filepath, 'rb') as f:
        raw = f.read()

    try:
        text = raw.decode('utf-8')
    except UnicodeDecodeError as exc:
        raise TiledDecodeError(f"file is not valid UTF-8: {exc}") from exc

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except TiledDecodeError:
        raise
    except json.JSONDecodeError as exc:
        raise TiledDecodeError(
            f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        ) from exc
    except ValueError as exc:
        # e.g. integer literals longer than sys.get_int_max_str_digits()
        raise TiledDecodeError(f"invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise TiledDecodeError("invalid JSON: nested too deeply") from exc


def _load(filepath: PathLike, record_cls):
    filepath = Path(filepath)
    try:
        try:
            record = record_cls.from_json(_read_json(filepath))
        except RecursionError as exc:
            raise TiledDecodeError("structure nested too deeply") from exc
    except TiledDecodeError as exc:
        exc.path = str(filepath)
        raise
    logger.debug("Loaded %s from %s", record_cls.__name__, filepath)
    return record


def load_map(filepath: PathLike) -> Map:
    """
    Load a Tiled JSON map file.

    Parameters:
    -----------
    filepath : str or Path
        Path to the map's .json / .tmj file

    Returns:
    --------
    Map : freshly built record graph, owned by the caller

    Raises:
    -------
    OSError : the file cannot be read
    TiledDecodeError : the contents are not a valid map
    """
    return _load(filepath, Map)


def load_tileset(filepath: PathLike) -> Tileset:
    """
    Load a standalone Tiled JSON tileset file (.json / .tsj).

    Same contract as load_map().
    """
    return _load(filepath, Tileset)


def load_template(filepath: PathLike) -> ObjectTemplate:
    """
    Load an object template file (.json / .tj).

    The template's tileset reference is stored, not followed.
    """
    return _load(filepath, ObjectTemplate)


def resolve_tileset(tileset: Tileset, base_dir: PathLike) -> Tileset:
    """
    Load the file behind an external tileset reference.

    Parameters:
    -----------
    tileset : Tileset
        Entry from Map.tilesets
    base_dir : str or Path
        Directory the map file lives in (sources are relative to it)

    Returns:
    --------
    Tileset : the referenced definition with the map's firstgid and
              source filled in, or `tileset` itself if it is embedded
    """
    if not tileset.is_external:
        return tileset

    resolved = load_tileset(Path(base_dir) / tileset.source)
    # firstgid belongs to the map, not to the tileset file
    resolved.firstgid = tileset.firstgid
    resolved.source = tileset.source
    return resolved


# =============================================================================
# SAVING
# =============================================================================

def _write_json(payload: Dict[str, Any], filepath: PathLike,
                indent: Optional[int]):
    filepath = Path(filepath)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=indent, ensure_ascii=False)
        f.write('\n')
    logger.debug("Wrote %s", filepath)


def save_map(tiled_map: Map, filepath: PathLike, indent: Optional[int] = 2):
    """
    Save a map as Tiled JSON.

    Parameters:
    -----------
    indent : int or None
        Spaces per nesting level; None writes everything on one line
    """
    _write_json(tiled_map.to_json(), filepath, indent)


def save_tileset(tileset: Tileset, filepath: PathLike,
                 indent: Optional[int] = 2):
    """Save a tileset as a standalone Tiled JSON tileset file."""
    _write_json(tileset.to_json(include_firstgid=False), filepath, indent)
