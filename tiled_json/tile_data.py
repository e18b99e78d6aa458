"""
Helpers for turning tile layer data into GIDs, and back.

The loader leaves the "data" field exactly as the file had it (see
schema.TileData). Code that actually needs the tile numbers calls the
functions below, passing the layer's own encoding/compression values:

    layer = tiled_map.get_layer_by_name("Ground")
    gids = decode_tile_data(layer.data, layer.encoding, layer.compression)
    grid = layer_grid(layer)          # numpy array, grid[y, x]

=============================================================================
GID FLAGS
=============================================================================

A GID is an unsigned 32-bit number. The top four bits are flags:

    bit 31  0x80000000  flipped horizontally
    bit 30  0x40000000  flipped vertically
    bit 29  0x20000000  flipped diagonally (x/y swapped)
    bit 28  0x10000000  rotated 120 degrees (hexagonal maps only)

decode_gid() separates them from the tile reference.

=============================================================================
"""

import array
import base64
import binascii
import gzip
import sys
import zlib
from collections import namedtuple
from typing import TYPE_CHECKING, Iterable, Optional, Tuple, Union

from .errors import TiledDecodeError
from .schema import Chunk, Compression, Encoding, Layer, TileData

# numpy is only needed by the grid helpers; imported on first use
if TYPE_CHECKING:
    import numpy as np


GID_FLIPPED_HORIZONTALLY = 0x80000000
GID_FLIPPED_VERTICALLY = 0x40000000
GID_FLIPPED_DIAGONALLY = 0x20000000
GID_ROTATED_HEXAGONAL_120 = 0x10000000
GID_FLAGS = (GID_FLIPPED_HORIZONTALLY | GID_FLIPPED_VERTICALLY |
             GID_FLIPPED_DIAGONALLY | GID_ROTATED_HEXAGONAL_120)

TileFlags = namedtuple(
    "TileFlags", ["horizontal", "vertical", "diagonal", "hexagonal_120"])
NO_FLAGS = TileFlags(False, False, False, False)


def decode_gid(raw_gid: int) -> Tuple[int, TileFlags]:
    """
    Split a raw GID into the tile reference and its flip flags.

        decode_gid(0x80000005) -> (5, TileFlags(horizontal=True, ...))
    """
    if raw_gid < GID_ROTATED_HEXAGONAL_120:
        return raw_gid, NO_FLAGS
    flags = TileFlags(
        horizontal=bool(raw_gid & GID_FLIPPED_HORIZONTALLY),
        vertical=bool(raw_gid & GID_FLIPPED_VERTICALLY),
        diagonal=bool(raw_gid & GID_FLIPPED_DIAGONALLY),
        hexagonal_120=bool(raw_gid & GID_ROTATED_HEXAGONAL_120),
    )
    return raw_gid & ~GID_FLAGS, flags


def encode_gid(gid: int, flags: TileFlags = NO_FLAGS) -> int:
    """Inverse of decode_gid()."""
    if flags.horizontal:
        gid |= GID_FLIPPED_HORIZONTALLY
    if flags.vertical:
        gid |= GID_FLIPPED_VERTICALLY
    if flags.diagonal:
        gid |= GID_FLIPPED_DIAGONALLY
    if flags.hexagonal_120:
        gid |= GID_ROTATED_HEXAGONAL_120
    return gid


# =============================================================================
# DECODING
# =============================================================================

def decode_tile_data(data: Optional[TileData], encoding: str = "",
                     compression: str = "") -> array.array:
    """
    Return the GIDs stored in a layer's or chunk's data.

    Parameters:
    -----------
    data : TileData or None
        Layer.data / Chunk.data (None gives an empty array)
    encoding : str
        The layer's encoding: "" or "csv" for literal arrays, "base64"
    compression : str
        The layer's compression: "", "zlib", "gzip" or "zstd"

    Returns:
    --------
    array.array('I') : unsigned 32-bit GIDs, row-major (index = y * width + x)

    Raises:
    -------
    TiledDecodeError : unknown encoding/compression, broken base64 or
                       compressed payload, or a data shape that does not
                       match the encoding
    ImportError : compression is "zstd" and zstandard is not installed
    """
    if data is None:
        return array.array('I')

    if not data.is_encoded:
        if encoding not in ("", Encoding.CSV):
            raise TiledDecodeError(
                f"literal GID array given for encoding '{encoding}'")
        return array.array('I', data.gids)

    if encoding != Encoding.BASE64:
        raise TiledDecodeError(
            f"string tile data needs base64 encoding, got '{encoding}'")

    # -----------------------------------------------------------------
    # BASE64 -> (DECOMPRESS) -> UINT32 ARRAY
    # -----------------------------------------------------------------
    try:
        raw_data = base64.b64decode(data.encoded.strip(), validate=True)
    except binascii.Error as exc:
        raise TiledDecodeError(f"invalid base64 tile data: {exc}") from exc

    raw_data = _decompress(raw_data, compression)

    # Each tile is 4 bytes (little-endian uint32)
    if len(raw_data) % 4:
        raise TiledDecodeError(
            f"tile data is {len(raw_data)} bytes, not a multiple of 4")
    tiles = array.array('I')
    tiles.frombytes(raw_data)
    if sys.byteorder == 'big':
        tiles.byteswap()
    return tiles


def _decompress(raw_data: bytes, compression: str) -> bytes:
    try:
        if compression == Compression.NONE:
            return raw_data
        if compression == Compression.ZLIB:
            return zlib.decompress(raw_data)
        if compression == Compression.GZIP:
            return gzip.decompress(raw_data)
    except (zlib.error, OSError, EOFError) as exc:
        raise TiledDecodeError(
            f"cannot decompress {compression} tile data: {exc}") from exc

    if compression == Compression.ZSTD:
        # zstd requires external library (not in stdlib)
        try:
            import zstandard
        except ImportError:
            raise ImportError(
                "zstandard library required for zstd compression. "
                "Install with: pip install zstandard"
            )
        try:
            return zstandard.ZstdDecompressor().decompressobj().decompress(
                raw_data)
        except zstandard.ZstdError as exc:
            raise TiledDecodeError(
                f"cannot decompress zstd tile data: {exc}") from exc

    raise TiledDecodeError(f"unsupported compression '{compression}'")


# =============================================================================
# ENCODING
# =============================================================================

def encode_tile_data(gids: Iterable[int], encoding: str = Encoding.CSV,
                     compression: str = "") -> TileData:
    """
    Build a TileData value for the given GIDs.

    The caller stores `encoding` and `compression` on the layer as well.
    zstd output is not supported (rarely needed).
    """
    tiles = array.array('I', gids)

    if encoding in ("", Encoding.CSV):
        if compression:
            raise ValueError("compression requires base64 encoding")
        return TileData(gids=tiles.tolist())

    if encoding != Encoding.BASE64:
        raise ValueError(f"unsupported encoding '{encoding}'")

    if sys.byteorder == 'big':
        tiles.byteswap()
    raw_data = tiles.tobytes()

    if compression == Compression.ZLIB:
        raw_data = zlib.compress(raw_data)
    elif compression == Compression.GZIP:
        raw_data = gzip.compress(raw_data)
    elif compression:
        raise ValueError(f"unsupported compression '{compression}'")

    return TileData(encoded=base64.b64encode(raw_data).decode('ascii'))


# =============================================================================
# NUMPY GRIDS
# =============================================================================

def tile_grid(gids: Union[array.array, Iterable[int]], width: int,
              height: int) -> 'np.ndarray':
    """
    Reshape a flat GID sequence into a (height, width) uint32 array.

    Index as grid[y, x], same as the row-major order of the file.
    """
    import numpy as np

    grid = np.asarray(gids, dtype=np.uint32)
    if grid.size != width * height:
        raise TiledDecodeError(
            f"{grid.size} tiles do not fill a {width}x{height} grid")
    return grid.reshape((height, width))


def layer_grid(layer: Layer) -> 'np.ndarray':
    """GIDs of a finite tile layer as a (height, width) array."""
    if not layer.is_tile_layer:
        raise ValueError(f"layer '{layer.name}' is not a tile layer")
    gids = decode_tile_data(layer.data, layer.encoding, layer.compression)
    return tile_grid(gids, layer.width, layer.height)


def chunk_grid(chunk: Chunk, layer: Layer) -> 'np.ndarray':
    """GIDs of one chunk of an infinite layer, using the layer's encoding."""
    gids = decode_tile_data(chunk.data, layer.encoding, layer.compression)
    return tile_grid(gids, chunk.width, chunk.height)
