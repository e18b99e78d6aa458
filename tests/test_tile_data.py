import base64
import gzip
import struct
import zlib

import numpy as np
import pytest

from tiled_json import (
    Chunk, Layer, TileData, TileFlags, TiledDecodeError, chunk_grid,
    decode_gid, decode_tile_data, encode_gid, encode_tile_data, layer_grid,
    tile_grid,
)

GIDS = [1, 2, 3, 4, 0, 0x80000005]


def _packed(gids) -> bytes:
    return struct.pack("<%dI" % len(gids), *gids)


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def test_literal_array() -> None:
    tiles = decode_tile_data(TileData(gids=GIDS))
    assert tiles.tolist() == GIDS
    assert decode_tile_data(TileData(gids=GIDS), "csv").tolist() == GIDS


def test_none_data_is_empty() -> None:
    assert decode_tile_data(None).tolist() == []


@pytest.mark.parametrize(
    "compression, compress",
    [
        ("", lambda raw: raw),
        ("zlib", zlib.compress),
        ("gzip", gzip.compress),
    ],
)
def test_base64_payloads(compression, compress) -> None:
    data = TileData(encoded=_b64(compress(_packed(GIDS))))

    assert decode_tile_data(data, "base64", compression).tolist() == GIDS


def test_base64_zstd() -> None:
    zstandard = pytest.importorskip("zstandard")
    raw = zstandard.ZstdCompressor().compress(_packed(GIDS))

    tiles = decode_tile_data(TileData(encoded=_b64(raw)), "base64", "zstd")

    assert tiles.tolist() == GIDS


def test_surrounding_whitespace_is_ignored() -> None:
    data = TileData(encoded="\n   " + _b64(_packed([9, 8])) + "\n")
    assert decode_tile_data(data, "base64").tolist() == [9, 8]


@pytest.mark.parametrize(
    "data, encoding, compression",
    [
        (TileData(gids=[1]), "base64", ""),
        (TileData(encoded="AQAAAA=="), "csv", ""),
        (TileData(encoded="AQAAAA=="), "", ""),
        (TileData(encoded="AQAAAA=="), "base64", "lz4"),
        (TileData(encoded="not base64!"), "base64", ""),
        (TileData(encoded=_b64(b"\x01\x00\x00")), "base64", ""),
        (TileData(encoded=_b64(b"plain bytes")), "base64", "zlib"),
        (TileData(encoded=_b64(b"plain bytes")), "base64", "gzip"),
    ],
)
def test_bad_tile_data(data, encoding, compression) -> None:
    with pytest.raises(TiledDecodeError):
        decode_tile_data(data, encoding, compression)


@pytest.mark.parametrize("compression", ["", "zlib", "gzip"])
def test_encode_then_decode(compression) -> None:
    data = encode_tile_data(GIDS, "base64", compression)

    assert data.is_encoded
    assert decode_tile_data(data, "base64", compression).tolist() == GIDS


def test_encode_csv_gives_literal_array() -> None:
    assert encode_tile_data([3, 2, 1]) == TileData(gids=[3, 2, 1])
    with pytest.raises(ValueError):
        encode_tile_data([1], "csv", "zlib")
    with pytest.raises(ValueError):
        encode_tile_data([1], "base64", "zstd")


def test_decode_gid_flags() -> None:
    assert decode_gid(42) == (42, TileFlags(False, False, False, False))

    gid, flags = decode_gid(0x80000000 | 0x20000000 | 7)
    assert gid == 7
    assert flags.horizontal and flags.diagonal
    assert not flags.vertical and not flags.hexagonal_120

    gid, flags = decode_gid(0x50000000 | 3)
    assert gid == 3
    assert flags.vertical and flags.hexagonal_120


def test_encode_gid_inverts_decode() -> None:
    raw = 0xF0000000 | 12
    assert encode_gid(*decode_gid(raw)) == raw
    assert encode_gid(5) == 5


def test_tile_grid_shape() -> None:
    grid = tile_grid([1, 2, 3, 4, 5, 6], width=3, height=2)

    assert grid.shape == (2, 3)
    assert grid.dtype == np.uint32
    assert grid[1, 0] == 4

    with pytest.raises(TiledDecodeError):
        tile_grid([1, 2, 3], width=2, height=2)


def test_layer_grid() -> None:
    layer = Layer(type="tilelayer", width=2, height=2,
                  encoding="base64", compression="zlib",
                  data=TileData(encoded=_b64(zlib.compress(_packed([1, 2, 3, 0x80000004])))))

    grid = layer_grid(layer)

    assert grid.tolist() == [[1, 2], [3, 0x80000004]]

    with pytest.raises(ValueError):
        layer_grid(Layer(type="objectgroup"))


def test_chunk_grid_uses_layer_encoding() -> None:
    layer = Layer(type="tilelayer", encoding="base64")
    chunk = Chunk(x=-2, y=0, width=2, height=1,
                  data=TileData(encoded=_b64(_packed([6, 7]))))

    assert chunk_grid(chunk, layer).tolist() == [[6, 7]]
