"""
tiled-json - Tiled JSON map and tileset files as Python dataclasses

Requisitos:
    pip install numpy
    pip install zstandard      (only for zstd-compressed tile data)
"""

from .errors import TiledDecodeError
from .loader import (
    load_map, load_tileset, load_template, resolve_tileset,
    save_map, save_tileset,
)
from .schema import (
    Chunk, Coordinate, Frame, Grid, Layer, Map, Object, ObjectTemplate,
    Offset, Property, Terrain, Tile, TileData, Tileset, WangColor, WangSet,
    WangTile,
    Compression, DrawOrder, Encoding, LayerType, ObjectShape, Orientation,
    RenderOrder, StaggerAxis, StaggerIndex,
)
from .tile_data import (
    TileFlags, decode_gid, encode_gid, decode_tile_data, encode_tile_data,
    tile_grid, layer_grid, chunk_grid,
)

__version__ = "1.0.0"
__all__ = [
    "TiledDecodeError",
    "load_map",
    "load_tileset",
    "load_template",
    "resolve_tileset",
    "save_map",
    "save_tileset",
    "Chunk",
    "Coordinate",
    "Frame",
    "Grid",
    "Layer",
    "Map",
    "Object",
    "ObjectTemplate",
    "Offset",
    "Property",
    "Terrain",
    "Tile",
    "TileData",
    "Tileset",
    "WangColor",
    "WangSet",
    "WangTile",
    "Compression",
    "DrawOrder",
    "Encoding",
    "LayerType",
    "ObjectShape",
    "Orientation",
    "RenderOrder",
    "StaggerAxis",
    "StaggerIndex",
    "TileFlags",
    "decode_gid",
    "encode_gid",
    "decode_tile_data",
    "encode_tile_data",
    "tile_grid",
    "layer_grid",
    "chunk_grid",
]
