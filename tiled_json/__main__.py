#!/usr/bin/env python3

"""
Tiled JSON inspector - print a summary of a map or tileset file

Usage:
    python -m tiled_json <map.json>
    python -m tiled_json --tileset <tileset.json>

Options:
    --tileset   Treat the file as a standalone tileset
    -v          Debug logging
"""

import logging
import sys

from .errors import TiledDecodeError
from .loader import load_map, load_tileset


def print_layers(layers, depth=0):
    indent = "  " * depth
    for layer in layers:
        line = f"{indent}- [{layer.type}] {layer.name!r} (id={layer.id})"
        if layer.is_tile_layer:
            if layer.chunks:
                line += f" {len(layer.chunks)} chunks"
            else:
                line += f" {layer.width}x{layer.height}"
            if layer.encoding:
                line += f" {layer.encoding}"
            if layer.compression:
                line += f"/{layer.compression}"
        elif layer.is_object_group:
            line += f" {len(layer.objects)} objects"
        elif layer.is_image_layer:
            line += f" image={layer.image!r}"
        print(line)
        if layer.is_group:
            print_layers(layer.layers, depth + 1)


def print_tileset(tileset, indent=""):
    if tileset.is_external:
        print(f"{indent}- firstgid={tileset.firstgid} "
              f"source={tileset.source!r} (external)")
        return
    print(f"{indent}- firstgid={tileset.firstgid} {tileset.name!r}: "
          f"{tileset.tilecount} tiles of "
          f"{tileset.tilewidth}x{tileset.tileheight}px, "
          f"{len(tileset.tiles)} with metadata")


def print_map(tiled_map):
    print(f"Map: {tiled_map.width}x{tiled_map.height} tiles of "
          f"{tiled_map.tilewidth}x{tiled_map.tileheight}px, "
          f"{tiled_map.orientation or 'unknown orientation'}"
          f"{' (infinite)' if tiled_map.infinite else ''}")
    print(f"Format {tiled_map.version or '?'}, "
          f"Tiled {tiled_map.tiledversion or '?'}")
    print(f"\nTilesets ({len(tiled_map.tilesets)}):")
    for tileset in tiled_map.tilesets:
        print_tileset(tileset, "  ")
    print(f"\nLayers ({len(tiled_map.layers)} top level):")
    print_layers(tiled_map.layers, 1)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = "-v" in args
    as_tileset = "--tileset" in args
    paths = [a for a in args if a not in ("-v", "--tileset")]

    if len(paths) != 1:
        print(__doc__)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source_path = paths[0]
    try:
        if as_tileset:
            print_tileset(load_tileset(source_path))
        else:
            print_map(load_map(source_path))
    except OSError as e:
        print(f"Error: cannot read '{source_path}': {e.strerror or e}")
        return 1
    except TiledDecodeError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
