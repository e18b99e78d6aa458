import json
from pathlib import Path

import pytest


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a payload (dict/list, or raw text) to a file under tmp_path."""

    def write(name: str, payload) -> Path:
        path = tmp_path / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return write


@pytest.fixture
def minimal_map() -> dict:
    return {
        "width": 2,
        "height": 2,
        "tilewidth": 32,
        "tileheight": 32,
        "orientation": "orthogonal",
        "layers": [
            {"type": "tilelayer", "data": [1, 2, 3, 4], "width": 2, "height": 2}
        ],
        "tilesets": [{"firstgid": 1, "source": "tiles.json"}],
    }


@pytest.fixture
def rich_map() -> dict:
    """A map touching every record type and layer variant."""
    return {
        "type": "map",
        "version": "1.10",
        "tiledversion": "1.10.2",
        "orientation": "staggered",
        "renderorder": "right-down",
        "staggeraxis": "y",
        "staggerindex": "odd",
        "backgroundcolor": "#ff336699",
        "width": 4,
        "height": 2,
        "tilewidth": 16,
        "tileheight": 16,
        "infinite": False,
        "nextlayerid": 9,
        "nextobjectid": 6,
        "properties": [
            {"name": "music", "type": "file", "value": "theme.ogg"},
            {"name": "gravity", "type": "float", "value": 9.8},
            {"name": "hard", "type": "bool", "value": True},
            {"name": "lives", "type": "int", "value": 3},
        ],
        "tilesets": [
            {"firstgid": 1, "source": "outside.json"},
            {
                "firstgid": 65,
                "name": "dungeon",
                "image": "dungeon.png",
                "imagewidth": 128,
                "imageheight": 64,
                "columns": 8,
                "tilecount": 32,
                "tilewidth": 16,
                "tileheight": 16,
                "margin": 1,
                "spacing": 2,
                "transparentcolor": "#ff00ff",
                "tileoffset": {"x": 0, "y": 4},
                "grid": {"orientation": "isometric", "width": 16, "height": 8},
                "terrains": [{"name": "lava", "tile": 3}],
                "tiles": [
                    {
                        "id": 3,
                        "type": "hazard",
                        "terrain": [0, 0, -1, 0],
                        "animation": [
                            {"duration": 100, "tileid": 3},
                            {"duration": 150, "tileid": 4},
                        ],
                        "properties": [
                            {"name": "damage", "type": "int", "value": 10}
                        ],
                        "objectgroup": {
                            "id": 0,
                            "name": "",
                            "type": "objectgroup",
                            "draworder": "index",
                            "visible": True,
                            "opacity": 1,
                            "x": 0,
                            "y": 0,
                            "objects": [
                                {"id": 1, "x": 0, "y": 8, "width": 16,
                                 "height": 8, "visible": True}
                            ],
                        },
                    },
                    {"id": 7, "image": "door.png",
                     "imagewidth": 16, "imageheight": 32},
                ],
                "wangsets": [
                    {
                        "name": "paths",
                        "tile": 5,
                        "cornercolors": [],
                        "edgecolors": [
                            {"name": "dirt", "color": "#a05000",
                             "tile": 5, "probability": 0.5}
                        ],
                        "wangtiles": [
                            {"tileid": 5, "wangid": [1, 0, 1, 0, 1, 0, 1, 0],
                             "dflip": False, "hflip": True, "vflip": False}
                        ],
                    }
                ],
            },
        ],
        "layers": [
            {
                "id": 1,
                "name": "Ground",
                "type": "tilelayer",
                "visible": True,
                "opacity": 1,
                "x": 0,
                "y": 0,
                "width": 4,
                "height": 2,
                "data": [1, 2, 3, 4, 65, 66, 2147483713, 0],
            },
            {
                "id": 2,
                "name": "Packed",
                "type": "tilelayer",
                "visible": False,
                "opacity": 0.5,
                "x": 0,
                "y": 0,
                "width": 4,
                "height": 2,
                "encoding": "base64",
                "compression": "zlib",
                "data": "eJxjZGBgYAJiZiBmAWIAAHAACQ==",
            },
            {
                "id": 3,
                "name": "Things",
                "type": "objectgroup",
                "visible": True,
                "opacity": 1,
                "x": 0,
                "y": 0,
                "offsetx": 4.5,
                "offsety": -2,
                "draworder": "topdown",
                "objects": [
                    {"id": 1, "name": "spawn", "point": True, "x": 10, "y": 12,
                     "visible": True},
                    {"id": 2, "ellipse": True, "x": 0, "y": 0, "width": 8,
                     "height": 4, "rotation": 45, "visible": True},
                    {"id": 3, "polygon": [{"x": 0, "y": 0}, {"x": 5, "y": 0},
                                          {"x": 5, "y": 5}],
                     "x": 1, "y": 1, "visible": True},
                    {"id": 4, "gid": 66, "template": "chest.json", "x": 2,
                     "y": 3, "width": 16, "height": 16, "visible": True,
                     "properties": [
                         {"name": "loot", "type": "string", "value": "gold"}
                     ]},
                    {"id": 5, "text": {"text": "Hello", "wrap": True},
                     "polyline": [{"x": 0, "y": 0}, {"x": 1.5, "y": 2.5}],
                     "x": 0, "y": 0, "visible": False},
                ],
            },
            {
                "id": 4,
                "name": "World",
                "type": "group",
                "visible": True,
                "opacity": 1,
                "x": 0,
                "y": 0,
                "layers": [
                    {
                        "id": 5,
                        "name": "Sky",
                        "type": "imagelayer",
                        "image": "sky.png",
                        "transparentcolor": "#000000",
                        "visible": True,
                        "opacity": 1,
                        "x": 0,
                        "y": 0,
                    },
                    {
                        "id": 6,
                        "name": "Inner",
                        "type": "group",
                        "visible": True,
                        "opacity": 1,
                        "x": 0,
                        "y": 0,
                        "layers": [
                            {
                                "id": 7,
                                "name": "Decor",
                                "type": "tilelayer",
                                "visible": True,
                                "opacity": 1,
                                "x": 0,
                                "y": 0,
                                "width": 4,
                                "height": 2,
                                "data": [0, 0, 0, 0, 0, 0, 0, 67],
                                "properties": [
                                    {"name": "Z", "type": "int", "value": 1}
                                ],
                            }
                        ],
                    },
                ],
            },
            {
                "id": 8,
                "name": "Endless",
                "type": "tilelayer",
                "visible": True,
                "opacity": 1,
                "x": 0,
                "y": 0,
                "width": 32,
                "height": 16,
                "chunks": [
                    {"x": -16, "y": 0, "width": 2, "height": 1,
                     "data": [1, 2]},
                    {"x": 0, "y": 0, "width": 2, "height": 1,
                     "data": [3, 4]},
                ],
            },
        ],
    }
