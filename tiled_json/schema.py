"""
Record types for the Tiled JSON map format.
Tracks the JSON map format as written by Tiled 1.2 and later.

=============================================================================
WHAT IS A TILED JSON FILE?
=============================================================================

Tiled can export maps and tilesets as JSON instead of TMX/TSX XML. The JSON
files describe exactly the same things:

- Map dimensions and tile sizes
- Tilesets (collections of tile graphics), embedded or external
- Layers (tile layers, object groups, image layers, groups)
- Custom properties (metadata on any element)

A minimal map looks like this:

    {
      "type": "map", "version": "1.10", "orientation": "orthogonal",
      "width": 2, "height": 2, "tilewidth": 32, "tileheight": 32,
      "layers": [
        {"id": 1, "name": "Ground", "type": "tilelayer",
         "width": 2, "height": 2, "data": [1, 2, 3, 4]}
      ],
      "tilesets": [{"firstgid": 1, "source": "tiles.json"}]
    }

Every class below mirrors one JSON object. Attribute names are the exact
lowercase JSON keys, so `layer.offsetx` is the file's "offsetx".

=============================================================================
DECODING RULES
=============================================================================

- Unknown keys are ignored (newer Tiled versions add fields all the time).
- Missing keys and JSON null take the zero value of the field:
  "" / 0 / 0.0 / False / [] / {} / None for optional sub-records.
  There is no difference between "absent" and "explicitly zero".
- A value of the wrong JSON type raises TiledDecodeError with the JSON
  path of the value ("layers[0].width").
- Nothing is interpreted: base64 tile data stays a string, properties keep
  their JSON value, external tilesets and templates are NOT opened.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import TiledDecodeError


# =============================================================================
# ENUMERATED VALUES
# =============================================================================
# The format stores these as plain strings. Record fields stay `str` so a
# value unknown to this module survives a load; the enums are for comparing:
#
#     if tiled_map.orientation == Orientation.ISOMETRIC: ...

class Orientation(str, Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"


class RenderOrder(str, Enum):
    RIGHT_DOWN = "right-down"
    RIGHT_UP = "right-up"
    LEFT_DOWN = "left-down"
    LEFT_UP = "left-up"


class StaggerAxis(str, Enum):
    X = "x"
    Y = "y"


class StaggerIndex(str, Enum):
    ODD = "odd"
    EVEN = "even"


class LayerType(str, Enum):
    TILE_LAYER = "tilelayer"
    OBJECT_GROUP = "objectgroup"
    IMAGE_LAYER = "imagelayer"
    GROUP = "group"


class DrawOrder(str, Enum):
    TOP_DOWN = "topdown"
    INDEX = "index"


class Encoding(str, Enum):
    CSV = "csv"
    BASE64 = "base64"


class Compression(str, Enum):
    NONE = ""
    ZLIB = "zlib"
    GZIP = "gzip"
    ZSTD = "zstd"


class ObjectShape(str, Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    POINT = "point"
    POLYGON = "polygon"
    POLYLINE = "polyline"
    TILE = "tile"
    TEXT = "text"


# =============================================================================
# VALUE COERCION
# =============================================================================
# json.loads() gives us dicts, lists, str, int, float, bool and None.
# Each helper checks one JSON value against the field's declared type.
# None (JSON null) always means "use the zero value".

def _where(loc: str, key: Union[str, int]) -> str:
    """Extend a JSON path: ("layers", 0) -> "layers[0]"."""
    if isinstance(key, int):
        return f"{loc}[{key}]"
    return f"{loc}.{key}" if loc else key


def _describe(raw: Any) -> str:
    if isinstance(raw, bool):
        return "boolean"
    if isinstance(raw, (int, float)):
        return f"number {raw!r}"
    if isinstance(raw, str):
        return "string"
    if isinstance(raw, list):
        return "array"
    if isinstance(raw, dict):
        return "object"
    return type(raw).__name__


def _as_int(raw: Any, loc: str) -> int:
    if raw is None:
        return 0
    # bool is a subclass of int in Python - JSON true/false are not numbers
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    raise TiledDecodeError(f"expected integer, got {_describe(raw)}", loc)


def _as_float(raw: Any, loc: str) -> float:
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return float(raw)
        except OverflowError as exc:
            raise TiledDecodeError("number too large for a float", loc) from exc
    raise TiledDecodeError(f"expected number, got {_describe(raw)}", loc)


def _as_bool(raw: Any, loc: str) -> bool:
    if raw is None:
        return False
    if isinstance(raw, bool):
        return raw
    raise TiledDecodeError(f"expected boolean, got {_describe(raw)}", loc)


def _as_str(raw: Any, loc: str) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    raise TiledDecodeError(f"expected string, got {_describe(raw)}", loc)


def _as_object(raw: Any, loc: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    raise TiledDecodeError(f"expected object, got {_describe(raw)}", loc)


def _as_list(raw: Any, loc: str, item: Callable[[Any, str], Any]) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TiledDecodeError(f"expected array, got {_describe(raw)}", loc)
    return [item(value, _where(loc, i)) for i, value in enumerate(raw)]


def _int(obj: Dict[str, Any], key: str, loc: str) -> int:
    return _as_int(obj.get(key), _where(loc, key))


def _float(obj: Dict[str, Any], key: str, loc: str) -> float:
    return _as_float(obj.get(key), _where(loc, key))


def _bool(obj: Dict[str, Any], key: str, loc: str) -> bool:
    return _as_bool(obj.get(key), _where(loc, key))


def _str(obj: Dict[str, Any], key: str, loc: str) -> str:
    return _as_str(obj.get(key), _where(loc, key))


def _list(obj: Dict[str, Any], key: str, loc: str,
          item: Callable[[Any, str], Any]) -> list:
    return _as_list(obj.get(key), _where(loc, key), item)


def _optional(obj: Dict[str, Any], key: str, loc: str,
              item: Callable[[Any, str], Any]) -> Any:
    """Decode a sub-record that may be missing entirely (None if so)."""
    raw = obj.get(key)
    if raw is None:
        return None
    return item(raw, _where(loc, key))


def _put(out: Dict[str, Any], key: str, value: Any, always: bool = False):
    """Write a key only if it carries information (or is always written)."""
    if always or value:
        out[key] = value


# =============================================================================
# PROPERTY CLASS
# =============================================================================

@dataclass
class Property:
    """
    Custom property attached to a map, layer, tileset, tile or object.

    ==========================================================================
    SUPPORTED TYPES
    ==========================================================================

    - string: Text value (default)
    - int:    Integer number
    - float:  Decimal number
    - bool:   true/false
    - color:  Color string in #AARRGGBB format
    - file:   File path reference
    - object: Reference to another object by ID
    - class:  Nested members (a JSON object, Tiled 1.8+)

    Unlike TMX, JSON already stores typed values, so `value` is kept
    exactly as it was in the file. Whether 3 or 3.0 is wanted for a
    "float" property is the caller's decision.

    ==========================================================================
    """
    name: str = ""
    type: str = ""
    value: Any = None

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Property':
        obj = _as_object(obj, loc)
        return cls(
            name=_str(obj, 'name', loc),
            type=_str(obj, 'type', loc),
            value=obj.get('value'),
        )

    def to_json(self) -> Dict[str, Any]:
        return {'name': self.name, 'type': self.type, 'value': self.value}


# =============================================================================
# SMALL GEOMETRY RECORDS
# =============================================================================

@dataclass
class Coordinate:
    """One vertex of a polygon or polyline, in pixels relative to the object."""
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Coordinate':
        obj = _as_object(obj, loc)
        return cls(x=_float(obj, 'x', loc), y=_float(obj, 'y', loc))

    def to_json(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y}


@dataclass
class Offset:
    """Pixel offset applied when drawing tiles of a tileset."""
    x: int = 0
    y: int = 0

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Offset':
        obj = _as_object(obj, loc)
        return cls(x=_int(obj, 'x', loc), y=_int(obj, 'y', loc))

    def to_json(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y}


@dataclass
class Grid:
    """
    Grid used for tile overlays (terrain, collision) in the editor.

    Only meaningful for isometric tilesets.
    """
    orientation: str = ""                # "orthogonal" or "isometric"
    width: int = 0                       # Width of a grid cell
    height: int = 0                      # Height of a grid cell

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Grid':
        obj = _as_object(obj, loc)
        return cls(
            orientation=_str(obj, 'orientation', loc),
            width=_int(obj, 'width', loc),
            height=_int(obj, 'height', loc),
        )

    def to_json(self) -> Dict[str, Any]:
        return {'orientation': self.orientation,
                'width': self.width, 'height': self.height}


# =============================================================================
# TILE DATA (POLYMORPHIC "data" FIELD)
# =============================================================================

@dataclass
class TileData:
    """
    Contents of the "data" key of a tile layer or chunk.

    ==========================================================================
    TWO SHAPES FOR ONE FIELD
    ==========================================================================

    The same key holds different JSON types depending on the layer's
    "encoding":

    1. encoding absent or "csv" - a literal array of GIDs:
           "data": [1, 2, 3, 4]

    2. encoding "base64" - one string, optionally zlib/gzip/zstd compressed:
           "data": "AQAAAAIAAAADAAAABAAAAA=="

    The shape is taken from the JSON value itself, not from "encoding".
    Exactly one of the two attributes is meaningful:

        data.is_encoded == False  ->  data.gids     (list of int)
        data.is_encoded == True   ->  data.encoded  (str, untouched)

    Base64 and compression are NOT undone here. Use
    tiled_json.tile_data.decode_tile_data() with the layer's encoding and
    compression when the numbers are needed.

    ==========================================================================
    """
    gids: List[int] = field(default_factory=list)
    encoded: Optional[str] = None

    @property
    def is_encoded(self) -> bool:
        return self.encoded is not None

    @classmethod
    def from_json(cls, raw: Any, loc: str = "") -> 'TileData':
        if isinstance(raw, str):
            return cls(encoded=raw)
        if isinstance(raw, list):
            return cls(gids=[_as_gid(value, _where(loc, i))
                             for i, value in enumerate(raw)])
        raise TiledDecodeError(
            f"expected array of GIDs or base64 string, got {_describe(raw)}",
            loc)

    def to_json(self) -> Union[List[int], str]:
        if self.is_encoded:
            return self.encoded
        return list(self.gids)


def _as_gid(raw: Any, loc: str) -> int:
    # GIDs are unsigned 32-bit; the top bits carry flip flags
    gid = _as_int(raw, loc)
    if not 0 <= gid <= 0xFFFFFFFF:
        raise TiledDecodeError(f"GID {gid} out of unsigned 32-bit range", loc)
    return gid


# =============================================================================
# CHUNK CLASS
# =============================================================================

@dataclass
class Chunk:
    """
    Rectangular piece of an infinite tile layer.

    x, y are in tiles and may be negative: infinite maps grow in every
    direction. `data` has the same two shapes as TileLayer data.
    """
    data: Optional[TileData] = None
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Chunk':
        obj = _as_object(obj, loc)
        return cls(
            data=_optional(obj, 'data', loc, TileData.from_json),
            x=_int(obj, 'x', loc),
            y=_int(obj, 'y', loc),
            width=_int(obj, 'width', loc),
            height=_int(obj, 'height', loc),
        )

    def to_json(self) -> Dict[str, Any]:
        out = {}
        if self.data is not None:
            out['data'] = self.data.to_json()
        out.update(x=self.x, y=self.y, width=self.width, height=self.height)
        return out


# =============================================================================
# MAP OBJECT CLASS
# =============================================================================

@dataclass
class Object:
    """
    Object placed in an object group.

    ==========================================================================
    OBJECT SHAPES
    ==========================================================================

    The format has no "shape" key; the shape follows from which fields
    are set:

        gid != 0           -> tile object (draws a tile graphic)
        text non-empty     -> text object
        ellipse == True    -> ellipse inside x, y, width, height
        point == True      -> single point at x, y
        polygon non-empty  -> closed shape, vertices relative to x, y
        polyline non-empty -> open path, vertices relative to x, y
        otherwise          -> plain rectangle

    `shape` returns the result as an ObjectShape.

    ==========================================================================
    TEMPLATES
    ==========================================================================

    `template` is the path of an object template file. It is stored as
    written; the template is not opened or merged into the object.

    ==========================================================================
    """
    id: int = 0                                      # Unique object ID
    gid: int = 0                                     # Tile GID (tile objects)
    name: str = ""
    type: str = ""                                   # Object type/class
    x: float = 0.0                                   # X position (pixels)
    y: float = 0.0                                   # Y position (pixels)
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0                            # Degrees, clockwise
    visible: bool = False
    ellipse: bool = False
    point: bool = False
    polygon: List[Coordinate] = field(default_factory=list)
    polyline: List[Coordinate] = field(default_factory=list)
    properties: List[Property] = field(default_factory=list)
    template: str = ""                               # Template file path
    text: Dict[str, Any] = field(default_factory=dict)

    @property
    def shape(self) -> ObjectShape:
        if self.gid:
            return ObjectShape.TILE
        if self.text:
            return ObjectShape.TEXT
        if self.ellipse:
            return ObjectShape.ELLIPSE
        if self.point:
            return ObjectShape.POINT
        if self.polygon:
            return ObjectShape.POLYGON
        if self.polyline:
            return ObjectShape.POLYLINE
        return ObjectShape.RECTANGLE

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Object':
        obj = _as_object(obj, loc)
        return cls(
            id=_int(obj, 'id', loc),
            gid=_as_gid(obj.get('gid'), _where(loc, 'gid')),
            name=_str(obj, 'name', loc),
            type=_str(obj, 'type', loc),
            x=_float(obj, 'x', loc),
            y=_float(obj, 'y', loc),
            width=_float(obj, 'width', loc),
            height=_float(obj, 'height', loc),
            rotation=_float(obj, 'rotation', loc),
            visible=_bool(obj, 'visible', loc),
            ellipse=_bool(obj, 'ellipse', loc),
            point=_bool(obj, 'point', loc),
            polygon=_list(obj, 'polygon', loc, Coordinate.from_json),
            polyline=_list(obj, 'polyline', loc, Coordinate.from_json),
            properties=_list(obj, 'properties', loc, Property.from_json),
            template=_str(obj, 'template', loc),
            text=_as_object(obj.get('text'), _where(loc, 'text')),
        )

    def to_json(self) -> Dict[str, Any]:
        out = {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'rotation': self.rotation,
            'visible': self.visible,
        }
        _put(out, 'gid', self.gid)
        _put(out, 'ellipse', self.ellipse)
        _put(out, 'point', self.point)
        _put(out, 'polygon', [c.to_json() for c in self.polygon])
        _put(out, 'polyline', [c.to_json() for c in self.polyline])
        _put(out, 'properties', [p.to_json() for p in self.properties])
        _put(out, 'template', self.template)
        _put(out, 'text', dict(self.text))
        return out


# =============================================================================
# LAYER CLASS
# =============================================================================

@dataclass
class Layer:
    """
    Any of the four layer kinds, selected by `type`.

    ==========================================================================
    LAYER VARIANTS
    ==========================================================================

    Every layer carries the common attributes (id, name, visibility,
    opacity, offsets, size, properties). The rest depends on `type`:

        "tilelayer"    data, chunks (infinite maps), encoding, compression
        "objectgroup"  objects, draworder
        "group"        layers (child layers, may nest groups again)
        "imagelayer"   image, transparentcolor

    All attributes exist on every instance; only the ones belonging to
    `type` are meaningful. A group holds its children directly:

        Layers:
        ├── Background (group)
        │   ├── Sky
        │   └── Mountains
        └── Foreground

    ==========================================================================
    OFFSETS
    ==========================================================================

    x, y            - layer position in TILES (always 0 in current Tiled)
    offsetx/offsety - drawing offset in PIXELS

    ==========================================================================
    """
    # Common
    id: int = 0
    name: str = ""
    type: str = ""
    visible: bool = False
    opacity: float = 0.0
    offsetx: float = 0.0
    offsety: float = 0.0
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    properties: List[Property] = field(default_factory=list)

    # Tile layer
    data: Optional[TileData] = None
    chunks: List[Chunk] = field(default_factory=list)
    encoding: str = ""                               # "csv" or "base64"
    compression: str = ""                            # "", zlib, gzip, zstd

    # Object group
    objects: List[Object] = field(default_factory=list)
    draworder: str = ""                              # "topdown" or "index"

    # Group
    layers: List['Layer'] = field(default_factory=list)

    # Image layer
    image: str = ""
    transparentcolor: str = ""

    @property
    def is_tile_layer(self) -> bool:
        return self.type == LayerType.TILE_LAYER

    @property
    def is_object_group(self) -> bool:
        return self.type == LayerType.OBJECT_GROUP

    @property
    def is_image_layer(self) -> bool:
        return self.type == LayerType.IMAGE_LAYER

    @property
    def is_group(self) -> bool:
        return self.type == LayerType.GROUP

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Layer':
        """Parse a layer; groups recurse into their children."""
        obj = _as_object(obj, loc)
        return cls(
            id=_int(obj, 'id', loc),
            name=_str(obj, 'name', loc),
            type=_str(obj, 'type', loc),
            visible=_bool(obj, 'visible', loc),
            opacity=_float(obj, 'opacity', loc),
            offsetx=_float(obj, 'offsetx', loc),
            offsety=_float(obj, 'offsety', loc),
            x=_int(obj, 'x', loc),
            y=_int(obj, 'y', loc),
            width=_int(obj, 'width', loc),
            height=_int(obj, 'height', loc),
            properties=_list(obj, 'properties', loc, Property.from_json),
            data=_optional(obj, 'data', loc, TileData.from_json),
            chunks=_list(obj, 'chunks', loc, Chunk.from_json),
            encoding=_str(obj, 'encoding', loc),
            compression=_str(obj, 'compression', loc),
            objects=_list(obj, 'objects', loc, Object.from_json),
            draworder=_str(obj, 'draworder', loc),
            layers=_list(obj, 'layers', loc, Layer.from_json),
            image=_str(obj, 'image', loc),
            transparentcolor=_str(obj, 'transparentcolor', loc),
        )

    def to_json(self) -> Dict[str, Any]:
        """
        Convert back to a JSON object.

        Variant attributes are written for the layer's own type, and for
        any other type only when they hold something.
        """
        out = {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'visible': self.visible,
            'opacity': self.opacity,
            'x': self.x,
            'y': self.y,
        }
        _put(out, 'offsetx', self.offsetx)
        _put(out, 'offsety', self.offsety)
        _put(out, 'width', self.width, self.is_tile_layer)
        _put(out, 'height', self.height, self.is_tile_layer)
        _put(out, 'properties', [p.to_json() for p in self.properties])

        if self.data is not None:
            out['data'] = self.data.to_json()
        _put(out, 'chunks', [c.to_json() for c in self.chunks])
        _put(out, 'encoding', self.encoding)
        _put(out, 'compression', self.compression)

        _put(out, 'draworder', self.draworder)
        _put(out, 'objects', [o.to_json() for o in self.objects],
             self.is_object_group)

        _put(out, 'layers', [layer.to_json() for layer in self.layers],
             self.is_group)

        _put(out, 'image', self.image, self.is_image_layer)
        _put(out, 'transparentcolor', self.transparentcolor)
        return out


# =============================================================================
# TILE METADATA CLASSES
# =============================================================================

@dataclass
class Frame:
    """One animation step: show local tile `tileid` for `duration` ms."""
    duration: int = 0
    tileid: int = 0

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Frame':
        obj = _as_object(obj, loc)
        return cls(duration=_int(obj, 'duration', loc),
                   tileid=_int(obj, 'tileid', loc))

    def to_json(self) -> Dict[str, Any]:
        return {'duration': self.duration, 'tileid': self.tileid}


@dataclass
class Terrain:
    name: str = ""
    tile: int = 0                                    # Local ID of a sample tile

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Terrain':
        obj = _as_object(obj, loc)
        return cls(name=_str(obj, 'name', loc), tile=_int(obj, 'tile', loc))

    def to_json(self) -> Dict[str, Any]:
        return {'name': self.name, 'tile': self.tile}


@dataclass
class Tile:
    """
    Metadata for one tile of a tileset.

    Only tiles that carry something (properties, animation, terrain, own
    image, collision shapes) are listed in the file.

    ==========================================================================
    TILE IDs
    ==========================================================================

    `id` is LOCAL to the tileset. The GID used in layer data is
    tileset.firstgid + tile.id.

    ==========================================================================
    TERRAIN CORNERS
    ==========================================================================

    `terrain` has four entries in the order

        top-left, top-right, bottom-left, bottom-right

    each an index into Tileset.terrains, or -1 when that corner has no
    terrain.

    ==========================================================================
    """
    id: int = 0
    type: str = ""
    properties: List[Property] = field(default_factory=list)
    animation: List[Frame] = field(default_factory=list)
    terrain: List[int] = field(default_factory=list)
    image: str = ""                                  # Image collection tile
    imagewidth: int = 0
    imageheight: int = 0
    objectgroup: Optional[Layer] = None              # Collision shapes

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Tile':
        obj = _as_object(obj, loc)
        return cls(
            id=_int(obj, 'id', loc),
            type=_str(obj, 'type', loc),
            properties=_list(obj, 'properties', loc, Property.from_json),
            animation=_list(obj, 'animation', loc, Frame.from_json),
            terrain=_list(obj, 'terrain', loc, _as_int),
            image=_str(obj, 'image', loc),
            imagewidth=_int(obj, 'imagewidth', loc),
            imageheight=_int(obj, 'imageheight', loc),
            objectgroup=_optional(obj, 'objectgroup', loc, Layer.from_json),
        )

    def to_json(self) -> Dict[str, Any]:
        out = {'id': self.id}
        _put(out, 'type', self.type)
        _put(out, 'properties', [p.to_json() for p in self.properties])
        _put(out, 'animation', [f.to_json() for f in self.animation])
        _put(out, 'terrain', list(self.terrain))
        _put(out, 'image', self.image)
        _put(out, 'imagewidth', self.imagewidth)
        _put(out, 'imageheight', self.imageheight)
        if self.objectgroup is not None:
            out['objectgroup'] = self.objectgroup.to_json()
        return out


# =============================================================================
# WANG SET CLASSES
# =============================================================================
# Wang sets drive Tiled's terrain brush: each tile's edges and corners are
# tagged with a "color", and tiles whose colors match are placed next to
# each other.

@dataclass
class WangColor:
    name: str = ""
    color: str = ""                                  # #RRGGBB or #AARRGGBB
    tile: int = 0                                    # Local ID of sample tile
    probability: float = 0.0                         # 0.0 - 1.0

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'WangColor':
        obj = _as_object(obj, loc)
        return cls(
            name=_str(obj, 'name', loc),
            color=_str(obj, 'color', loc),
            tile=_int(obj, 'tile', loc),
            probability=_float(obj, 'probability', loc),
        )

    def to_json(self) -> Dict[str, Any]:
        return {'name': self.name, 'color': self.color,
                'tile': self.tile, 'probability': self.probability}


WANG_ID_LENGTH = 8


def _as_wang_id(raw: Any, loc: str) -> List[int]:
    """
    Decode the 8-entry color index array of a Wang tile.

    Order: top, top-right, right, bottom-right, bottom, bottom-left,
    left, top-left. Shorter arrays are padded with 0 (no color),
    longer arrays are cut to 8 entries.
    """
    wangid = _as_list(raw, loc, _as_int)
    for i, value in enumerate(wangid[:WANG_ID_LENGTH]):
        if not 0 <= value <= 255:
            raise TiledDecodeError(
                f"Wang color index {value} does not fit in a byte",
                _where(loc, i))
    wangid = wangid[:WANG_ID_LENGTH]
    return wangid + [0] * (WANG_ID_LENGTH - len(wangid))


@dataclass
class WangTile:
    tileid: int = 0
    wangid: List[int] = field(default_factory=lambda: [0] * WANG_ID_LENGTH)
    dflip: bool = False                              # Flipped diagonally
    hflip: bool = False                              # Flipped horizontally
    vflip: bool = False                              # Flipped vertically

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'WangTile':
        obj = _as_object(obj, loc)
        return cls(
            tileid=_int(obj, 'tileid', loc),
            wangid=_as_wang_id(obj.get('wangid'), _where(loc, 'wangid')),
            dflip=_bool(obj, 'dflip', loc),
            hflip=_bool(obj, 'hflip', loc),
            vflip=_bool(obj, 'vflip', loc),
        )

    def to_json(self) -> Dict[str, Any]:
        return {'tileid': self.tileid, 'wangid': list(self.wangid),
                'dflip': self.dflip, 'hflip': self.hflip, 'vflip': self.vflip}


@dataclass
class WangSet:
    name: str = ""
    tile: int = 0
    cornercolors: List[WangColor] = field(default_factory=list)
    edgecolors: List[WangColor] = field(default_factory=list)
    wangtiles: List[WangTile] = field(default_factory=list)

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'WangSet':
        obj = _as_object(obj, loc)
        return cls(
            name=_str(obj, 'name', loc),
            tile=_int(obj, 'tile', loc),
            cornercolors=_list(obj, 'cornercolors', loc, WangColor.from_json),
            edgecolors=_list(obj, 'edgecolors', loc, WangColor.from_json),
            wangtiles=_list(obj, 'wangtiles', loc, WangTile.from_json),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'tile': self.tile,
            'cornercolors': [c.to_json() for c in self.cornercolors],
            'edgecolors': [c.to_json() for c in self.edgecolors],
            'wangtiles': [t.to_json() for t in self.wangtiles],
        }


# =============================================================================
# TILESET CLASS
# =============================================================================

@dataclass
class Tileset:
    """
    Tileset - a set of tile graphics plus per-tile metadata.

    ==========================================================================
    EMBEDDED vs EXTERNAL TILESETS
    ==========================================================================

    EMBEDDED: the whole definition sits in the map's "tilesets" array.

        {"firstgid": 1, "name": "terrain", "tilewidth": 32, ...}

    EXTERNAL: the map only points at a separate tileset file.

        {"firstgid": 1, "source": "terrain.json"}

    For an external reference every attribute except `firstgid` and
    `source` keeps its zero value. Loading the referenced file is up to
    the caller (see tiled_json.loader.resolve_tileset).

    ==========================================================================
    SPACING AND MARGIN
    ==========================================================================

    margin  = pixels around the EDGE of the whole image
    spacing = pixels BETWEEN neighbouring tiles

    ==========================================================================
    """
    firstgid: int = 0                                # First Global ID
    source: str = ""                                 # External file path
    name: str = ""
    type: str = ""                                   # "tileset" in tileset files
    columns: int = 0                                 # Tiles per row
    image: str = ""                                  # Spritesheet image
    imagewidth: int = 0
    imageheight: int = 0
    margin: int = 0
    spacing: int = 0
    tilecount: int = 0
    tilewidth: int = 0
    tileheight: int = 0
    transparentcolor: str = ""
    tileoffset: Offset = field(default_factory=Offset)
    grid: Optional[Grid] = None
    properties: List[Property] = field(default_factory=list)
    terrains: List[Terrain] = field(default_factory=list)
    tiles: List[Tile] = field(default_factory=list)
    wangsets: List[WangSet] = field(default_factory=list)

    @property
    def is_external(self) -> bool:
        return bool(self.source)

    def get_tile(self, local_id: int) -> Optional[Tile]:
        """Metadata for a local tile ID, or None if the tile has none."""
        for tile in self.tiles:
            if tile.id == local_id:
                return tile
        return None

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Tileset':
        obj = _as_object(obj, loc)
        return cls(
            firstgid=_int(obj, 'firstgid', loc),
            source=_str(obj, 'source', loc),
            name=_str(obj, 'name', loc),
            type=_str(obj, 'type', loc),
            columns=_int(obj, 'columns', loc),
            image=_str(obj, 'image', loc),
            imagewidth=_int(obj, 'imagewidth', loc),
            imageheight=_int(obj, 'imageheight', loc),
            margin=_int(obj, 'margin', loc),
            spacing=_int(obj, 'spacing', loc),
            tilecount=_int(obj, 'tilecount', loc),
            tilewidth=_int(obj, 'tilewidth', loc),
            tileheight=_int(obj, 'tileheight', loc),
            transparentcolor=_str(obj, 'transparentcolor', loc),
            tileoffset=Offset.from_json(obj.get('tileoffset'),
                                        _where(loc, 'tileoffset')),
            grid=_optional(obj, 'grid', loc, Grid.from_json),
            properties=_list(obj, 'properties', loc, Property.from_json),
            terrains=_list(obj, 'terrains', loc, Terrain.from_json),
            tiles=_list(obj, 'tiles', loc, Tile.from_json),
            wangsets=_list(obj, 'wangsets', loc, WangSet.from_json),
        )

    def to_json(self, include_firstgid: bool = True) -> Dict[str, Any]:
        """
        Convert tileset back to a JSON object.

        Parameters:
        -----------
        include_firstgid : bool
            True inside a map, False when writing a standalone tileset
            file (a non-zero firstgid is still kept).
        """
        out = {}
        _put(out, 'firstgid', self.firstgid, include_firstgid)

        # External references carry only what is actually set
        full = not self.is_external
        _put(out, 'source', self.source)
        _put(out, 'type', self.type)
        _put(out, 'name', self.name, full)
        _put(out, 'columns', self.columns, full)
        _put(out, 'image', self.image, full)
        _put(out, 'imagewidth', self.imagewidth, full)
        _put(out, 'imageheight', self.imageheight, full)
        _put(out, 'margin', self.margin, full)
        _put(out, 'spacing', self.spacing, full)
        _put(out, 'tilecount', self.tilecount, full)
        _put(out, 'tilewidth', self.tilewidth, full)
        _put(out, 'tileheight', self.tileheight, full)
        _put(out, 'transparentcolor', self.transparentcolor)
        if self.tileoffset != Offset():
            out['tileoffset'] = self.tileoffset.to_json()
        if self.grid is not None:
            out['grid'] = self.grid.to_json()
        _put(out, 'properties', [p.to_json() for p in self.properties])
        _put(out, 'terrains', [t.to_json() for t in self.terrains])
        _put(out, 'tiles', [t.to_json() for t in self.tiles])
        _put(out, 'wangsets', [w.to_json() for w in self.wangsets])
        return out

    @classmethod
    def load(cls, filepath) -> 'Tileset':
        """Load a standalone tileset file (see loader.load_tileset)."""
        from .loader import load_tileset
        return load_tileset(filepath)

    def save(self, filepath, indent: Optional[int] = 2):
        """Write this tileset as a standalone tileset file."""
        from .loader import save_tileset
        save_tileset(self, filepath, indent=indent)


# =============================================================================
# TILED MAP CLASS (Main Entry Point)
# =============================================================================

@dataclass
class Map:
    """
    Complete Tiled map - the root object of a map file.

    ==========================================================================
    MAP ORIENTATIONS
    ==========================================================================

    orthogonal - square grid, tiles in rows and columns
    isometric  - diamond-shaped tiles for a pseudo-3D look
    staggered  - offset rows/columns (uses staggeraxis, staggerindex)
    hexagonal  - hexagon tiles (also uses hexsidelength)

    ==========================================================================
    ID COUNTERS
    ==========================================================================

    nextlayerid and nextobjectid are the IDs Tiled will hand out next,
    so they are larger than every layer ID (including layers nested in
    groups) and every object ID in the file. They are read as written;
    nothing here checks them.

    ==========================================================================
    USAGE
    ==========================================================================

    Loading:
        tiled_map = load_map("level1.json")
        print(f"Map size: {tiled_map.width}x{tiled_map.height}")

    Accessing layers:
        ground = tiled_map.get_layer_by_name("Ground")
        gids = decode_tile_data(ground.data, ground.encoding,
                                ground.compression)

    Saving:
        tiled_map.save("modified.json")

    ==========================================================================
    """
    backgroundcolor: str = ""                        # #RRGGBB or #AARRGGBB
    height: int = 0                                  # Map height in tiles
    width: int = 0                                   # Map width in tiles
    tileheight: int = 0                              # Tile height in pixels
    tilewidth: int = 0                               # Tile width in pixels
    hexsidelength: int = 0                           # Hexagonal maps only
    infinite: bool = False
    orientation: str = ""
    renderorder: str = ""                            # Orthogonal maps only
    staggeraxis: str = ""                            # "x" or "y"
    staggerindex: str = ""                           # "odd" or "even"
    version: str = ""                                # JSON format version
    tiledversion: str = ""                           # Tiled editor version
    type: str = ""                                   # "map"
    nextlayerid: int = 0
    nextobjectid: int = 0
    layers: List[Layer] = field(default_factory=list)
    tilesets: List[Tileset] = field(default_factory=list)
    properties: List[Property] = field(default_factory=list)

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'Map':
        obj = _as_object(obj, loc)
        return cls(
            backgroundcolor=_str(obj, 'backgroundcolor', loc),
            height=_int(obj, 'height', loc),
            width=_int(obj, 'width', loc),
            tileheight=_int(obj, 'tileheight', loc),
            tilewidth=_int(obj, 'tilewidth', loc),
            hexsidelength=_int(obj, 'hexsidelength', loc),
            infinite=_bool(obj, 'infinite', loc),
            orientation=_str(obj, 'orientation', loc),
            renderorder=_str(obj, 'renderorder', loc),
            staggeraxis=_str(obj, 'staggeraxis', loc),
            staggerindex=_str(obj, 'staggerindex', loc),
            version=_as_version(obj.get('version'), _where(loc, 'version')),
            tiledversion=_str(obj, 'tiledversion', loc),
            type=_str(obj, 'type', loc),
            nextlayerid=_int(obj, 'nextlayerid', loc),
            nextobjectid=_int(obj, 'nextobjectid', loc),
            layers=_list(obj, 'layers', loc, Layer.from_json),
            tilesets=_list(obj, 'tilesets', loc, Tileset.from_json),
            properties=_list(obj, 'properties', loc, Property.from_json),
        )

    def to_json(self) -> Dict[str, Any]:
        out = {
            'type': self.type,
            'version': self.version,
            'tiledversion': self.tiledversion,
            'orientation': self.orientation,
            'renderorder': self.renderorder,
            'width': self.width,
            'height': self.height,
            'tilewidth': self.tilewidth,
            'tileheight': self.tileheight,
            'infinite': self.infinite,
            'nextlayerid': self.nextlayerid,
            'nextobjectid': self.nextobjectid,
        }
        _put(out, 'backgroundcolor', self.backgroundcolor)
        _put(out, 'hexsidelength', self.hexsidelength)
        _put(out, 'staggeraxis', self.staggeraxis)
        _put(out, 'staggerindex', self.staggerindex)
        _put(out, 'properties', [p.to_json() for p in self.properties])
        out['tilesets'] = [ts.to_json() for ts in self.tilesets]
        out['layers'] = [layer.to_json() for layer in self.layers]
        return out

    @classmethod
    def load(cls, filepath) -> 'Map':
        """Load a map file (see loader.load_map)."""
        from .loader import load_map
        return load_map(filepath)

    def save(self, filepath, indent: Optional[int] = 2):
        """Write the map to a JSON file."""
        from .loader import save_map
        save_map(self, filepath, indent=indent)

    def get_tileset_for_gid(self, gid: int) -> Optional[Tileset]:
        """
        Find which tileset contains a given GID.

        A GID belongs to the tileset with the largest firstgid <= gid.
        Flip flags in the top bits are ignored.

            Tileset A: firstgid=1
            Tileset B: firstgid=101

            GID 50  -> Tileset A
            GID 150 -> Tileset B
            GID 0   -> None (empty cell)
        """
        from .tile_data import decode_gid
        gid, _ = decode_gid(gid)
        if gid == 0:
            return None

        found = None
        for tileset in self.tilesets:
            if tileset.firstgid <= gid and (
                    found is None or tileset.firstgid > found.firstgid):
                found = tileset
        return found

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        """Find a layer by name (searches recursively through groups)."""
        def search_layers(layers):
            for layer in layers:
                if layer.name == name:
                    return layer
                if layer.is_group:
                    result = search_layers(layer.layers)
                    if result is not None:
                        return result
            return None

        return search_layers(self.layers)

    def get_all_layers_flat(self) -> List[Layer]:
        """
        Get all layers in a flat list, expanding groups recursively.

        Groups themselves are not included, only their contents, in the
        order Tiled draws them (bottom to top).
        """
        result = []

        def flatten(layers):
            for layer in layers:
                if layer.is_group:
                    flatten(layer.layers)
                else:
                    result.append(layer)

        flatten(self.layers)
        return result


def _as_version(raw: Any, loc: str) -> str:
    # Tiled < 1.6 wrote the format version as a number (1.2)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return _as_str(raw, loc)


# =============================================================================
# OBJECT TEMPLATE CLASS
# =============================================================================

@dataclass
class ObjectTemplate:
    """
    Contents of an object template file.

    Maps refer to templates through Object.template; the template itself
    is one object plus, for tile objects, the tileset it draws from.
    """
    type: str = ""                                   # "template"
    tileset: Optional[Tileset] = None
    object: 'Object' = field(default_factory=Object)

    @classmethod
    def from_json(cls, obj: Any, loc: str = "") -> 'ObjectTemplate':
        obj = _as_object(obj, loc)
        return cls(
            type=_str(obj, 'type', loc),
            tileset=_optional(obj, 'tileset', loc, Tileset.from_json),
            object=Object.from_json(obj.get('object'), _where(loc, 'object')),
        )

    def to_json(self) -> Dict[str, Any]:
        out = {'type': self.type}
        if self.tileset is not None:
            out['tileset'] = self.tileset.to_json()
        out['object'] = self.object.to_json()
        return out
