"""
map_config.py - Map configuration for hex rendering

Defaults live in module constants; MapConfig bundles one map's settings
and turns them into the HexGrid and Workspace used by the renderer.
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict

from hexgrid import HexGrid, Orientation, StaggerAxis, StaggerIndex, Workspace

logger = logging.getLogger(__name__)

# === Configuration ===
OUTPUT_DIR = Path("output")

# Grid parameters
DEFAULT_MAP_WIDTH = 10     # tiles
DEFAULT_MAP_HEIGHT = 10    # tiles
DEFAULT_TILE_WIDTH = 32    # pixels
DEFAULT_TILE_HEIGHT = 32   # pixels
DEFAULT_HEX_SIDE_LENGTH = 16

# Colors
GRID_COLOR = "#000000"
SELECTION_COLOR = "#3399ff"
BACKGROUND_COLOR = "#ffffff"

# SVG output
SVG_MARGIN_PX = 10


def _parse_enum(enum_cls, value, field_name: str):
    """Accept an enum member, its value or its name (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    for member in enum_cls:
        if text in (member.value, member.name.lower()):
            return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Invalid {field_name} {value!r}; expected one of: {choices}")


@dataclass
class MapConfig:
    """Configuration for a hexagonal map."""
    name: str = "hexmap"
    orientation: Orientation = Orientation.HEXAGONAL
    stagger_axis: StaggerAxis = StaggerAxis.Y
    stagger_index: StaggerIndex = StaggerIndex.ODD
    hex_side_length: int = DEFAULT_HEX_SIDE_LENGTH
    width: int = DEFAULT_MAP_WIDTH
    height: int = DEFAULT_MAP_HEIGHT
    tile_width: int = DEFAULT_TILE_WIDTH
    tile_height: int = DEFAULT_TILE_HEIGHT

    def __post_init__(self):
        # JSON and command-line values arrive as strings
        self.orientation = _parse_enum(Orientation, self.orientation, "orientation")
        self.stagger_axis = _parse_enum(StaggerAxis, self.stagger_axis, "stagger axis")
        self.stagger_index = _parse_enum(StaggerIndex, self.stagger_index, "stagger index")

        if self.orientation not in (Orientation.HEXAGONAL, Orientation.STAGGERED):
            raise ValueError(
                f"Orientation {self.orientation.value!r} is not a staggered layout; "
                "use 'hexagonal' or 'staggered'"
            )

        for field_name in ("hex_side_length", "width", "height", "tile_width", "tile_height"):
            setattr(self, field_name, int(getattr(self, field_name)))

    def grid(self) -> HexGrid:
        return HexGrid(
            stagger_axis=self.stagger_axis,
            stagger_index=self.stagger_index,
            hex_side_length=self.hex_side_length,
            orientation=self.orientation,
        )

    def workspace(self) -> Workspace:
        return Workspace(self.width, self.height, self.tile_width, self.tile_height)

    @property
    def output_path(self) -> Path:
        return OUTPUT_DIR / f"{self.name}.svg"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapConfig":
        """Build a config from a dict, ignoring unknown keys."""
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            logger.debug("Ignoring unknown map config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("orientation", "stagger_axis", "stagger_index"):
            data[key] = data[key].value
        return data


def load_map_config(path) -> MapConfig:
    """
    Load a MapConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If a setting has an invalid value
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Map config not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Map config {path} must contain a JSON object")

    config = MapConfig.from_dict(data)
    logger.debug("Loaded map config %r from %s", config.name, path)
    return config


def save_map_config(config: MapConfig, path) -> None:
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
