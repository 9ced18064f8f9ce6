"""Settings for the map generator, read from a JSON settings file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union


class ConfigError(ValueError):
    """Raised when a settings document is malformed."""


@dataclass
class ForcesConfig:
    use_ref_freq: bool = True
    initial_close_repulsion: bool = False
    close_repulsion_a: float = 1e9
    close_repulsion_b: float = 1e14
    close_repulsion_c: float = 1.1
    close_repulsion_d: float = 0.6
    link_strength: float = 1.17
    anti_gravity_falloff_rsq: float = 1e6


@dataclass
class MapOrientationConfig:
    category: Optional[str] = None
    angle: float = 0.0


@dataclass
class NbodyConfig:
    use_external_cites: bool = False
    mass_cites_exponent: float = 1.0
    add_missing_cats: bool = False
    forces: ForcesConfig = field(default_factory=ForcesConfig)
    map_orientation: MapOrientationConfig = field(default_factory=MapOrientationConfig)


@dataclass
class TilesConfig:
    background_col: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class MetaTableConfig:
    name: str = "meta_data"
    where_clause: str = "arxiv IS NOT NULL AND status != 'WDN'"
    extra_clause: str = ""
    field_id: str = "id"
    field_title: str = ""
    field_authors: str = ""
    field_allcats: str = "allcats"
    field_keywords: str = ""


@dataclass
class RefsTableConfig:
    name: str = "pcite"
    field_id: str = "id"
    field_refs: str = "refs"
    rblob_order: bool = True
    rblob_freq: bool = True
    rblob_cites: bool = True
    add_missing_cats: bool = False


@dataclass
class MapTableConfig:
    name: Optional[str] = None
    field_id: Optional[str] = None
    field_x: Optional[str] = None
    field_y: Optional[str] = None
    field_r: Optional[str] = None


@dataclass
class SqlConfig:
    meta_table: MetaTableConfig = field(default_factory=MetaTableConfig)
    refs_table: RefsTableConfig = field(default_factory=RefsTableConfig)
    map_table: MapTableConfig = field(default_factory=MapTableConfig)


@dataclass
class InitConfig:
    """The whole settings document; mirrors the structure of the JSON file."""

    description: str
    ids_time_ordered: bool = True
    nbody: NbodyConfig = field(default_factory=NbodyConfig)
    tiles: TilesConfig = field(default_factory=TilesConfig)
    sql: SqlConfig = field(default_factory=SqlConfig)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _obj(parent: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    value = parent.get(key)
    return value if isinstance(value, dict) else None


def _set_from(target: Any, source: Mapping[str, Any], key: str, kind: type) -> None:
    """Set ``target.key`` from ``source[key]`` when present with the right kind."""
    value = source.get(key)
    if kind is bool:
        if isinstance(value, bool):
            setattr(target, key, value)
    elif kind is float:
        if _is_number(value):
            setattr(target, key, float(value))
    elif kind is str:
        if isinstance(value, str):
            setattr(target, key, value)


def _parse_colour(value: Any) -> tuple[float, float, float]:
    if not isinstance(value, list) or len(value) != 3:
        raise ConfigError("expecting an array of size 3")
    colour = []
    for elem in value:
        # unsigned integers and reals are accepted; signed integers are not
        if isinstance(elem, bool) or not (
            isinstance(elem, float) or (isinstance(elem, int) and elem >= 0)
        ):
            raise ConfigError("expecting a number")
        colour.append(float(elem))
    return colour[0], colour[1], colour[2]


def parse_init_config(data: Any) -> InitConfig:
    """Build a configuration from a decoded JSON object, filling in defaults."""
    if not isinstance(data, dict):
        raise ConfigError("expecting a JSON object")
    description = data.get("description")
    if not isinstance(description, str):
        raise ConfigError("expecting a string member 'description'")

    config = InitConfig(description=description)
    _set_from(config, data, "ids_time_ordered", bool)

    nbody = _obj(data, "nbody")
    if nbody is not None:
        _set_from(config.nbody, nbody, "use_external_cites", bool)
        _set_from(config.nbody, nbody, "mass_cites_exponent", float)
        _set_from(config.nbody, nbody, "add_missing_cats", bool)

        forces = _obj(nbody, "forces")
        if forces is not None:
            target = config.nbody.forces
            for key in (
                "close_repulsion_a",
                "close_repulsion_b",
                "close_repulsion_c",
                "close_repulsion_d",
                "link_strength",
                "anti_gravity_falloff_rsq",
            ):
                _set_from(target, forces, key, float)
            _set_from(target, forces, "use_ref_freq", bool)
            _set_from(target, forces, "initial_close_repulsion", bool)

        orientation = _obj(nbody, "map_orientation")
        if orientation is not None:
            _set_from(config.nbody.map_orientation, orientation, "category", str)
            _set_from(config.nbody.map_orientation, orientation, "angle", float)

    tiles = _obj(data, "tiles")
    if tiles is not None and isinstance(tiles.get("background_col"), list):
        config.tiles.background_col = _parse_colour(tiles["background_col"])

    sql = _obj(data, "sql")
    if sql is not None:
        meta = _obj(sql, "meta_table")
        if meta is not None:
            for key in (
                "name",
                "where_clause",
                "extra_clause",
                "field_id",
                "field_title",
                "field_authors",
                "field_allcats",
                "field_keywords",
            ):
                _set_from(config.sql.meta_table, meta, key, str)

        refs = _obj(sql, "refs_table")
        if refs is not None:
            for key in ("name", "field_id", "field_refs"):
                _set_from(config.sql.refs_table, refs, key, str)
            for key in ("rblob_order", "rblob_freq", "rblob_cites"):
                _set_from(config.sql.refs_table, refs, key, bool)

        map_table = _obj(sql, "map_table")
        if map_table is not None:
            for key in ("name", "field_id", "field_x", "field_y", "field_r"):
                _set_from(config.sql.map_table, map_table, key, str)

    return config


def load_init_config(path: Union[str, Path]) -> InitConfig:
    """Read a settings file holding exactly one JSON object."""
    text = Path(path).read_text(encoding="utf-8")
    decoder = json.JSONDecoder()
    stripped = text.lstrip()
    try:
        data, end = decoder.raw_decode(stripped)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
    if stripped[end:].strip():
        raise ConfigError(f"expecting a single JSON object in {path}")
    config = parse_init_config(data)
    print(f"Reading in settings for: {config.description}")
    return config