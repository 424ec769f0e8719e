from __future__ import annotations

from dataclasses import dataclass
import importlib.util
import logging
from pathlib import Path
import tomllib

from curvelab.config import PlotterConfig, load_config, window_from_mapping
from curvelab.errors import ConfigError
from curvelab.series import CartesianSeries, PolarSeries, RelationSeries, SeriesDefinition
from curvelab.transform import ViewWindow


LOGGER = logging.getLogger(__name__)

MANIFEST_NAME = "graph.toml"
DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 600


@dataclass(frozen=True)
class GraphManifest:
    title: str
    entrypoint: str
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    device_pixel_ratio: float = 1.0
    window: ViewWindow | None = None
    config_path: Path | None = None


def load_manifest(graph_dir: str | Path) -> GraphManifest:
    graph_path = Path(graph_dir)
    manifest_path = graph_path / MANIFEST_NAME
    if not manifest_path.exists():
        raise FileNotFoundError(f"graph manifest not found: {manifest_path}")
    with manifest_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{manifest_path}: {exc}") from exc
    try:
        entrypoint = str(raw["entrypoint"])
    except KeyError as exc:
        raise ConfigError(f"manifest missing required field: {exc.args[0]}") from exc
    _parse_entrypoint(entrypoint)

    width = _coerce_positive_int(raw.get("width", DEFAULT_WIDTH), "width")
    height = _coerce_positive_int(raw.get("height", DEFAULT_HEIGHT), "height")
    dpr = raw.get("device_pixel_ratio", 1.0)
    if isinstance(dpr, bool) or not isinstance(dpr, (int, float)) or dpr <= 0:
        raise ConfigError("device_pixel_ratio must be a number > 0")

    view = raw.get("view")
    if view is not None and not isinstance(view, dict):
        raise ConfigError("`view` must be a table")
    window = window_from_mapping(view, source=str(manifest_path)) if view else None

    config_value = raw.get("config")
    if config_value is not None and not isinstance(config_value, str):
        raise ConfigError("`config` must be a path string")
    config_path = (graph_path / config_value) if config_value else None

    return GraphManifest(
        title=str(raw.get("title", graph_path.name)),
        entrypoint=entrypoint,
        width=width,
        height=height,
        device_pixel_ratio=float(dpr),
        window=window,
        config_path=config_path,
    )


def load_graph_config(manifest: GraphManifest) -> PlotterConfig:
    if manifest.config_path is None:
        return PlotterConfig()
    return load_config(manifest.config_path)


def load_series(graph_dir: str | Path, entrypoint: str) -> list[SeriesDefinition]:
    module_name, symbol_name = _parse_entrypoint(entrypoint)
    module = _load_module_from_graph_dir(Path(graph_dir).resolve(), module_name)
    if not hasattr(module, symbol_name):
        raise ConfigError(f"entrypoint symbol not found: {entrypoint}")
    symbol = getattr(module, symbol_name)
    produced = symbol() if callable(symbol) else symbol
    series = list(produced)
    for item in series:
        if not isinstance(item, (CartesianSeries, PolarSeries, RelationSeries)):
            raise ConfigError(f"entrypoint {entrypoint} produced a non-series value: {item!r}")
    LOGGER.info("loaded %d series from %s", len(series), entrypoint)
    return series


def _coerce_positive_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"`{field_name}` must be a positive integer")
    return value


def _parse_entrypoint(entrypoint: str) -> tuple[str, str]:
    if ":" not in entrypoint:
        raise ConfigError("entrypoint must use `module:symbol` format")
    module_name, symbol_name = entrypoint.split(":", 1)
    module_name = module_name.strip()
    symbol_name = symbol_name.strip()
    if not module_name or not symbol_name:
        raise ConfigError("entrypoint must include non-empty module and symbol")
    return module_name, symbol_name


def _load_module_from_graph_dir(graph_dir: Path, module_name: str):
    module_path = graph_dir.joinpath(*module_name.split(".")).with_suffix(".py")
    if not module_path.exists():
        raise ConfigError(f"entrypoint module file not found: {module_name}")
    unique_name = f"curvelab_graph_{abs(hash((str(graph_dir), module_name)))}"
    spec = importlib.util.spec_from_file_location(unique_name, module_path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"unable to load entrypoint module: {module_name}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
