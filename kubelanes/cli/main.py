"""Click commands that run the engine over JSON event dumps."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import click

from kubelanes import __version__
from kubelanes.codec import (
    PayloadFormatError,
    events_from_list,
    lane_to_dict,
    parse_timestamp,
    timeline_result_to_dict,
    topology_from_dict,
)
from kubelanes.config import load_config
from kubelanes.engine import TimelineEngine
from kubelanes.hierarchy import build_hierarchy
from kubelanes.models.config import KubeLanesConfig
from kubelanes.models.events import TimelineEvent
from kubelanes.models.lanes import ResourceRef
from kubelanes.models.topology import Topology
from kubelanes.observability.logging import LOG_FORMATS, LOG_LEVELS, get_logger, setup_logging
from kubelanes.render import NamespacePalette

_WINDOW_RE = re.compile(r"^([0-9]+)(m|h|d)$")
_WINDOW_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


def parse_window(value: str) -> timedelta:
    """Parse ``30m`` / ``2h`` / ``7d`` into a timedelta."""
    match = _WINDOW_RE.match(value)
    if not match or int(match.group(1)) == 0:
        raise click.BadParameter(f"Invalid time window format: {value}")
    return timedelta(**{_WINDOW_UNITS[match.group(2)]: int(match.group(1))})


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc


def _load_inputs(events_file: Path, topology_file: Path | None) -> tuple[list[TimelineEvent], Topology | None]:
    try:
        events = events_from_list(_load_json(events_file))
    except PayloadFormatError as exc:
        raise click.ClickException(f"{events_file}: {exc.code}: {exc}") from exc
    topology = topology_from_dict(_load_json(topology_file)) if topology_file is not None else None
    return events, topology


def _parse_resource(value: str | None) -> ResourceRef | None:
    if value is None:
        return None
    ref = ResourceRef.parse(value)
    if not ref.kind or not ref.name:
        raise click.BadParameter(f"Expected Kind/namespace/name, got {value!r}", param_hint="--resource")
    return ref


def _emit(payload: dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
@click.version_option(__version__, prog_name="kubelanes")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default=None)
@click.option("--log-format", type=click.Choice(LOG_FORMATS), default=None, help="Log line format on stderr.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """Correlate cluster events into resource lanes and health timelines."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    if log_level is not None:
        config.log.level = log_level
    if log_format is not None:
        config.log.format = log_format
    setup_logging(config.log.level, config.log.format)
    ctx.obj = config


_events_arg = click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_topology_opt = click.option(
    "--topology",
    "topology_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Topology snapshot JSON (nodes and edges).",
)
_resource_opt = click.option("--resource", default=None, help="Focal resource as Kind/namespace/name.")
_colors_opt = click.option("--colors/--no-colors", default=False, help="Include namespace colours.")


@cli.command()
@_events_arg
@_topology_opt
@_resource_opt
@click.option("--group-by-app/--no-group-by-app", default=None, help="Group primary kinds by app label.")
@_colors_opt
@click.pass_obj
def lanes(
    config: KubeLanesConfig,
    events_file: Path,
    topology_file: Path | None,
    resource: str | None,
    group_by_app: bool | None,
    colors: bool,
) -> None:
    """Print the lane forest built from EVENTS_FILE."""
    events, topology = _load_inputs(events_file, topology_file)
    forest = build_hierarchy(
        events,
        topology=topology,
        root_resource=_parse_resource(resource),
        group_by_app=config.hierarchy.group_by_app if group_by_app is None else group_by_app,
        app_label_keys=config.hierarchy.app_label_keys,
    )
    palette = NamespacePalette() if colors else None
    get_logger("cli").info("lanes_built", events=len(events), lanes=len(forest))
    _emit({"lanes": [lane_to_dict(lane, palette) for lane in forest]})


@cli.command()
@_events_arg
@_topology_opt
@_resource_opt
@click.option("--window", default="2h", show_default=True, help="Visible window ending at --now (e.g. 30m, 2h, 7d).")
@click.option("--now", "now_value", default=None, help="End of the window as ISO-8601 (default: current time).")
@click.option("--hide-routine/--show-routine", default=None, help="Drop lease/lock/endpoint noise.")
@_colors_opt
@click.pass_obj
def health(
    config: KubeLanesConfig,
    events_file: Path,
    topology_file: Path | None,
    resource: str | None,
    window: str,
    now_value: str | None,
    hide_routine: bool | None,
    colors: bool,
) -> None:
    """Print lanes and health spans for the window ending at --now."""
    try:
        now = parse_timestamp(now_value) if now_value else datetime.now(tz=UTC)
    except PayloadFormatError as exc:
        raise click.BadParameter(str(exc), param_hint="--now") from exc
    window_start = now - parse_window(window)
    if hide_routine is not None:
        config.timeline.hide_routine_events = hide_routine

    events, topology = _load_inputs(events_file, topology_file)
    result = TimelineEngine(config).build(
        events,
        window_start,
        now,
        topology=topology,
        root_resource=_parse_resource(resource),
    )
    palette = NamespacePalette() if colors else None
    payload = timeline_result_to_dict(result, palette)
    payload["window"] = {"start": window_start.isoformat(), "end": now.isoformat()}
    _emit(payload)
