"""zonemerge CLI.

Command-line interface for converging saved map documents and inspecting
their search area.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from zonemerge import __version__
from zonemerge.geometry import zoom_for_radius
from zonemerge.overlay import (
    ConvergenceLimitError,
    area_of,
    compute_search_area,
    converge,
)
from zonemerge.persistence import DecodeError, MapStore
from zonemerge.utils.logging import (
    configure_logging,
    get_logger,
    set_correlation_context,
)

app = typer.Typer(
    name="zonemerge",
    help="zonemerge: merge overlapping inside/outside map zones",
    add_completion=False,
)

_VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
    ),
]
_JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]
_MapPath = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a saved map document (GeoJSON FeatureCollection)",
    ),
]


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(json_output: _JsonOption = False) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"zonemerge {__version__}")


@app.command(name="converge")
def converge_command(
    map_path: _MapPath,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output", "-o", help="Write the result here instead of in place"
        ),
    ] = None,
    max_steps: Annotated[
        int | None,
        typer.Option("--max-steps", min=1, help="Maximum number of merges"),
    ] = None,
    verbose: _VerboseOption = 0,
    json_output: _JsonOption = False,
) -> None:
    """Merge overlapping zones until none overlap, then save."""
    _configure_logging(verbose)
    logger = get_logger(__name__)
    set_correlation_context(map_id=str(map_path))

    try:
        decoded = MapStore(map_path).load()
        shape_set = decoded.shape_set
        merges = converge(shape_set, max_steps=max_steps)

        target = output or map_path
        MapStore(target).save(shape_set, decoded.circle_count, decoded.earned_reward)
        logger.info("Converged map saved", path=str(target), merges=merges)
    except (DecodeError, ConvergenceLimitError) as e:
        _fail(e, json_output)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "merges": merges,
                    "circles": len(shape_set.circles),
                    "regions": len(shape_set.regions),
                    "output": str(target),
                },
                indent=2,
            )
        )
    else:
        typer.echo(f"Merges: {merges}")
        typer.echo(f"Circles: {len(shape_set.circles)}")
        typer.echo(f"Regions: {len(shape_set.regions)}")
        typer.echo(f"Saved to {target}")


@app.command(name="search-area")
def search_area_command(
    map_path: _MapPath,
    verbose: _VerboseOption = 0,
    json_output: _JsonOption = False,
) -> None:
    """Show the area left by the inside circles minus the outside circles."""
    _configure_logging(verbose)
    set_correlation_context(map_id=str(map_path))

    try:
        decoded = MapStore(map_path).load()
    except DecodeError as e:
        _fail(e, json_output)

    area = compute_search_area(decoded.shape_set)
    if json_output:
        payload: dict[str, object] = {"found": area is not None}
        if area is not None:
            payload["source_ids"] = list(area.source_ids)
            payload["polygons"] = len(area.rings)
            payload["area_deg2"] = area_of(area.rings)
        typer.echo(json.dumps(payload, indent=2))
    elif area is None:
        typer.echo("No search area left")
    else:
        sources = ", ".join(str(source) for source in area.source_ids)
        typer.echo(f"Search area from circles: {sources}")
        typer.echo(f"Polygons: {len(area.rings)}")


@app.command()
def zoom(
    radius: Annotated[float, typer.Argument(min=0.0, help="Circle radius in meters")],
) -> None:
    """Print the map zoom level that fits a circle of RADIUS meters."""
    try:
        level = zoom_for_radius(radius)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(str(level))


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """zonemerge: merge overlapping inside/outside map zones."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _fail(error: Exception, json_output: bool) -> NoReturn:
    if json_output:
        typer.echo(json.dumps({"error": str(error)}))
    else:
        typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1) from None


if __name__ == "__main__":  # pragma: no cover
    app()
