"""ril CLI: browse the catalog, practice with a timer and track progress."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer

from ril.application.config import AppConfig, resolve_config
from ril.application.controller import CatalogController
from ril.application.utils.text import preview, progress_bar
from ril.application.utils.time import format_time
from ril.consts import APP_NAME
from ril.domain.constants import ALL
from ril.domain.errors import CatalogError
from ril.domain.models import Challenge

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help=f"ril: {APP_NAME} challenge catalog.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage ril configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    storage: Annotated[
        Path | None, typer.Option("--storage", help="Progress file override.")
    ] = None,
    catalog: Annotated[
        Path | None, typer.Option("--catalog", help="Challenge catalog YAML override.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for ril."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"storage_path": storage, "catalog_path": catalog}
    if verbose:
        logging.getLogger("ril").setLevel(logging.DEBUG if verbose > 1 else logging.INFO)


def _config(ctx: typer.Context) -> AppConfig:
    obj = ctx.obj or {}
    return resolve_config(obj.get("overrides"))


def _controller(ctx: typer.Context, **kwargs: Any) -> CatalogController:
    from ril.application.factory import build_controller

    try:
        return build_controller(_config(ctx), **kwargs)
    except CatalogError as e:
        typer.secho(f"Catalog error: {e}", fg="red", err=True)
        raise typer.Exit(2)


def _require(controller: CatalogController, challenge_id: int) -> Challenge:
    challenge = controller.get_challenge(challenge_id)
    if challenge is None:
        typer.secho("Challenge not found.", fg="red", err=True)
        raise typer.Exit(1)
    return challenge


def _status_line(controller: CatalogController, challenge: Challenge) -> str:
    seconds = controller.completion_time(challenge.id)
    if controller.is_completed(challenge.id) and seconds is not None:
        return f"✓ Completed in {format_time(seconds)}"
    if controller.is_completed(challenge.id):
        return "✓ Completed"
    return f"⏱ {challenge.time_estimate}" if challenge.time_estimate else ""


def _progress_label(controller: CatalogController) -> str:
    return f"{controller.completed_count}/{controller.total} completed"


# ---------------------------------------------------------------------------
# Catalog commands
# ---------------------------------------------------------------------------


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    category: Annotated[
        str, typer.Option("--category", "-c", help="Category name, or 'All'.")
    ] = ALL,
    difficulty: Annotated[
        str, typer.Option("--difficulty", "-d", help="Difficulty name, or 'All'.")
    ] = ALL,
    query: Annotated[
        str, typer.Option("--query", "-q", help="Search titles and descriptions.")
    ] = "",
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List challenges matching the given filters."""
    controller = _controller(ctx)
    controller.set_category(category)
    controller.set_difficulty(difficulty)
    visible = controller.set_query(query)

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": c.id,
                        "title": c.title,
                        "category": c.category.value,
                        "difficulty": c.difficulty.value,
                        "time_estimate": c.time_estimate,
                        "completed": controller.is_completed(c.id),
                        "completion_time": controller.completion_time(c.id),
                    }
                    for c in visible
                ],
                indent=2,
            )
        )
        return

    typer.echo(
        f"{progress_bar(controller.progress)} {_progress_label(controller)}"
        f"  ({controller.progress}%)"
    )
    typer.echo(controller.showing_summary())

    if not visible:
        typer.secho("No challenges match your filters.", fg="yellow")
        return

    for c in visible:
        mark = "✓" if controller.is_completed(c.id) else " "
        typer.echo(f"\n {mark} [{c.id}] {c.title}")
        typer.echo(f"     {c.category.value} · {c.difficulty.value} · {_status_line(controller, c)}")
        typer.echo(f"     {preview(c.description)}")


@app.command()
def show(
    ctx: typer.Context,
    challenge_id: Annotated[int, typer.Argument(help="Challenge id.")],
    hints: Annotated[bool, typer.Option("--hints", help="Reveal key points.")] = False,
    solution: Annotated[
        bool, typer.Option("--solution", help="Reveal the solution and follow-up.")
    ] = False,
):
    """Show a challenge's brief and starter code."""
    controller = _controller(ctx)
    c = _require(controller, challenge_id)

    typer.secho(c.title, bold=True)
    typer.echo(f"{c.category.value} · {c.difficulty.value} · {_status_line(controller, c)}")
    typer.echo(f"\n{c.description}")

    if c.real_world:
        typer.secho("\n⚡ Real-World Context", bold=True)
        typer.echo(c.real_world)

    if c.requirements:
        typer.secho("\nRequirements", bold=True)
        for i, req in enumerate(c.requirements, start=1):
            typer.echo(f"  {i}. {req}")

    typer.secho("\nStarter Code", bold=True)
    typer.echo(c.starter_code)

    if hints and c.key_points:
        typer.secho("Key Points", bold=True)
        for point in c.key_points:
            typer.echo(f"  - {point}")

    if solution:
        typer.secho("\nSolution", bold=True)
        typer.echo(c.solution_code or "(no solution provided)")
        if c.follow_up:
            typer.secho("\nFollow-up", bold=True)
            typer.echo(c.follow_up)


@app.command()
def sandbox(
    ctx: typer.Context,
    challenge_id: Annotated[int, typer.Argument(help="Challenge id.")],
    directory: Annotated[
        Path | None, typer.Option("--dir", help="Sandbox directory. Defaults to config.")
    ] = None,
):
    """Write a challenge's starter code (and tests) into a sandbox directory."""
    if directory is not None:
        ctx.ensure_object(dict)
        ctx.obj.setdefault("overrides", {})["sandbox_dir"] = directory
    config = _config(ctx)
    controller = _controller(ctx)
    _require(controller, challenge_id)

    if not controller.run_in_sandbox(challenge_id=challenge_id):
        typer.secho(f"Could not write sandbox files to {config.sandbox_dir}", fg="red", err=True)
        raise typer.Exit(1)
    typer.secho(f"Sandbox ready in {config.sandbox_dir}", fg="green")


# ---------------------------------------------------------------------------
# Progress commands
# ---------------------------------------------------------------------------


@app.command()
def complete(
    ctx: typer.Context,
    challenge_id: Annotated[int, typer.Argument(help="Challenge id.")],
    seconds: Annotated[
        int | None, typer.Option("--seconds", "-s", min=0, help="Time taken, in seconds.")
    ] = None,
):
    """Mark a challenge complete, optionally recording how long it took."""
    controller = _controller(ctx)
    c = _require(controller, challenge_id)
    controller.mark_complete(c.id, seconds)

    msg = f"✓ {c.title}"
    if seconds is not None:
        msg += f" ({format_time(seconds)})"
    typer.secho(msg, fg="green")
    typer.echo(_progress_label(controller))


@app.command()
def progress(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show overall progress."""
    controller = _controller(ctx)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "completed": controller.completed_count,
                    "total": controller.total,
                    "percent": controller.progress,
                    "times": {
                        str(c.id): controller.completion_time(c.id)
                        for c in controller.challenges
                        if controller.completion_time(c.id) is not None
                    },
                },
                indent=2,
            )
        )
        return

    typer.echo(
        f"{progress_bar(controller.progress)} {_progress_label(controller)}"
        f"  ({controller.progress}%)"
    )


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Clear all recorded progress."""
    controller = _controller(ctx)
    if not controller.has_saved_progress:
        typer.echo("Nothing to reset.")
        return

    if not force and not typer.confirm(
        f"Reset progress for {controller.completed_count} challenges?"
    ):
        raise typer.Abort()

    controller.reset_progress()
    typer.secho("Progress reset.", fg="green")


# ---------------------------------------------------------------------------
# Practice
# ---------------------------------------------------------------------------


async def _wait_for_enter() -> None:
    loop = asyncio.get_running_loop()
    try:
        fd = sys.stdin.fileno()
        done: asyncio.Future[None] = loop.create_future()

        def on_readable() -> None:
            sys.stdin.readline()
            if not done.done():
                done.set_result(None)

        loop.add_reader(fd, on_readable)
    except (NotImplementedError, OSError, ValueError):
        # No reader support on this loop/stream (e.g. Windows proactor).
        await asyncio.to_thread(sys.stdin.readline)
        return

    try:
        await done
    finally:
        loop.remove_reader(fd)


async def _practice_session(controller: CatalogController, challenge_id: int) -> int:
    controller.open_challenge(challenge_id)
    typer.echo(f"⏱ {controller.timer_display}  (press Enter to stop)", nl=False)
    try:
        await _wait_for_enter()
    finally:
        controller.pause_timer()
    typer.echo("")
    return controller.timer_state.seconds


@app.command()
def practice(
    ctx: typer.Context,
    challenge_id: Annotated[int, typer.Argument(help="Challenge id.")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Mark complete without asking.")
    ] = False,
):
    """Start the practice timer on a challenge; stop it to record your time."""

    def on_tick(seconds: int) -> None:
        typer.echo(f"\r⏱ {format_time(seconds)}  (press Enter to stop)", nl=False)

    controller = _controller(ctx, on_tick=on_tick)
    c = _require(controller, challenge_id)

    typer.secho(c.title, bold=True)
    typer.echo(f"{c.category.value} · {c.difficulty.value} · ⏱ {c.time_estimate}")

    try:
        elapsed = asyncio.run(_practice_session(controller, c.id))
    except KeyboardInterrupt:
        typer.secho("\nPractice abandoned.", fg="yellow")
        raise typer.Exit(130)
    finally:
        controller.dispose()

    typer.echo(f"Time: {format_time(elapsed)}")
    if yes or typer.confirm("Mark complete?", default=True):
        controller.mark_complete(c.id, elapsed)
        typer.secho(f"✓ Completed in {format_time(elapsed)}", fg="green")
        typer.echo(_progress_label(controller))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
