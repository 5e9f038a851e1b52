"""CLI entry point for pipedit.

Provides commands for:
- Rendering a pipeline (pipedit show)
- Listing drop zones for a picked processor (pipedit zones)
- Moving, duplicating and removing processors (pipedit move/duplicate/remove)

Edits are applied in memory; the resulting pipeline is printed as JSON on
stdout and the input file is never written.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.markup import escape

from pipedit import __version__
from pipedit.config import ConfigError, EditorConfig, load_editor_config
from pipedit.core.logging import configure_logging
from pipedit.display import ForestDisplay
from pipedit.editor import (
    AlwaysConfirm,
    EditorOrchestrator,
    NullSettingsForm,
    RemovalConfirmationProtocol,
)
from pipedit.interaction import DuplicateAction, RemoveAction
from pipedit.tree import (
    ProcessorNode,
    Selector,
    TreeError,
    TreeStore,
    load_pipeline,
)

# Global consoles for Rich output
console = Console()
err_console = Console(stderr=True)


class ClickRemovalConfirmation:
    """Asks on the terminal before removing a processor with a failure branch."""

    def confirm(self, processor: ProcessorNode) -> bool:
        count = len(processor.on_failure or [])
        return click.confirm(
            f"Remove '{processor.content.type}' and its {count} failure processor(s)?",
            default=False,
            err=True,
        )


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    sys.exit(1)


def _open_editor(
    pipeline: Path,
    confirmation: RemovalConfirmationProtocol | None = None,
) -> EditorOrchestrator:
    try:
        forest = load_pipeline(pipeline)
    except TreeError as e:
        _fail(str(e))
    return EditorOrchestrator(
        store=TreeStore(forest),
        settings_form=NullSettingsForm(),
        removal_confirmation=confirmation or AlwaysConfirm(),
    )


def _run(operation: Callable[[], Any]) -> Any:
    try:
        return operation()
    except TreeError as e:
        _fail(str(e))


def _echo_pipeline(editor: EditorOrchestrator) -> None:
    click.echo(json.dumps(editor.get_update().serialize(), indent=2))


def _display(ctx: click.Context) -> ForestDisplay:
    config: EditorConfig = ctx.obj
    return ForestDisplay(console=console, config=config.display)


pipeline_argument = click.argument(
    "pipeline", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


@click.group()
@click.version_option(version=__version__, prog_name="pipedit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to pipedit.yaml (default: $PIPEDIT_CONFIG or ./pipedit.yaml)",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None) -> None:
    """pipedit - rearrange ingest pipeline processors safely."""
    try:
        config = load_editor_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)

    configure_logging(
        level=config.logging.level,
        json_format=config.logging.json_format,
    )
    ctx.obj = config


@main.command()
@pipeline_argument
@click.option("--pick", "picked", help="Highlight the processor at this selector")
@click.pass_context
def show(ctx: click.Context, pipeline: Path, picked: str | None) -> None:
    """Render PIPELINE as a tree with selectors.

    Examples:
        pipedit show pipeline.json
        pipedit show pipeline.yaml --pick processors.1
    """
    editor = _open_editor(pipeline)
    if picked:
        _run(lambda: editor.pick(Selector.parse(picked)))
    _display(ctx).show_forest(editor.store.forest, editor.interaction_state)


@main.command()
@pipeline_argument
@click.argument("selector")
@click.pass_context
def zones(ctx: click.Context, pipeline: Path, selector: str) -> None:
    """List drop zones for moving the processor at SELECTOR."""
    editor = _open_editor(pipeline)
    state = _run(lambda: editor.pick(Selector.parse(selector)))
    _display(ctx).show_drop_zones(editor.drop_zones(), state)


@main.command()
@pipeline_argument
@click.argument("source")
@click.argument("destination")
def move(pipeline: Path, source: str, destination: str) -> None:
    """Move the processor at SOURCE into the gap DESTINATION.

    DESTINATION is an insertion point on the tree as it is now, e.g.
    processors.0 for "above the first processor".

    Examples:
        pipedit move pipeline.json processors.1 processors.0
        pipedit move pipeline.json processors.0 onFailure.0
    """
    editor = _open_editor(pipeline)
    _run(lambda: editor.pick(Selector.parse(source)))
    target = _run(lambda: Selector.parse(destination))

    zone = next((z for z in editor.drop_zones() if z.destination == target), None)
    if zone is None:
        _fail(f"{destination} is not a drop zone")
    if editor.is_drop_zone_disabled(zone):
        _fail(f"{destination} is not a legal drop zone for {source}")

    result = _run(lambda: editor.drop(zone))
    if result is None or not result.moved:
        reason = result.rejection.value if result and result.rejection else "rejected"
        _fail(f"Move refused: {reason}")
    _echo_pipeline(editor)


@main.command()
@pipeline_argument
@click.argument("source")
def duplicate(pipeline: Path, source: str) -> None:
    """Insert a copy of the processor at SOURCE right after it."""
    editor = _open_editor(pipeline)
    _run(lambda: editor.dispatch(DuplicateAction(source=Selector.parse(source))))
    _echo_pipeline(editor)


@main.command()
@pipeline_argument
@click.argument("selector")
@click.option("--yes", is_flag=True, help="Do not ask before removing failure branches")
def remove(pipeline: Path, selector: str, yes: bool) -> None:
    """Remove the processor at SELECTOR.

    Processors with their own failure processors ask for confirmation
    unless --yes is given.
    """
    confirmation = AlwaysConfirm() if yes else ClickRemovalConfirmation()
    editor = _open_editor(pipeline, confirmation)

    def _remove() -> ProcessorNode | None:
        target = Selector.parse(selector)
        return editor.dispatch(
            RemoveAction(selector=target, processor=editor.store.get(target))
        )

    if _run(_remove) is None:
        err_console.print("[yellow]Removal cancelled[/yellow]")
        sys.exit(1)
    _echo_pipeline(editor)
