"""regtestctl: inspect and verify regression snapshots."""

from __future__ import annotations

import json
import sys
import traceback
from pathlib import Path

import click

from regtest import __version__
from regtest.diff import diff_lines
from regtest.errors import CorruptSnapshot
from regtest.snapshot import load_snapshot


def handle_error(error: Exception, debug: bool) -> None:
    """Handle errors with structured output.

    Args:
        error: The exception that occurred
        debug: Whether to show full traceback
    """
    if debug:
        traceback.print_exc()
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="regtestctl")
@click.option('--debug', is_flag=True, help='Enable debug mode (show full tracebacks)')
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Regression snapshot tools."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug


@cli.command()
@click.argument('snapshot', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print entries as JSON')
@click.pass_context
def show(ctx: click.Context, snapshot: Path, as_json: bool):
    """Print the entries recorded in SNAPSHOT."""
    try:
        entries = load_snapshot(snapshot)
    except Exception as e:
        handle_error(e, ctx.obj.get('debug', False))
        return

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False))
        return

    for i, entry in enumerate(entries):
        click.echo(f"[{i}] {entry.kind.value}: {entry.text}")


@cli.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.pass_context
def verify(ctx: click.Context, path: Path):
    """Check that every snapshot under PATH can be loaded."""
    files = [path] if path.is_file() else sorted(path.rglob("*.json"))

    corrupt = 0
    for snapshot in files:
        try:
            entries = load_snapshot(snapshot)
        except CorruptSnapshot as e:
            corrupt += 1
            click.echo(f"CORRUPT {snapshot}", err=True)
            click.echo(f"  {e.reason}", err=True)
            for detail in e.errors:
                click.echo(f"  - {detail}", err=True)
            continue
        click.echo(f"ok      {snapshot} ({len(entries)} entries)")

    click.echo(f"\n{len(files)} snapshots checked, {corrupt} corrupt")
    if corrupt:
        sys.exit(1)


@cli.command()
@click.argument('expected', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('actual', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def diff(ctx: click.Context, expected: Path, actual: Path):
    """Show a line diff between two text files."""
    try:
        expected_text = expected.read_text(encoding="utf-8")
        actual_text = actual.read_text(encoding="utf-8")
    except Exception as e:
        handle_error(e, ctx.obj.get('debug', False))
        return

    click.echo(diff_lines(expected_text, actual_text), nl=False)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
