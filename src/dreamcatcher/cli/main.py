"""Dreamcatcher CLI for inspecting machine files.

This module provides a command-line interface for:
- Validating machine files
- Listing states with their transitions and guards
- Enumerating paths between states
- Driving a machine to a target state
"""

import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from .. import __version__
from ..config.loader import load_machine
from ..core.definition import StmDef
from ..core.instance import make_instance
from ..core.paths import NotReachable, find_paths, reach_state
from ..core.states import ANY
from ..exceptions import DreamcatcherError

console = Console()


def _label(state: Any) -> str:
    return "*" if state is ANY else str(state)


def _load(machine_file: str):
    try:
        return load_machine(machine_file)
    except DreamcatcherError as e:
        console.print(f"[red]Invalid machine: {e}[/red]")
        sys.exit(1)


def _lookup_state(stm: StmDef, name: str) -> Any:
    """Match a command-line state name against the machine's states."""
    for state in stm.states():
        if str(state) == name:
            return state
    console.print(f"[red]Unknown state: {name}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Log engine decisions')
def cli(verbose: bool):
    """Dreamcatcher - Finite State Machine Tool"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@click.argument('machine_file', type=click.Path(exists=True))
def validate(machine_file: str):
    """Validate a machine file"""
    stm, _ = _load(machine_file)
    description = stm.to_dict()
    console.print(f"[green]✓[/green] {machine_file} is valid")
    console.print(f"  Name: {description['name'] or '-'}")
    console.print(f"  States: {len(description['states'])}")
    console.print(f"  Transitions: {len(description['transitions'])}")
    console.print(f"  Validators: {len(description['validators'])}")


@cli.command()
@click.argument('machine_file', type=click.Path(exists=True))
@click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'tree']), default='table')
def states(machine_file: str, output_format: str):
    """List states with their transitions and guards"""
    stm, _ = _load(machine_file)
    rows = [ANY] + stm.states()

    if output_format == 'tree':
        tree = Tree(f"[bold]{stm.name or machine_file}[/bold]")
        for state in rows:
            node = tree.add(_label(state))
            guarded = stm.validators(state)
            for target in stm.transitions(state):
                marker = " [yellow](guarded)[/yellow]" if target in guarded else ""
                node.add(f"→ {_label(target)}{marker}")
        console.print(tree)
        return

    table = Table(title=stm.name or machine_file)
    table.add_column("State", style="cyan")
    table.add_column("Transitions to")
    table.add_column("Guarded")
    for state in rows:
        transitions = stm.transitions(state)
        if state is ANY and not transitions and not stm.validators(ANY):
            continue
        table.add_row(
            _label(state),
            ", ".join(_label(t) for t in transitions) or "-",
            ", ".join(_label(t) for t in stm.validators(state)) or "-",
        )
    console.print(table)


@cli.command()
@click.argument('machine_file', type=click.Path(exists=True))
@click.argument('start')
@click.argument('target')
@click.option('--direct', is_flag=True, help='Ignore wildcard entry transitions')
@click.option('--max-paths', type=int, help='Stop after this many paths')
@click.option('--max-length', type=int, help='Ignore paths longer than this')
def paths(machine_file: str, start: str, target: str, direct: bool,
          max_paths: int | None, max_length: int | None):
    """Enumerate paths between two states"""
    stm, settings = _load(machine_file)
    overrides = {}
    if max_paths is not None:
        overrides['max_paths'] = max_paths
    if max_length is not None:
        overrides['max_path_length'] = max_length

    try:
        settings = settings.merged(overrides)
        found = find_paths(
            stm, _lookup_state(stm, start), _lookup_state(stm, target),
            include_wildcard=not direct, settings=settings,
        )
    except DreamcatcherError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not found:
        console.print(f"[yellow]No path from {start} to {target}[/yellow]")
        return

    table = Table(title=f"{start} → {target}")
    table.add_column("#", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Path")
    for i, path in enumerate(found, 1):
        table.add_row(str(i), str(len(path)), " → ".join([start] + [_label(s) for s in path]))
    console.print(table)


@cli.command()
@click.argument('machine_file', type=click.Path(exists=True))
@click.argument('start')
@click.argument('target')
@click.option('--data', '-d', help='Initial data (JSON string)')
def reach(machine_file: str, start: str, target: str, data: str | None):
    """Drive a machine from START to TARGET"""
    initial_data = None
    if data:
        try:
            initial_data = json.loads(data)
        except json.JSONDecodeError:
            console.print("[red]Invalid JSON data[/red]")
            sys.exit(1)

    stm, settings = _load(machine_file)
    try:
        instance = make_instance(stm, _lookup_state(stm, start), initial_data)
        result = reach_state(instance, _lookup_state(stm, target), settings=settings)
    except DreamcatcherError as e:
        console.print(f"[red]Execution error: {e}[/red]")
        sys.exit(1)

    if isinstance(result, NotReachable):
        console.print(
            f"[red]✗[/red] {target} is not reachable from {start} "
            f"({result.paths_tried} paths tried)"
        )
        sys.exit(1)

    console.print(f"[green]✓[/green] Reached {_label(result.state)}")
    console.print("\n[bold]Final Data:[/bold]")
    console.print(Syntax(json.dumps(result.data, indent=2, default=str), "json", theme="monokai"))


def main():
    """Entry point of the ``dreamcatcher`` script."""
    cli()


if __name__ == '__main__':
    main()
