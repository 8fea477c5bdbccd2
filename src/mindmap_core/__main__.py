"""CLI entry point for mindmap-core."""

import json
import logging
import sys

import click

from mindmap_core.errors import TreeInvariantError
from mindmap_core.model.serialize import load_json
from mindmap_core.model.tree import validate_tree
from mindmap_core.store import DocumentStore


def _load_store(path: str, validate: bool = True) -> DocumentStore:
    try:
        with open(path) as f:
            text = f.read()
    except OSError as e:
        click.echo(f"error: cannot read '{path}': {e}", err=True)
        sys.exit(1)

    try:
        document, nodes = load_json(text)
        store = DocumentStore()
        store.load_document(document, nodes, validate=validate)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)
    return store


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Mind-map document layout and geometry tools."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("input", type=click.Path(exists=True))
def layout(input: str) -> None:
    """Print the final position of every node as JSON."""
    store = _load_store(input)
    positions = {node_id: {"x": pos.x, "y": pos.y} for node_id, pos in store.node_positions().items()}
    click.echo(json.dumps(positions, indent=2))


@main.command()
@click.argument("input", type=click.Path(exists=True))
def connections(input: str) -> None:
    """Print one line per connection: id, curve path, and midpoint."""
    store = _load_store(input)
    for conn in store.connections():
        click.echo(f"{conn.id}\t{conn.path}\t{conn.midpoint.x:g},{conn.midpoint.y:g}")


@main.command()
@click.argument("input", type=click.Path(exists=True))
def validate(input: str) -> None:
    """Check that the document's nodes form a single consistent tree."""
    store = _load_store(input, validate=False)
    try:
        validate_tree(store.nodes, store.root_id)
    except TreeInvariantError as e:
        click.echo(f"invalid: {e}", err=True)
        sys.exit(1)
    click.echo(f"ok: {len(store.nodes)} nodes")


if __name__ == "__main__":
    main()
