"""CLI interface for bookmark-threads.

Commands:
    setup   - Configure the owner account and OAuth client
    thread  - Print the reconstructed thread for a saved post as JSON
    import  - Import saved posts from a JSON file into the local store
    status  - Show current configuration and store status
"""

import json
import sys
from pathlib import Path

import click

from .config import (
    CONFIG_FILE,
    AppConfig,
    AuthConfig,
    config_exists,
    load_config,
    save_config,
)
from .logging_config import setup_logging

EXIT_INTERNAL = 1
EXIT_UNAUTHORIZED = 2
EXIT_NOT_FOUND = 3


def _require_config(config_path: Path) -> AppConfig:
    if not config_exists(config_path):
        click.echo(
            "Error: No config found. Run 'bookmark-threads setup' first.",
            err=True,
        )
        sys.exit(1)
    try:
        return load_config(config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """Bookmark Threads: rebuild the conversation around a saved post."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE


@main.command()
@click.pass_context
def setup(ctx):
    """Configure the owner account and OAuth client credentials."""
    config_path = ctx.obj["config_path"]

    click.echo("Bookmark Threads — Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("The owner is the account whose saved posts are searched.")
    owner = click.prompt("owner")

    click.echo()
    click.echo("(Optional) OAuth2 client for the canonical API fallback.")
    click.echo("Press Enter to skip; only the mirror will be used.")
    client_id = click.prompt("client_id", default="", show_default=False)
    client_secret = ""
    if client_id:
        client_secret = click.prompt("client_secret", hide_input=True)

    config = AppConfig(
        auth=AuthConfig(
            owner=owner, client_id=client_id, client_secret=client_secret
        ),
    )
    save_config(config, config_path)
    click.echo(f"\nConfig saved to {config_path}")


@main.command()
@click.argument("post_id")
@click.option("--owner", default=None, help="Owner to act as (default: configured)")
@click.option("--compact", is_flag=True, help="Print JSON on a single line")
@click.pass_context
def thread(ctx, post_id, owner, compact):
    """Print the thread around POST_ID as JSON."""
    from .errors import PostNotFoundError, ThreadInternalError, UnauthorizedError
    from .service import build_service

    config = _require_config(ctx.obj["config_path"])
    effective_owner = owner if owner is not None else config.auth.owner

    try:
        service, _ = build_service(config)
        with service:
            result = service.get_thread(effective_owner, post_id)
    except UnauthorizedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_UNAUTHORIZED)
    except PostNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_FOUND)
    except ThreadInternalError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_INTERNAL)

    indent = None if compact else 2
    click.echo(json.dumps(result.to_dict(), indent=indent, ensure_ascii=False))


@main.command(name="import")
@click.argument("input_file", type=click.Path(exists=True))
@click.option("--owner", default=None, help="Owner to import as (default: configured)")
@click.pass_context
def import_posts(ctx, input_file, owner):
    """Import saved posts from a JSON file.

    INPUT_FILE holds a JSON list of post records, or an object with a
    "posts" list, in the store's record format.
    """
    from .store import PostStore, post_from_dict

    config = _require_config(ctx.obj["config_path"])
    effective_owner = owner or config.auth.owner

    data = json.loads(Path(input_file).read_text(encoding="utf-8"))
    records = data.get("posts", []) if isinstance(data, dict) else data

    store = PostStore(config.posts_file)
    imported = 0
    for record in records:
        try:
            store.add(post_from_dict(record, owner=effective_owner))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            click.echo(f"Skipping malformed record: {e}", err=True)
            continue
        imported += 1
    store.save()

    click.echo(f"Imported {imported} posts for {effective_owner} into {config.posts_file}")


@main.command()
@click.pass_context
def status(ctx):
    """Show current configuration and store status."""
    config_path = ctx.obj["config_path"]
    has_config = config_exists(config_path)

    click.echo("Bookmark Threads — Status")
    click.echo("=" * 40)
    click.echo(f"Config: {'Found' if has_config else 'Not configured'} ({config_path})")

    if not has_config:
        click.echo("\nRun 'bookmark-threads setup' to get started.")
        return

    config = load_config(config_path)

    from .store import PostStore

    store = PostStore(config.posts_file)
    click.echo(f"Owner: {config.auth.owner}")
    click.echo(f"Posts file: {config.posts_file}")
    click.echo(f"Saved posts: {store.count(config.auth.owner)}")
    canonical = "enabled" if config.auth.client_id else "disabled"
    click.echo(f"Canonical API fallback: {canonical}")
