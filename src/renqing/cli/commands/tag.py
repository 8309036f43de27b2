"""Tag vocabulary commands."""

import click
from renqing.cli.error_handling import handle_domain_error
from renqing.domain.errors import DomainError
from renqing.domain.tags import TagService


@click.group()
def tag_group():
    """Manage the tag vocabulary."""
    pass


@tag_group.command("list")
@click.pass_context
def list_tags(ctx):
    """List all tags."""
    tags = TagService(ctx.obj["storage"]).list_tags()
    if not tags:
        click.echo("No tags defined.")
        return
    for tag in tags:
        click.echo(tag)


@tag_group.command("add")
@click.argument("name")
@click.pass_context
def add_tag(ctx, name: str):
    """Add a tag to the vocabulary."""
    try:
        TagService(ctx.obj["storage"]).add_tag(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added tag '{name.strip()}'")


@tag_group.command("remove")
@click.argument("name")
@click.pass_context
def remove_tag(ctx, name: str):
    """Remove a tag from the vocabulary.

    Transactions that already carry the tag keep it.
    """
    service = TagService(ctx.obj["storage"])
    if name.strip() not in service.list_tags():
        click.echo(f"Error: Tag '{name}' not found", err=True)
        ctx.exit(1)
    service.remove_tag(name)
    click.echo(f"Removed tag '{name.strip()}'")


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
