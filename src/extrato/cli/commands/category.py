"""Category management commands."""

import click
from extrato.domain.category import CategoryService
from extrato.domain.errors import DomainError

from extrato.cli.error_handling import handle_domain_error

TYPE_CHOICE = click.Choice(["RECEITA", "DESPESA"], case_sensitive=False)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="Only list one transaction type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories(tipo=category_type)
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"{cat.id:4d}  {cat.tipo.value:8s} {cat.name}")


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=TYPE_CHOICE, required=True, help="RECEITA or DESPESA")
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a new category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(name=name, tipo=category_type)
        click.echo(f"Created category '{name.strip()}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Initialize database with the default category set.

    Categories that already exist are left alone.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    created = service.create_default_categories()
    if created == 0:
        click.echo("Default categories already exist.")
    else:
        click.echo(f"Successfully created {created} categories.")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
    cli.add_command(init_categories)
