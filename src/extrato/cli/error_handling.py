"""CLI error handling helpers."""

import click

from extrato.domain.errors import DomainError, DuplicateImportError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, DuplicateImportError) and error.uploaded_at is not None:
        click.echo(f"Existing batch uploaded at {error.uploaded_at:%Y-%m-%d %H:%M}", err=True)
    ctx.exit(1)
