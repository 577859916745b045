"""Classification rule commands."""

import click
from extrato.domain.category import CategoryService
from extrato.domain.errors import DomainError
from extrato.domain.rule import RuleService

from extrato.cli.account_resolution import resolve_category_or_exit
from extrato.cli.display import print_rule
from extrato.cli.error_handling import handle_domain_error

MATCHER_CHOICE = click.Choice(["CONTAINS", "REGEX"], case_sensitive=False)
TYPE_CHOICE = click.Choice(["RECEITA", "DESPESA"], case_sensitive=False)


def _category_names(db) -> dict[int, str]:
    return {c.id: c.name for c in CategoryService(db).list_categories()}


@click.group()
def rule_group():
    """Manage classification rules."""
    pass


@rule_group.command("add")
@click.argument("name")
@click.argument("pattern")
@click.option("--category", required=True, help="Target category name or ID")
@click.option("--type", "tipo", type=TYPE_CHOICE, help="Target type (defaults to the category's type)")
@click.option("--matcher", type=MATCHER_CHOICE, default="CONTAINS", show_default=True)
@click.option("--priority", type=int, default=0, show_default=True, help="Higher runs first")
@click.option("--inactive", is_flag=True, help="Create the rule deactivated")
@click.pass_context
def add_rule(
    ctx,
    name: str,
    pattern: str,
    category: str,
    tipo: str | None,
    matcher: str,
    priority: int,
    inactive: bool,
):
    """Create a classification rule.

    Examples:
        extrato rule add padaria PADARIA --category Alimentação
        extrato rule add pix-salario "^PIX RECEBIDO .*EMPRESA" --matcher regex --category Salário --priority 10
    """
    db = ctx.obj["db"]
    service = RuleService(db)
    target = resolve_category_or_exit(ctx, CategoryService(db), category)

    try:
        rule = service.create_rule(
            ctx.obj["actor"],
            name=name,
            matcher_type=matcher.upper(),
            pattern=pattern,
            category_id=target.id,
            tipo=tipo or target.tipo,
            priority=priority,
            active=not inactive,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created rule '{rule.name}' (ID: {rule.id}, version {rule.version})")


@rule_group.command("update")
@click.argument("rule_id", type=int)
@click.option("--pattern", help="New pattern")
@click.option("--matcher", type=MATCHER_CHOICE, help="New matcher type")
@click.option("--category", help="New target category name or ID")
@click.option("--type", "tipo", type=TYPE_CHOICE, help="New target type")
@click.option("--priority", type=int, help="New priority")
@click.pass_context
def update_rule(
    ctx,
    rule_id: int,
    pattern: str | None,
    matcher: str | None,
    category: str | None,
    tipo: str | None,
    priority: int | None,
):
    """Edit a rule.

    Changing how the rule matches creates a new version; transactions already
    classified keep pointing at the version that matched them.
    """
    db = ctx.obj["db"]
    service = RuleService(db)
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), category).id

    try:
        before = service.require_rule(rule_id)
        rule = service.update_rule(
            ctx.obj["actor"],
            rule_id,
            matcher_type=matcher.upper() if matcher else None,
            pattern=pattern,
            category_id=category_id,
            tipo=tipo,
            priority=priority,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if rule.version != before.version:
        click.echo(f"Rule {rule_id} updated to version {rule.version}")
    elif rule.priority != before.priority:
        click.echo(f"Rule {rule_id} priority set to {rule.priority}")
    else:
        click.echo(f"Rule {rule_id} unchanged")


@rule_group.command("activate")
@click.argument("rule_id", type=int)
@click.pass_context
def activate_rule(ctx, rule_id: int):
    """Activate a rule."""
    try:
        RuleService(ctx.obj["db"]).activate_rule(ctx.obj["actor"], rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rule {rule_id} activated")


@rule_group.command("deactivate")
@click.argument("rule_id", type=int)
@click.pass_context
def deactivate_rule(ctx, rule_id: int):
    """Deactivate a rule. Existing classifications are kept."""
    try:
        RuleService(ctx.obj["db"]).deactivate_rule(ctx.obj["actor"], rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rule {rule_id} deactivated")


@rule_group.command("list")
@click.option("--active-only", is_flag=True, help="Only list active rules")
@click.pass_context
def list_rules(ctx, active_only: bool):
    """List rules in evaluation order."""
    db = ctx.obj["db"]
    rules = RuleService(db).list_rules(active_only=active_only)
    if not rules:
        click.echo("No rules found.")
        return

    categories = _category_names(db)
    click.echo(f"\n{'ID':<5} {'Prio':>5} {'Ver':>4}  {'State':<8} {'Name':<20} {'Match':<35} Category")
    click.echo("-" * 100)
    for r in rules:
        state = "active" if r.active else "inactive"
        match = f"{r.matcher_type.value} '{r.pattern}'"
        click.echo(
            f"{r.id:<5} {r.priority:>5} {r.version:>4}  {state:<8} {r.name[:20]:<20} "
            f"{match[:35]:<35} {categories.get(r.category_id, r.category_id)}"
        )


@rule_group.command("show")
@click.argument("rule_id", type=int)
@click.option("--version", type=int, help="Show a specific version")
@click.option("--history", is_flag=True, help="Show every version")
@click.pass_context
def show_rule(ctx, rule_id: int, version: int | None, history: bool):
    """Show a rule at its current or a given version."""
    db = ctx.obj["db"]
    service = RuleService(db)
    try:
        rules = (
            service.list_rule_versions(rule_id)
            if history
            else [service.require_rule(rule_id, version=version)]
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    categories = _category_names(db)
    for r in rules:
        print_rule(r, categories.get(r.category_id, str(r.category_id)))


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
