"""CLI commands for squadcast-provider."""

from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.table import Table

from .api.client import Client
from .docs import generate_docs
from .engine import (
    Action,
    Applier,
    Configuration,
    Plan,
    Planner,
    State,
    destroy,
    import_resource,
)
from .errors import SquadcastError
from .log import configure_logging
from .provider import Provider
from .tf import Diagnostic

console = Console()

ACTION_STYLES = {
    Action.CREATE: "green",
    Action.UPDATE: "yellow",
    Action.REPLACE: "magenta",
    Action.DELETE: "red",
    Action.READ: "cyan",
    Action.NOOP: "dim",
}


@click.group()
@click.option("--config", "config_path", default="main.yaml", help="Configuration file")
@click.option("--state", "state_path", default="squadcast.state.yaml", help="State file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def main(ctx: click.Context, config_path: str, state_path: str, log_level: str | None) -> None:
    """Squadcast Provider - manage Squadcast configuration declaratively."""
    ctx.ensure_object(dict)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e
    ctx.obj["config_path"] = Path(config_path)
    ctx.obj["state_path"] = Path(state_path)
    ctx.obj["provider"] = Provider()


def _load_config(ctx: click.Context) -> Configuration:
    try:
        return Configuration.load(ctx.obj["config_path"])
    except SquadcastError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


def _load_state(ctx: click.Context) -> State:
    try:
        return State.load(ctx.obj["state_path"])
    except SquadcastError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


def _client(ctx: click.Context, config: Configuration | None) -> Client:
    """Configured API client, created once per invocation."""
    if "client" not in ctx.obj:
        provider: Provider = ctx.obj["provider"]
        try:
            client = provider.configure(config.provider if config else None)
        except SquadcastError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        ctx.obj["client"] = ctx.with_resource(client)
    return ctx.obj["client"]


def _print_diagnostics(diags: list[Diagnostic]) -> None:
    for d in diags:
        color = "red" if d.is_error else "yellow"
        where = f" [dim]({d.attribute})[/dim]" if d.attribute else ""
        console.print(f"[{color}]{d.severity.capitalize()}:[/{color}] {d.summary}{where}")


def _print_plan(plan: Plan) -> None:
    for address in plan.drifted:
        console.print(f"[yellow]Note:[/yellow] {address} changed outside of squadcast-provider")

    # reads already done at plan time are not changes
    changes = [
        c for c in plan.changes
        if c.action != Action.NOOP and not (c.action == Action.READ and not c.reason)
    ]
    if not changes:
        console.print("[green]No changes.[/green] Your infrastructure matches the configuration.")
        return

    table = Table(title="Planned changes")
    table.add_column("Action")
    table.add_column("Address", style="cyan")
    table.add_column("Attributes")
    for c in changes:
        style = ACTION_STYLES[c.action]
        details = "\n".join(str(a) for a in c.attributes)
        if c.reason:
            details = f"[dim]{c.reason}[/dim]" + (f"\n{details}" if details else "")
        table.add_row(f"[{style}]{c.action.value}[/{style}]", c.address, details)
    console.print(table)

    counts = plan.summary()
    console.print(
        f"\nPlan: {counts['add']} to add, {counts['change']} to change, {counts['destroy']} to destroy."
    )


@main.command("validate")
@click.pass_context
def validate_cmd(ctx: click.Context) -> None:
    """Validate the configuration against resource schemas."""
    config = _load_config(ctx)
    diags = Planner(ctx.obj["provider"]).validate(config)
    if diags:
        _print_diagnostics(diags)
    if any(d.is_error for d in diags):
        raise SystemExit(1)
    console.print("[green]✓ The configuration is valid.[/green]")


@main.command("plan")
@click.option("--no-refresh", is_flag=True, help="Skip reading remote state")
@click.pass_context
def plan_cmd(ctx: click.Context, no_refresh: bool) -> None:
    """Show the changes apply would make."""
    config = _load_config(ctx)
    state = _load_state(ctx)
    planner = Planner(ctx.obj["provider"], _client(ctx, config))
    plan = planner.plan(config, state, refresh=not no_refresh)
    _print_diagnostics(plan.diagnostics)
    if plan.has_errors:
        raise SystemExit(1)
    _print_plan(plan)


@main.command("apply")
@click.option("--auto-approve", is_flag=True, help="Skip interactive approval")
@click.pass_context
def apply_cmd(ctx: click.Context, auto_approve: bool) -> None:
    """Create, update and delete resources to match the configuration."""
    config = _load_config(ctx)
    state = _load_state(ctx)
    provider: Provider = ctx.obj["provider"]
    client = _client(ctx, config)

    plan = Planner(provider, client).plan(config, state)
    _print_diagnostics(plan.diagnostics)
    if plan.has_errors:
        raise SystemExit(1)
    _print_plan(plan)

    if not plan.has_changes:
        # data sources and refreshed attributes still land in state
        plan.state.save(ctx.obj["state_path"])
        return
    if not auto_approve and not click.confirm("Do you want to perform these actions?"):
        console.print("[yellow]Apply cancelled.[/yellow]")
        return

    result = Applier(provider, client, ctx.obj["state_path"]).apply(plan)
    _print_diagnostics(result.diagnostics)
    counts = plan.summary()
    if result.has_errors:
        console.print(f"[red]Apply failed for {len(result.failed)} resource(s).[/red]")
        raise SystemExit(1)
    console.print(
        f"[green]Apply complete![/green] Resources: {counts['add']} added, "
        f"{counts['change']} changed, {counts['destroy']} destroyed."
    )


@main.command("refresh")
@click.pass_context
def refresh_cmd(ctx: click.Context) -> None:
    """Update state from the remote platform."""
    state = _load_state(ctx)
    config = _load_config(ctx) if ctx.obj["config_path"].exists() else None
    refreshed, drifted, diags = Planner(ctx.obj["provider"], _client(ctx, config)).refresh(state)
    _print_diagnostics(diags)
    for address in drifted:
        marker = "deleted" if refreshed.get(address) is None else "changed"
        console.print(f"[yellow]{address}[/yellow] {marker} outside of squadcast-provider")
    refreshed.save(ctx.obj["state_path"])
    console.print(f"[green]Refreshed {len(refreshed.resources)} resource(s).[/green]")
    if any(d.is_error for d in diags):
        raise SystemExit(1)


@main.command("import")
@click.argument("address")
@click.argument("import_id")
@click.pass_context
def import_cmd(ctx: click.Context, address: str, import_id: str) -> None:
    """Import an existing object into state, e.g. squadcast_webform.status teamID:ID."""
    state = _load_state(ctx)
    config = _load_config(ctx) if ctx.obj["config_path"].exists() else None
    client = _client(ctx, config)
    try:
        entry = import_resource(ctx.obj["provider"], client, state, address, import_id)
    except SquadcastError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    state.save(ctx.obj["state_path"])
    console.print(f"[green]✓ Imported {entry.address} (id {entry.id})[/green]")


@main.command("destroy")
@click.option("--auto-approve", is_flag=True, help="Skip interactive approval")
@click.pass_context
def destroy_cmd(ctx: click.Context, auto_approve: bool) -> None:
    """Delete every managed resource."""
    state = _load_state(ctx)
    if not state.resources:
        console.print("[green]Nothing to destroy.[/green]")
        return
    config = _load_config(ctx) if ctx.obj["config_path"].exists() else None

    for address in reversed(state.addresses()):
        console.print(f"  [red]-[/red] {address}")
    if not auto_approve and not click.confirm("Do you really want to destroy all resources?"):
        console.print("[yellow]Destroy cancelled.[/yellow]")
        return

    result = destroy(ctx.obj["provider"], _client(ctx, config), config, state, ctx.obj["state_path"])
    _print_diagnostics(result.diagnostics)
    if result.has_errors:
        raise SystemExit(1)
    console.print(f"[green]Destroy complete![/green] {len(result.applied)} destroyed.")


@main.group("state")
def state_group() -> None:
    """Inspect the state file."""


@state_group.command("list")
@click.pass_context
def state_list(ctx: click.Context) -> None:
    """List addresses in state."""
    for address in _load_state(ctx).addresses():
        console.print(address)


@state_group.command("show")
@click.argument("address")
@click.pass_context
def state_show(ctx: click.Context, address: str) -> None:
    """Show the attributes of one resource in state."""
    entry = _load_state(ctx).get(address)
    if entry is None:
        console.print(f"[red]No resource {address} in state[/red]")
        raise SystemExit(1)
    console.print(yaml.safe_dump(entry.model_dump(), default_flow_style=False, sort_keys=False))


@main.command("resources")
@click.pass_context
def resources_cmd(ctx: click.Context) -> None:
    """List supported resource and data source types."""
    provider: Provider = ctx.obj["provider"]
    table = Table(title="Supported types")
    table.add_column("Type", style="cyan")
    table.add_column("Kind")
    table.add_column("Import", justify="center")
    for type_name, resource in sorted(provider.resources.items()):
        table.add_row(type_name, "resource", "✓" if resource.importer else "")
    for type_name in sorted(provider.data_sources):
        table.add_row(type_name, "data source", "")
    console.print(table)


@main.command("docs")
@click.option("-o", "--output", "output_dir", default="./docs", help="Output directory")
@click.pass_context
def docs_cmd(ctx: click.Context, output_dir: str) -> None:
    """Render markdown documentation for every resource and data source."""
    paths = generate_docs(ctx.obj["provider"], Path(output_dir))
    console.print(f"[green]✓ Wrote {len(paths)} documents to {output_dir}[/green]")


if __name__ == "__main__":
    main()
