"""
Cache Broker CLI
Command-line interface for operating the cache cluster broker.
"""

import json
import sys
from typing import NoReturn

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cachebroker.backends import CacheClusterBackendError
from cachebroker.broker import (
    BindDetails,
    BrokerError,
    CacheClusterBroker,
    DeprovisionDetails,
    OperationState,
    ProvisionDetails,
    UpdateDetails,
)
from cachebroker.broker.identifiers import derive_cluster_id
from cachebroker.catalog import CatalogError
from cachebroker.config import Settings
from cachebroker.main import configure_logging, create_broker

console = Console()

OPERATION_ERRORS = (BrokerError, CacheClusterBackendError, CatalogError)

STATE_COLORS = {
    OperationState.SUCCEEDED: "green",
    OperationState.IN_PROGRESS: "yellow",
    OperationState.FAILED: "red",
}


def get_broker(ctx: click.Context) -> CacheClusterBroker:
    """Create the broker for the current invocation."""
    if ctx.obj.get("broker") is None:
        ctx.obj["broker"] = create_broker(ctx.obj["settings"])
    return ctx.obj["broker"]


def parse_parameters(raw: str | None) -> dict:
    """Parse a JSON object given on the command line."""
    if not raw:
        return {}
    try:
        parameters = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--parameters")
    if not isinstance(parameters, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--parameters")
    return parameters


def fail(error: Exception) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"❌ [red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


@click.group()
@click.option("--log-level", "-l", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx, log_level: str | None):
    """Cache Broker CLI - manage ElastiCache clusters through the broker lifecycle."""
    ctx.ensure_object(dict)
    load_dotenv()
    overrides = {"log_level": log_level} if log_level else {}
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        fail(e)
    configure_logging(settings.log_level)
    ctx.obj["settings"] = settings
    ctx.obj.setdefault("broker", None)


@cli.command("check-config")
@click.pass_context
def check_config(ctx):
    """Validate settings and the service catalog."""
    settings: Settings = ctx.obj["settings"]
    try:
        broker = get_broker(ctx)
    except OPERATION_ERRORS as e:
        fail(e)

    console.print("✅ [green]Configuration is valid[/green]")
    console.print(f"   Region: {settings.aws_region}")
    console.print(f"   Backend: {broker.backend.name}")
    console.print(f"   Cache prefix: {settings.cache_prefix}")
    console.print(f"   Services: {len(broker.services())}")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def catalog(ctx, as_json: bool):
    """List the services and plans offered by the broker."""
    try:
        services = get_broker(ctx).services()
    except OPERATION_ERRORS as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(
            {"services": [s.model_dump(mode="json") for s in services]},
            indent=2,
        ))
        return

    table = Table(title="Service Catalog")
    table.add_column("Service", style="cyan")
    table.add_column("Plan", style="green")
    table.add_column("Plan ID", style="dim")
    table.add_column("Engine")
    table.add_column("Node Type")
    table.add_column("Nodes", justify="right")

    for service in services:
        for plan in service.plans:
            properties = plan.elasticache_properties
            engine = properties.engine
            if properties.engine_version:
                engine = f"{engine} {properties.engine_version}"
            table.add_row(
                service.name,
                plan.name,
                plan.id,
                engine,
                properties.cache_node_type or "-",
                str(properties.num_cache_nodes or "-"),
            )

    console.print(table)


@cli.command("cluster-id")
@click.argument("instance_id")
@click.pass_context
def cluster_id(ctx, instance_id: str):
    """Show the backend cluster id derived from an instance id."""
    click.echo(derive_cluster_id(ctx.obj["settings"].cache_prefix, instance_id))


@cli.command()
@click.argument("instance_id")
@click.option("--service-id", "-s", required=True, help="Catalog service id")
@click.option("--plan-id", "-p", required=True, help="Catalog plan id")
@click.option("--organization-id", "-o", default="", help="Platform organization id")
@click.option("--space-id", default="", help="Platform space id")
@click.option("--parameters", "raw_parameters", default=None, help="User parameters as a JSON object")
@click.pass_context
def provision(ctx, instance_id: str, service_id: str, plan_id: str,
              organization_id: str, space_id: str, raw_parameters: str | None):
    """Create the cache cluster of a new instance."""
    details = ProvisionDetails(
        service_id=service_id,
        plan_id=plan_id,
        organization_guid=organization_id,
        space_guid=space_id,
        parameters=parse_parameters(raw_parameters),
    )
    try:
        broker = get_broker(ctx)
        broker.provision(instance_id, details, accepts_incomplete=True)
    except OPERATION_ERRORS as e:
        fail(e)

    console.print(
        f"✅ [green]Provisioning accepted[/green] for cluster "
        f"[cyan]{broker.cluster_id(instance_id)}[/cyan]"
    )


@cli.command()
@click.argument("instance_id")
@click.option("--service-id", "-s", required=True, help="Catalog service id")
@click.option("--plan-id", "-p", required=True, help="Catalog plan id")
@click.option("--parameters", "raw_parameters", default=None, help="User parameters as a JSON object")
@click.pass_context
def update(ctx, instance_id: str, service_id: str, plan_id: str, raw_parameters: str | None):
    """Modify the cache cluster of an instance to match a plan."""
    details = UpdateDetails(
        service_id=service_id,
        plan_id=plan_id,
        parameters=parse_parameters(raw_parameters),
    )
    try:
        broker = get_broker(ctx)
        broker.update(instance_id, details, accepts_incomplete=True)
    except OPERATION_ERRORS as e:
        fail(e)

    console.print(
        f"✅ [green]Update accepted[/green] for cluster "
        f"[cyan]{broker.cluster_id(instance_id)}[/cyan]"
    )


@cli.command()
@click.argument("instance_id")
@click.pass_context
def deprovision(ctx, instance_id: str):
    """Delete the cache cluster of an instance."""
    try:
        broker = get_broker(ctx)
        broker.deprovision(instance_id, DeprovisionDetails(), accepts_incomplete=True)
    except OPERATION_ERRORS as e:
        fail(e)

    console.print(
        f"✅ [green]Deprovisioning accepted[/green] for cluster "
        f"[cyan]{broker.cluster_id(instance_id)}[/cyan]"
    )


@cli.command()
@click.argument("instance_id")
@click.argument("binding_id")
@click.option("--service-id", "-s", required=True, help="Catalog service id")
@click.pass_context
def bind(ctx, instance_id: str, binding_id: str, service_id: str):
    """Print the credentials a binding would receive."""
    try:
        binding = get_broker(ctx).bind(instance_id, binding_id, BindDetails(service_id=service_id))
    except OPERATION_ERRORS as e:
        fail(e)

    click.echo(json.dumps({"credentials": binding.credentials.to_dict()}, indent=2))


@cli.command("last-operation")
@click.argument("instance_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def last_operation(ctx, instance_id: str, as_json: bool):
    """Show the state of the last operation on an instance."""
    try:
        operation = get_broker(ctx).last_operation(instance_id)
    except OPERATION_ERRORS as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(
            {"state": operation.state.value, "description": operation.description},
            indent=2,
        ))
        return

    color = STATE_COLORS[operation.state]
    console.print(f"[{color}]{operation.state.value}[/{color}] {operation.description}")


def main():
    """CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
