"""Main CLI application module.

Commands:
- serve: run the broker HTTP API
- catalog: show offered services and plans
- status: show the state of an instance's release
- credentials: resolve the credentials of an instance
- nodes: show the cluster node topology
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from helmi.app.api.http.app_data import ApplicationDependencies
from helmi.app.core.release import ReleaseError
from helmi.app.main import create_app, load_dependencies
from helmi.app.runtime.config import CONFIG_PATH

from .console import console

app = typer.Typer(
    help="🛠️  Helmi - Open Service Broker for Helm charts",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the broker config.yaml"),
]


def _load(config_path: Path) -> ApplicationDependencies:
    try:
        return load_dependencies(config_path)
    except (OSError, ValueError) as e:
        console.error(f"Failed to load configuration: {e}")
        raise typer.Exit(1) from e


@app.command()
def serve(
    config: ConfigOption = CONFIG_PATH,
    host: Annotated[str | None, typer.Option(help="Bind address")] = None,
    port: Annotated[int | None, typer.Option(help="Listen port")] = None,
) -> None:
    """Run the broker HTTP API."""
    import uvicorn

    deps = _load(config)
    bind_host = host or deps.config.broker.host
    bind_port = port or deps.config.broker.port

    console.ok(f"Helmi is ready and available on port {bind_port}")
    uvicorn.run(create_app(deps), host=bind_host, port=bind_port, log_level="warning")


@app.command()
def catalog(config: ConfigOption = CONFIG_PATH) -> None:
    """Show the offered services and plans."""
    deps = _load(config)

    table = Table(title="Catalog")
    table.add_column("Service")
    table.add_column("Plan")
    table.add_column("Chart")
    table.add_column("Version")

    for service in deps.catalog.services:
        table.add_row(service.name, "", service.chart, service.chart_version)
        for plan in service.plans:
            table.add_row(
                "",
                plan.name,
                plan.chart or service.chart,
                plan.chart_version or service.chart_version or "latest",
            )

    console.print(table)


@app.command()
def status(
    instance_id: Annotated[str, typer.Argument(help="Service instance id")],
    config: ConfigOption = CONFIG_PATH,
) -> None:
    """Show the state of an instance's release."""
    deps = _load(config)
    orchestrator = deps.orchestrator

    try:
        release = orchestrator.deployment_status(instance_id)
    except ReleaseError as e:
        console.error(str(e))
        raise typer.Exit(1) from e

    table = Table(title=f"Release {release.name}")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("namespace", release.namespace)
    table.add_row("deployed", str(release.is_deployed))
    table.add_row("failed", str(release.is_failed))
    table.add_row("nodes", f"{release.available_nodes}/{release.desired_nodes}")
    table.add_row(
        "ports",
        ", ".join(
            f"{port}:{release.node_ports[port]}" if port in release.node_ports else str(port)
            for port in sorted(release.cluster_ports)
        ),
    )
    console.print(table)

    if release.is_failed:
        console.error("failed")
    elif release.available_nodes >= release.desired_nodes:
        console.ok("succeeded")
    else:
        console.info("in progress")


@app.command()
def credentials(
    service_id: Annotated[str, typer.Argument(help="Catalog service id")],
    plan_id: Annotated[str, typer.Argument(help="Catalog plan id")],
    instance_id: Annotated[str, typer.Argument(help="Service instance id")],
    config: ConfigOption = CONFIG_PATH,
) -> None:
    """Resolve and print the credentials of an instance."""
    deps = _load(config)

    try:
        resolved = deps.orchestrator.credentials(service_id, plan_id, instance_id)
    except ReleaseError as e:
        console.error(str(e))
        raise typer.Exit(1) from e

    console.print_json(resolved)


@app.command()
def nodes(config: ConfigOption = CONFIG_PATH) -> None:
    """Show the cluster node topology."""
    deps = _load(config)

    try:
        cluster_nodes = deps.orchestrator.topology.list_nodes()
    except ReleaseError as e:
        console.error(str(e))
        raise typer.Exit(1) from e

    table = Table(title="Nodes")
    for column in ("Name", "Hostname", "Internal IP", "External IP"):
        table.add_column(column)
    for node in cluster_nodes:
        table.add_row(node.name, node.hostname, node.internal_ip, node.external_ip)
    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
