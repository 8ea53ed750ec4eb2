"""
Main CLI module for CDS.
"""

import json
import sys
from typing import Dict, List, Optional

import click

from cds import __version__
from cds.config import Settings
from cds.cli.config_cmd import config
from cds.cli.validate_cmd import validate
from cds.application.services.dependency_graph_service import DependencyGraphService
from cds.application.services.deployment_sequencer import DeploymentSequencer
from cds.application.services.exceptions import (
    ArtifactFormatError,
    ArtifactNotFoundError,
    DeploymentError,
)
from cds.infrastructure.backends.backend_factory import BackendFactory
from cds.infrastructure.logging_config import configure_logging
from cds.infrastructure.records.deployment_record import JsonDeploymentRecord
from cds.infrastructure.registry.artifact_registry import FileArtifactRegistry
from cds.migrations.provenance import build_provenance_steps, deploy_provenance


@click.group()
def cli():
    """Contract Deployment Sequencer (CDS) command line interface."""
    pass


cli.add_command(validate, name="validate")
cli.add_command(config, name="config")


@cli.command()
def version():
    """Show CDS version information."""
    click.echo(f"CDS version {__version__}")


@cli.command()
@click.option("--backend", type=click.Choice(["rpc", "memory"]), default=None)
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint")
@click.option("--build-dir", type=click.Path(), default=None, help="Build artifact directory")
@click.option("--record-file", type=click.Path(), default=None, help="JSON deployment record")
@click.option("--resume", is_flag=True, help="Reuse deployments found in the record")
def deploy(
    backend: Optional[str],
    rpc_url: Optional[str],
    build_dir: Optional[str],
    record_file: Optional[str],
    resume: bool,
):
    """Deploy StateVerification, then ProductProvenance."""
    overrides = {
        "BACKEND": backend,
        "RPC_URL": rpc_url,
        "BUILD_DIR": build_dir,
        "RECORD_FILE": record_file,
    }
    settings = Settings().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE, settings.LIBRARY_LOG_LEVEL)

    if resume and not settings.RECORD_FILE:
        raise click.UsageError("--resume needs --record-file or RECORD_FILE")

    registry = FileArtifactRegistry(settings.BUILD_DIR)

    try:
        record = JsonDeploymentRecord(settings.RECORD_FILE) if settings.RECORD_FILE else None
        backend_impl = BackendFactory.get_backend(settings.BACKEND, settings)
        instances = deploy_provenance(backend_impl, registry, record=record, resume=resume)
    except (DeploymentError, ArtifactNotFoundError, ArtifactFormatError) as e:
        click.echo(f"\n❌ {e}")
        sys.exit(1)

    click.echo("\n✅ Deployment complete:")
    for instance in instances:
        suffix = " (reused)" if instance.reused else ""
        click.echo(f"- {instance.name}: {instance.address}{suffix}")


@cli.command()
@click.option("--build-dir", type=click.Path(), default=None, help="Build artifact directory")
@click.option("--format", type=click.Choice(["text", "json", "dot"]), default="text")
def plan(build_dir: Optional[str], format: str):
    """Show the deployment order without deploying anything."""
    registry = FileArtifactRegistry(build_dir or Settings().BUILD_DIR)
    try:
        steps = build_provenance_steps(registry)
        edges = DeploymentSequencer.plan(steps)
    except (DeploymentError, ArtifactNotFoundError, ArtifactFormatError) as e:
        click.echo(f"\n❌ {e}")
        sys.exit(1)

    order = DependencyGraphService.from_steps(steps).topological_sort()
    graph: Dict[str, List[str]] = {name: [] for name in order}
    for edge in edges:
        graph[edge.dependent].append(edge.dependency)

    if format == "text":
        for index, name in enumerate(order, start=1):
            click.echo(f"\n{index}. {name}:")
            if graph[name]:
                for dep in graph[name]:
                    click.echo(f"  ├─ needs address of {dep}")
            else:
                click.echo("  └─ (no dependencies)")

    elif format == "json":
        click.echo(json.dumps({"order": order, "dependencies": graph}, indent=2))

    elif format == "dot":
        click.echo("digraph G {")
        for name in order:
            click.echo(f'  "{name}";')
        for edge in edges:
            click.echo(f'  "{edge.dependent}" -> "{edge.dependency}";')
        click.echo("}")


@cli.command()
@click.option("--build-dir", type=click.Path(), default=None, help="Build artifact directory")
def list_artifacts(build_dir: Optional[str]):
    """List build artifacts available for deployment."""
    registry = FileArtifactRegistry(build_dir or Settings().BUILD_DIR)
    names = registry.list_names()
    if not names:
        click.echo(f"No artifacts found in {registry.build_dir}")
        return
    click.echo("\nAvailable artifacts:")
    for name in names:
        click.echo(f"- {name}")


if __name__ == "__main__":
    cli()
