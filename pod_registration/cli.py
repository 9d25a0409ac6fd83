"""Console entrypoint: register a local service with the Pod, or run the acceptor."""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx
import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pod_registration.core.config import settings
from pod_registration.core.errors import CredentialNotSaved, DescriptionInvalid, RegistrationFailed
from pod_registration.core.logging import setup_logging
from pod_registration.models.schemas import FieldError, RegisteredService, ServiceDescription
from pod_registration.services.endpoint import coerce_local_endpoint
from pod_registration.services.pod_client import PodClient
from pod_registration.services.registrar import Registrar
from pod_registration.services.token_store import TokenFileStore
from pod_registration.services.tunnel import MockTunnel, StaticTunnel, TunnelProvider
from pod_registration.services.validator import RegistrationValidator

app = typer.Typer(name="pod-register", help="Register a locally-running service with the Pod")
console = Console()


def print_field_errors(errors: list[FieldError]) -> None:
    for e in errors:
        console.print(f"[red]{e.field}[/red]: {escape(e.message)}")


def render_record(record: RegisteredService) -> Table:
    """Table shown after a successful registration."""
    table = Table(title="Service Registered Successfully!", show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("Name", record.name)
    table.add_row("Type", record.type)
    table.add_row("Token", record.token)
    table.add_row("Local URL", record.local_url)
    table.add_row("Public URL", record.public_url)
    if record.domain:
        table.add_row("Custom Domain", record.domain)
    table.add_row("Registered At", record.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z"))
    return table


def _local_endpoint(port: Optional[int], local_url: Optional[str]) -> str:
    try:
        return coerce_local_endpoint(port if port is not None else local_url)
    except ValueError as e:
        print_field_errors([FieldError(field="localEndpoint", message=str(e))])
        raise typer.Exit(code=1)


def _tunnel(public_url: Optional[str], mock_tunnel: bool) -> TunnelProvider:
    if mock_tunnel:
        return MockTunnel()
    return StaticTunnel(public_url or "")


async def _register(description: ServiceDescription, pod_url: str, token_file: Optional[str]) -> RegisteredService:
    async with httpx.AsyncClient(timeout=settings.request_timeout_s) as client:
        store = TokenFileStore(token_file) if token_file else None
        registrar = Registrar(PodClient(client, pod_url), token_store=store)
        return await registrar.register(description)


@app.command("register")
def register(
    name: str = typer.Option(..., "--name", help="Service name (3+ characters)"),
    description: str = typer.Option(..., "--description", help="What the service does (10-200 characters)"),
    port: Optional[int] = typer.Option(None, "--port", help="Local port; becomes http://localhost:<port>"),
    local_url: Optional[str] = typer.Option(None, "--local-url", help="Full local URL, used when --port is absent"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Custom domain, e.g. myapp.panda"),
    service_type: Optional[str] = typer.Option(None, "--type", help="website | api | game | other"),
    custom_type: Optional[str] = typer.Option(None, "--custom-type", help="Type name when --type is other"),
    public_url: Optional[str] = typer.Option(None, "--public-url", help="Public tunnel URL (e.g. from ngrok)"),
    mock_tunnel: bool = typer.Option(False, "--mock-tunnel", help="Simulate a tunnel instead of --public-url"),
    pod_url: str = typer.Option(str(settings.pod_url), "--pod-url", help="Base URL of the Pod"),
    token_file: Optional[str] = typer.Option(settings.token_file, "--token-file", help="Where to keep the token"),
):
    """Validate the service description, then register it with the Pod."""
    setup_logging()
    local = _local_endpoint(port, local_url)
    tunnel_url = asyncio.run(_tunnel(public_url, mock_tunnel).open(local))
    desc = ServiceDescription(
        name=name,
        description=description,
        local_endpoint=local,
        domain=domain,
        service_type=service_type,
        custom_type=custom_type,
        public_url=tunnel_url,
    )
    try:
        record = asyncio.run(_register(desc, pod_url, token_file))
    except DescriptionInvalid as e:
        print_field_errors(e.errors)
        raise typer.Exit(code=1)
    except RegistrationFailed as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)
    except CredentialNotSaved as e:
        # registered already: show the token so it can be kept by hand
        console.print(render_record(e.record))
        console.print(f"[bold yellow]Warning:[/bold yellow] {escape(str(e))}")
        raise typer.Exit(code=3)
    console.print(render_record(record))


@app.command("check")
def check(
    name: str = typer.Option("", "--name"),
    description: str = typer.Option("", "--description"),
    port: Optional[int] = typer.Option(None, "--port"),
    local_url: Optional[str] = typer.Option(None, "--local-url"),
    domain: Optional[str] = typer.Option(None, "--domain"),
    service_type: Optional[str] = typer.Option(None, "--type"),
    custom_type: Optional[str] = typer.Option(None, "--custom-type"),
    public_url: Optional[str] = typer.Option(None, "--public-url"),
):
    """Only run the field rules and list every problem found."""
    desc = ServiceDescription(
        name=name,
        description=description,
        local_endpoint=_local_endpoint(port, local_url),
        domain=domain,
        service_type=service_type,
        custom_type=custom_type,
        public_url=public_url,
    )
    errors = RegistrationValidator().check(desc)
    if errors:
        print_field_errors(errors)
        raise typer.Exit(code=1)
    console.print("[green]Service description is valid.[/green]")


@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, "--host", help="Bind host"),
    port: int = typer.Option(settings.port, "--port", help="Bind port"),
):
    """Run the registration acceptor (POST /api/register)."""
    uvicorn.run("pod_registration.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
