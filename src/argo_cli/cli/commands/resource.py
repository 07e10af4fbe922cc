"""Shared list/get/create/delete commands for template-like resources.

Workflow templates, cluster workflow templates and cron workflows expose the
same operations; each command module builds its group through
``resource_group``.
"""

from collections.abc import Sequence
from typing import Any, Callable, Optional

import click

from argo_cli.apiclient.client import APIClient
from argo_cli.apiclient.resources import ResourceServiceClient
from argo_cli.cli.client import api_errors, namespace, open_client
from argo_cli.cli.command import ArgoGroup
from argo_cli.cli.output import name_of, print_object, print_objects, print_resource_table
from argo_cli.core.manifests import read_manifests

ServiceFactory = Callable[[APIClient], ResourceServiceClient]


def resource_group(
    name: str,
    help_text: str,
    kind: str,
    plural: str,
    service_factory: ServiceFactory,
    namespaced: bool = True,
    columns: Sequence[tuple[str, Callable[[dict[str, Any]], Any]]] = (),
) -> ArgoGroup:
    """Build a command group with create, get, list and delete for one resource kind."""

    def _namespace(ctx: click.Context) -> Optional[str]:
        return namespace(ctx) if namespaced else None

    group = ArgoGroup(name=name, help=help_text)

    @group.command(name="create")
    @click.argument("files", nargs=-1, required=True)
    @click.option("-o", "--output", type=click.Choice(["json", "yaml", "name"]), default="name", show_default=True)
    @click.pass_context
    def create(ctx: click.Context, files: tuple[str, ...], output: str) -> None:
        with api_errors():
            manifests = read_manifests(files, kind=kind)
        ns = _namespace(ctx)
        with open_client(ctx) as (request_ctx, api_client):
            service = service_factory(api_client)
            for manifest in manifests:
                obj_ns = manifest.get("metadata", {}).get("namespace") or ns
                print_object(service.create(request_ctx, manifest, namespace=obj_ns), output)

    @group.command(name="get")
    @click.argument("names", nargs=-1, required=True)
    @click.option("-o", "--output", type=click.Choice(["json", "yaml", "name"]), default="yaml", show_default=True)
    @click.pass_context
    def get(ctx: click.Context, names: tuple[str, ...], output: str) -> None:
        ns = _namespace(ctx)
        with open_client(ctx) as (request_ctx, api_client):
            service = service_factory(api_client)
            for item_name in names:
                print_object(service.get(request_ctx, item_name, namespace=ns), output)

    @group.command(name="list")
    @click.option("-o", "--output", type=click.Choice(["json", "yaml", "name"]), default=None, help="Output format")
    @click.pass_context
    def list_resources(ctx: click.Context, output: Optional[str]) -> None:
        ns = _namespace(ctx)
        with open_client(ctx) as (request_ctx, api_client):
            items = service_factory(api_client).list_all(request_ctx, namespace=ns)
        if output and print_objects(items, output):
            return
        print_resource_table(items, plural, columns)

    @group.command(name="delete")
    @click.argument("names", nargs=-1)
    @click.option("--all", "delete_all", is_flag=True, help=f"Delete all {plural}")
    @click.pass_context
    def delete(ctx: click.Context, names: tuple[str, ...], delete_all: bool) -> None:
        if not names and not delete_all:
            raise click.UsageError("Specify names or --all")
        ns = _namespace(ctx)
        with open_client(ctx) as (request_ctx, api_client):
            service = service_factory(api_client)
            targets = list(names)
            if delete_all:
                targets.extend(name_of(item) for item in service.list_all(request_ctx, namespace=ns))
            for item_name in targets:
                service.delete(request_ctx, item_name, namespace=ns)
                click.echo(f"{kind} '{item_name}' deleted")

    create.help = f"Create {plural} from files; - reads stdin."
    get.help = f"Display details about {plural}."
    list_resources.help = f"List {plural}."
    delete.help = f"Delete {plural}."
    return group
