"""Formatting of API objects for the terminal."""

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

import click
import yaml

OUTPUT_FORMATS = ["json", "yaml", "name", "wide"]


class Colors:
    """Terminal color constants using Click styling."""

    SUCCESS: ClassVar[dict] = {"fg": "green"}
    ERROR: ClassVar[dict] = {"fg": "red"}
    WARNING: ClassVar[dict] = {"fg": "yellow"}
    INFO: ClassVar[dict] = {"fg": "cyan"}


PHASE_COLORS = {
    "Succeeded": Colors.SUCCESS,
    "Failed": Colors.ERROR,
    "Error": Colors.ERROR,
    "Running": Colors.INFO,
    "Pending": Colors.WARNING,
}


def styled_text(text: str, **style_kwargs: Any) -> str:
    """Apply color styling if terminal supports it.

    Args:
        text: The text to style
        **style_kwargs: Click style parameters (fg, bg, bold, dim, etc.)

    Returns:
        Styled text if color is supported, plain text otherwise
    """
    ctx = click.get_current_context(silent=True)
    if ctx and ctx.color is False:
        return text
    return click.style(text, **style_kwargs)


def parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as returned by the API."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_duration(seconds: float) -> str:
    """Short human duration: 45s, 3m, 2h, 5d."""
    seconds = max(int(seconds), 0)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def age(obj: dict[str, Any], now: Optional[datetime] = None) -> str:
    created = parse_time(obj.get("metadata", {}).get("creationTimestamp"))
    if created is None:
        return ""
    now = now or datetime.now(timezone.utc)
    return format_duration((now - created).total_seconds())


def run_duration(status: dict[str, Any], now: Optional[datetime] = None) -> str:
    """Duration between startedAt and finishedAt, or until now if still running."""
    started = parse_time(status.get("startedAt"))
    if started is None:
        return ""
    finished = parse_time(status.get("finishedAt")) or now or datetime.now(timezone.utc)
    return format_duration((finished - started).total_seconds())


def workflow_phase(wf: dict[str, Any]) -> str:
    phase = wf.get("status", {}).get("phase") or "Pending"
    if phase == "Running" and wf.get("spec", {}).get("suspend"):
        return "Running (Suspended)"
    return phase


def styled_phase(phase: str) -> str:
    style = PHASE_COLORS.get(phase.split(" ")[0])
    return styled_text(phase, **style) if style else phase


def name_of(obj: dict[str, Any]) -> str:
    return obj.get("metadata", {}).get("name", "")


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Left-aligned columns separated by three spaces."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(click.unstyle(cell)))

    def line(cells: Sequence[str]) -> str:
        padded = [cell + " " * (widths[i] - len(click.unstyle(cell))) for i, cell in enumerate(cells)]
        return "   ".join(padded).rstrip()

    return "\n".join([line(headers), *(line(row) for row in rows)])


def print_object(obj: dict[str, Any], output: str) -> None:
    """Print a single object as json, yaml or its name."""
    if output == "json":
        click.echo(json.dumps(obj, indent=2))
    elif output == "yaml":
        click.echo(yaml.safe_dump(obj, sort_keys=False).rstrip("\n"))
    elif output == "name":
        click.echo(name_of(obj))
    else:
        raise click.UsageError(f"Unknown output format: {output}")


def print_objects(items: list[dict[str, Any]], output: str) -> bool:
    """Print a list in a machine format. Returns False for table output."""
    if output == "name":
        for item in items:
            click.echo(name_of(item))
    elif output == "json":
        click.echo(json.dumps(items, indent=2))
    elif output == "yaml":
        click.echo(yaml.safe_dump(items, sort_keys=False).rstrip("\n"))
    else:
        return False
    return True


def print_workflow_table(
    workflows: list[dict[str, Any]],
    wide: bool = False,
    all_namespaces: bool = False,
    now: Optional[datetime] = None,
) -> None:
    if not workflows:
        click.echo("No workflows found")
        return
    headers = ["NAME", "STATUS", "AGE", "DURATION", "PRIORITY"]
    if all_namespaces:
        headers.insert(0, "NAMESPACE")
    if wide:
        headers.append("MESSAGE")

    rows = []
    for wf in workflows:
        status = wf.get("status", {})
        row = [
            name_of(wf),
            styled_phase(workflow_phase(wf)),
            age(wf, now),
            run_duration(status, now),
            str(wf.get("spec", {}).get("priority", 0)),
        ]
        if all_namespaces:
            row.insert(0, wf.get("metadata", {}).get("namespace", ""))
        if wide:
            row.append(status.get("message", ""))
        rows.append(row)
    click.echo(render_table(headers, rows))


def print_workflow(wf: dict[str, Any], now: Optional[datetime] = None) -> None:
    """Print a workflow's summary, its arguments and its steps."""
    metadata = wf.get("metadata", {})
    status = wf.get("status", {})
    fields = [
        ("Name", metadata.get("name", "")),
        ("Namespace", metadata.get("namespace", "")),
        ("ServiceAccount", wf.get("spec", {}).get("serviceAccountName", "unset")),
        ("Status", styled_phase(workflow_phase(wf))),
        ("Message", status.get("message", "")),
        ("Created", metadata.get("creationTimestamp", "")),
        ("Started", status.get("startedAt", "")),
        ("Finished", status.get("finishedAt", "")),
        ("Duration", run_duration(status, now)),
    ]
    for label, value in fields:
        if value:
            click.echo(f"{label + ':':<16}{value}")

    parameters = wf.get("spec", {}).get("arguments", {}).get("parameters") or []
    if parameters:
        click.echo("Parameters:")
        for param in parameters:
            click.echo(f"  {param.get('name')}: {param.get('value', '')}")

    nodes = sorted((status.get("nodes") or {}).values(), key=lambda n: n.get("startedAt") or "")
    if nodes:
        click.echo("")
        rows = [
            [
                node.get("displayName", node.get("name", "")),
                node.get("templateName", ""),
                styled_phase(node.get("phase", "")),
                node.get("id", "") if node.get("type") == "Pod" else "",
                run_duration(node, now),
                node.get("message", ""),
            ]
            for node in nodes
        ]
        click.echo(render_table(["STEP", "TEMPLATE", "PHASE", "PODNAME", "DURATION", "MESSAGE"], rows))


def print_resource_table(
    items: list[dict[str, Any]], kind: str, columns: Sequence[tuple[str, Any]], now: Optional[datetime] = None
) -> None:
    """Table of NAME, AGE and any extra ``(header, getter)`` columns."""
    if not items:
        click.echo(f"No {kind} found")
        return
    headers = ["NAME", "AGE", *(header for header, _ in columns)]
    rows = [[name_of(item), age(item, now), *(str(getter(item)) for _, getter in columns)] for item in items]
    click.echo(render_table(headers, rows))
