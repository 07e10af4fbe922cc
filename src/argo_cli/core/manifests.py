"""Loading workflow manifests from files and applying submit options."""

import copy
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from argo_cli.core.exceptions import ManifestError

logger = logging.getLogger(__name__)


def parse_manifests(text: str, source: str) -> list[dict[str, Any]]:
    """Parse one or more YAML (or JSON) documents.

    Empty documents are skipped; anything that is not a mapping is an error.
    """
    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise ManifestError(f"{source}: invalid YAML: {e}") from e

    manifests = []
    for index, doc in enumerate(documents):
        if doc is None:
            continue
        if not isinstance(doc, dict):
            raise ManifestError(f"{source}: document {index + 1} is not an object")
        manifests.append(doc)
    return manifests


def read_manifests(paths: tuple[str, ...], kind: Optional[str] = None) -> list[dict[str, Any]]:
    """Read manifests from files; ``-`` reads standard input.

    Args:
        paths: File paths to read
        kind: If given, every manifest must declare this ``kind``

    Raises:
        ManifestError: If a file is unreadable, malformed, or of the wrong kind
    """
    manifests: list[dict[str, Any]] = []
    for path in paths:
        if path == "-":
            text, source = sys.stdin.read(), "<stdin>"
        else:
            try:
                text, source = Path(path).read_text(encoding="utf-8"), path
            except OSError as e:
                raise ManifestError(f"cannot read {path}: {e}") from e
        docs = parse_manifests(text, source)
        logger.debug(f"Read {len(docs)} manifest(s) from {source}", extra={"source": source, "count": len(docs)})
        manifests.extend(docs)

    if kind:
        for manifest in manifests:
            actual = manifest.get("kind")
            if actual != kind:
                raise ManifestError(f"expected kind {kind!r}, got {actual!r}")
    if not manifests:
        raise ManifestError("no manifests found")
    return manifests


def parse_parameters(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ``name=value`` parameter flags."""
    parameters: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ManifestError(f"invalid parameter {item!r}: expected name=value")
        parameters[name.strip()] = value
    return parameters


def parse_labels(raw: Optional[str]) -> dict[str, str]:
    """Parse a comma separated ``key=value`` label list."""
    labels: dict[str, str] = {}
    for item in (raw or "").split(","):
        if not item.strip():
            continue
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ManifestError(f"invalid label {item!r}: expected key=value")
        labels[key.strip()] = value.strip()
    return labels


def apply_submit_options(
    workflow: dict[str, Any],
    parameters: Optional[dict[str, str]] = None,
    entrypoint: Optional[str] = None,
    generate_name: Optional[str] = None,
    labels: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    """Return a copy of the workflow with submit options applied.

    Parameters replace existing argument values with the same name and are
    appended otherwise.
    """
    wf = copy.deepcopy(workflow)
    metadata = wf.setdefault("metadata", {})
    spec = wf.setdefault("spec", {})

    if generate_name:
        metadata.pop("name", None)
        metadata["generateName"] = generate_name
    if labels:
        metadata.setdefault("labels", {}).update(labels)
    if entrypoint:
        spec["entrypoint"] = entrypoint

    if parameters:
        existing = spec.setdefault("arguments", {}).setdefault("parameters", [])
        by_name = {p.get("name"): p for p in existing if isinstance(p, dict)}
        for name, value in parameters.items():
            if name in by_name:
                by_name[name]["value"] = value
            else:
                existing.append({"name": name, "value": value})
    return wf


def submit_options(
    parameters: Optional[dict[str, str]] = None,
    entrypoint: Optional[str] = None,
    generate_name: Optional[str] = None,
    labels: Optional[dict[str, str]] = None,
    server_dry_run: bool = False,
) -> dict[str, Any]:
    """Build the ``submitOptions`` body used when submitting from a template."""
    options: dict[str, Any] = {}
    if parameters:
        options["parameters"] = [f"{name}={value}" for name, value in parameters.items()]
    if entrypoint:
        options["entryPoint"] = entrypoint
    if generate_name:
        options["generateName"] = generate_name
    if labels:
        options["labels"] = ",".join(f"{k}={v}" for k, v in labels.items())
    if server_dry_run:
        options["serverDryRun"] = True
    return options
