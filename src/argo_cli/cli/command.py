"""Click command classes with persistent flags and a persistent pre-run hook.

A persistent flag is declared once on a group and accepted by that group and
every command below it, before or after the subcommand name. The nearest
``persistent_pre_run`` hook on the path runs once, right before the selected
leaf command's body, after every flag on the command line has been parsed.

Inherited flags are looked up through the context chain at parse time, so
child commands are never modified when they are added to a group.
"""

from collections.abc import Iterable
from typing import Any, Callable, Optional

import click

PreRunHook = Callable[[click.Context], None]


def inherited_params(ctx: click.Context) -> list[click.Parameter]:
    """Persistent parameters declared by the ancestors of ``ctx``'s command."""
    params: list[click.Parameter] = []
    seen: set[Optional[str]] = set()
    parent = ctx.parent
    while parent is not None:
        for param in getattr(parent.command, "persistent_params", ()):
            if param.name not in seen:
                seen.add(param.name)
                params.append(param)
        parent = parent.parent
    return params


def find_pre_run(ctx: click.Context) -> Optional[PreRunHook]:
    """The nearest ``persistent_pre_run`` hook from ``ctx`` up to the root."""
    node: Optional[click.Context] = ctx
    while node is not None:
        hook = getattr(node.command, "persistent_pre_run", None)
        if hook is not None:
            return hook
        node = node.parent
    return None


class PersistentFlagsMixin:
    """Adds persistent parameter declaration and inheritance to a click command."""

    def __init__(
        self,
        *args: Any,
        persistent_params: Optional[Iterable[click.Parameter]] = None,
        persistent_pre_run: Optional[PreRunHook] = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.persistent_params: list[click.Parameter] = list(persistent_params or [])
        self.persistent_pre_run = persistent_pre_run

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params = [*self.params, *self.persistent_params]  # type: ignore[attr-defined]
        names = {p.name for p in params}
        params.extend(p for p in inherited_params(ctx) if p.name not in names)
        help_option = self.get_help_option(ctx)  # type: ignore[attr-defined]
        if help_option is not None:
            params.append(help_option)
        return params

    def format_options(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """List own options, then inherited ones under "Global Options"."""
        own_params = [*self.params, *self.persistent_params]  # type: ignore[attr-defined]
        own_names = {p.name for p in own_params}
        global_params = [p for p in inherited_params(ctx) if p.name not in own_names]
        help_option = self.get_help_option(ctx)  # type: ignore[attr-defined]
        if help_option is not None:
            own_params.append(help_option)

        own = [r for r in (p.get_help_record(ctx) for p in own_params) if r is not None]
        inherited = [r for r in (p.get_help_record(ctx) for p in global_params) if r is not None]

        if own:
            with formatter.section("Options"):
                formatter.write_dl(own)
        if inherited:
            with formatter.section("Global Options"):
                formatter.write_dl(inherited)
        if isinstance(self, click.Group):
            self.format_commands(ctx, formatter)


class ArgoCommand(PersistentFlagsMixin, click.Command):
    """Leaf command: runs the persistent pre-run hook before its body."""

    def invoke(self, ctx: click.Context) -> Any:
        hook = find_pre_run(ctx)
        if hook is not None:
            hook(ctx)
        return super().invoke(ctx)


class ArgoGroup(PersistentFlagsMixin, click.Group):
    """Group whose subcommands inherit its persistent flags.

    Subcommands are listed in registration order and names must be unique.
    """

    command_class = ArgoCommand
    group_class = type

    def add_command(self, cmd: click.Command, name: Optional[str] = None) -> None:
        name = name or cmd.name
        if name in self.commands:
            raise ValueError(f"Command {name!r} is already registered on {self.name!r}")
        super().add_command(cmd, name)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
