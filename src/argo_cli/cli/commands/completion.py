"""Shell completion script output."""

import click
from click.shell_completion import get_completion_class

from argo_cli.cli.command import ArgoCommand

SHELLS = ["bash", "zsh", "fish"]


@click.command(name="completion", cls=ArgoCommand)
@click.argument("shell", type=click.Choice(SHELLS))
@click.pass_context
def completion(ctx: click.Context, shell: str) -> None:
    """Output shell completion code for the specified shell.

    \b
    Examples:
      source <(argo completion bash)
      argo completion zsh > "${fpath[1]}/_argo"
      argo completion fish > ~/.config/fish/completions/argo.fish
    """
    root = ctx.find_root()
    prog_name = root.info_name or "argo"
    complete_var = f"_{prog_name.replace('-', '_').upper()}_COMPLETE"
    completion_class = get_completion_class(shell)
    if completion_class is None:
        raise click.UsageError(f"Unsupported shell: {shell}")
    click.echo(completion_class(root.command, {}, prog_name, complete_var).source())
