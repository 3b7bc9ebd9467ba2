"""CLI commands for configuration management."""

from __future__ import annotations

from typing import Annotated

import typer

from web_similarity.config import SimilarityConfig

config_app = typer.Typer(help="Configuration management")


@config_app.command("show")
def show_cmd() -> None:
    """Show the active configuration and where it is stored.

    Examples:
        wsim config show
    """
    config = SimilarityConfig.load()
    typer.secho(f"# {config.config_path}", fg=typer.colors.BRIGHT_BLACK)
    for section, values in config.to_dict().items():
        typer.secho(f"[{section}]", fg=typer.colors.CYAN, bold=True)
        for key, value in values.items():
            typer.echo(f"  {key} = {value}")


@config_app.command("set")
def set_cmd(
    key: Annotated[
        str,
        typer.Argument(help="Setting as section.key, e.g. clustering.k"),
    ],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change one setting and save config.toml.

    Examples:
        wsim config set clustering.k 5
        wsim config set graph.min_edge_weight 0.2
        wsim config set fetch.timeout_seconds 30
    """
    config = SimilarityConfig.load()
    current = config.to_dict()

    try:
        updated = config.with_setting(key, value)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    updated.save()
    section, _, name = key.partition(".")
    typer.secho(
        f"[{section}] {name}: {current[section].get(name)} -> {updated.to_dict()[section][name]}",
        fg=typer.colors.GREEN,
    )
