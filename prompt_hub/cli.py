"""CLI for prompt-hub - push and pull prompts to and from the hub."""

import importlib
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
import yaml
from langchain_core.load import dumpd
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax

from .config import load_settings
from .exceptions import HubError, PromptLoadError
from .hub import pull, push
from .manifest import METADATA_COMMIT_KEY
from .template import PromptFile, write_manifest


console = Console()
error_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Send log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)],
        force=True,
    )


def fail(message: str) -> NoReturn:
    """Print an error on stderr and exit with status 1."""
    error_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def resolve_model_class(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[type]:
    """Import a ``module:Class`` reference given on the command line."""
    if value is None:
        return None

    module_name, sep, class_name = value.partition(":")
    if not sep or not module_name or not class_name:
        raise click.BadParameter("expected module:Class", ctx=ctx, param=param)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", ctx=ctx, param=param)

    model_class = getattr(module, class_name, None)
    if not isinstance(model_class, type):
        raise click.BadParameter(f"{module_name} has no class {class_name}", ctx=ctx, param=param)
    return model_class


@click.group()
@click.option("--api-url", default=None, help="Hub API URL (default: from environment)")
@click.option("--api-key", default=None, help="Hub API key (default: from environment)")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="YAML file with api_url and api_key",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    api_url: Optional[str],
    api_key: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """Prompt Hub - Push and pull versioned prompts."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        settings = load_settings(config_path)
    except HubError as e:
        fail(str(e))
    ctx.obj["settings"] = settings.merged(api_url=api_url, api_key=api_key)


@cli.command("push")
@click.argument("repo")
@click.argument("prompt_file", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option("--parent-commit-hash", default=None, help="Commit to push on top of")
@click.option("--public/--private", "is_public", default=None, help="Repo visibility")
@click.option("--description", "-d", default=None, help="Repo description")
@click.option("--readme", default=None, help="Repo readme")
@click.option("--tag", "-t", "tags", multiple=True, help="Repo tag (repeatable)")
@click.pass_context
def push_command(
    ctx: click.Context,
    repo: str,
    prompt_file: Path,
    parent_commit_hash: Optional[str],
    is_public: Optional[bool],
    description: Optional[str],
    readme: Optional[str],
    tags: tuple,
) -> None:
    """Push a local prompt file to REPO."""
    settings = ctx.obj["settings"]

    try:
        definition = PromptFile.load(prompt_file)
        prompt = definition.to_prompt()
    except HubError as e:
        fail(str(e))

    try:
        url = push(
            repo,
            prompt,
            api_url=settings.api_url,
            api_key=settings.api_key,
            parent_commit_hash=parent_commit_hash,
            is_public=is_public if is_public is not None else definition.public,
            description=description if description is not None else definition.description or None,
            readme=readme if readme is not None else definition.readme,
            tags=list(tags) or definition.tags or None,
        )
    except Exception as e:
        fail(f"Push to '{repo}' failed: {e}")

    console.print(f"[green]Pushed {definition.name} to:[/green] {url}")


@cli.command("pull")
@click.argument("repo")
@click.option("--include-model", is_flag=True, help="Also pull the model stored with the prompt")
@click.option(
    "--model-class",
    default=None,
    callback=resolve_model_class,
    help="Chat model class for the stored model, as module:Class (implies --include-model)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write the pulled manifest to this file (.yaml or .json)",
)
@click.pass_context
def pull_command(
    ctx: click.Context,
    repo: str,
    include_model: bool,
    model_class: Optional[type],
    output: Optional[Path],
) -> None:
    """Pull REPO (owner/repo[:commit]) and show it."""
    settings = ctx.obj["settings"]

    try:
        prompt = pull(
            repo,
            api_url=settings.api_url,
            api_key=settings.api_key,
            include_model=include_model or model_class is not None or None,
            model_class=model_class,
        )
    except PromptLoadError as e:
        fail(
            f"Pull of '{repo}' failed: {e}\n\n"
            "From the command line, pass the model class with "
            "--model-class module:Class, e.g. --model-class langchain_anthropic:ChatAnthropic"
        )
    except Exception as e:
        fail(f"Pull of '{repo}' failed: {e}")

    # Prompts pulled with a model load as a sequence led by the prompt
    metadata = getattr(getattr(prompt, "first", prompt), "metadata", None) or {}
    commit = metadata.get(METADATA_COMMIT_KEY, "unknown")
    manifest_yaml = yaml.safe_dump(dumpd(prompt), default_flow_style=False, sort_keys=False)

    console.print(Panel(f"[bold cyan]{repo}[/bold cyan]", subtitle=f"commit {commit}"))
    console.print(Syntax(manifest_yaml, "yaml", theme="monokai", line_numbers=True))

    if output is not None:
        path = write_manifest(prompt, output)
        console.print(f"[green]Wrote manifest to:[/green] {path}")


@cli.command()
@click.argument(
    "prompt_files", nargs=-1, required=True, type=click.Path(path_type=Path, dir_okay=False)
)
def validate(prompt_files: tuple) -> None:
    """Validate local prompt files."""
    failed = False

    for path in prompt_files:
        try:
            errors = PromptFile.load(path).validate()
        except HubError as e:
            errors = [str(e)]

        if not errors:
            console.print(f"[green]OK[/green] {path}")
            continue

        failed = True
        console.print(f"\n[yellow]{path}:[/yellow]")
        for error in errors:
            console.print(f"  [red]- {error}[/red]")

    if failed:
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
