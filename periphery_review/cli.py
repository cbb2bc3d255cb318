"""CLI entry point: command definitions using Click.

Commands:
    init      Generate a template config file
    scan      Run Periphery and emit one annotation per unused declaration
    install   Download a Periphery release binary
    version   Print the version of the Periphery executable
"""

import functools
import logging
import re
import sys
from pathlib import Path

import click

from periphery_review import __version__

DEFAULT_CONFIG = "periphery.yaml"


# ---------------------------------------------------------------------------
# Helpers shared by all commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load the config file; fall back to defaults when none is present."""
    from periphery_review.config import Config, load

    config_path: str | None = ctx.obj["config_path"]
    if config_path is None:
        if not Path(DEFAULT_CONFIG).exists():
            return Config()
        config_path = DEFAULT_CONFIG

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Loading configuration from {config_path}", err=True)
    return load(config_path)


def _make_host(kind: str):
    from periphery_review.hosts import ConsoleHost, GitHubActionsHost

    if kind == "github":
        return GitHubActionsHost()
    return ConsoleHost()


def _handle_errors(func):
    """Decorator that catches periphery-review exceptions and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from periphery_review.errors import (
            ConfigError,
            ExecutableNotFound,
            InstallError,
            InvalidPostprocessorResult,
            ParseError,
            PeripheryError,
            ToolExecutionError,
            UnsupportedFormatError,
        )

        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        except UnsupportedFormatError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        except ExecutableNotFound as exc:
            click.echo(f"Executable not found: {exc}", err=True)
            sys.exit(1)
        except ToolExecutionError as exc:
            click.echo(f"Periphery error: {exc}", err=True)
            sys.exit(1)
        except ParseError as exc:
            click.echo(f"Unreadable Periphery output: {exc}", err=True)
            sys.exit(1)
        except InvalidPostprocessorResult as exc:
            click.echo(f"Postprocessor error: {exc}", err=True)
            sys.exit(1)
        except InstallError as exc:
            click.echo(f"Install error: {exc}", err=True)
            sys.exit(1)
        except FileExistsError as exc:
            click.echo(f"Error: {exc} (use --force to overwrite)", err=True)
            sys.exit(1)
        except PeripheryError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help=f"Path to the configuration file. [default: {DEFAULT_CONFIG} if present]")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="periphery-review")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Periphery review tool: report unused Swift code as review annotations."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s",
                            stream=sys.stderr)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default=DEFAULT_CONFIG, show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template periphery.yaml file."""
    from periphery_review.config import generate_template
    from periphery_review.errors import ConfigError
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your project, schemes and targets.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------

@cli.command("scan")
@click.option("--format", "output_format", type=click.Choice(["checkstyle", "json"]), default=None,
              help="Periphery output format. [default: from config, else checkstyle]")
@click.option("--annotations", type=click.Choice(["github", "console"]), default="console",
              show_default=True, help="How to emit warnings.")
@click.option("--exclude", "excludes", multiple=True, metavar="REGEX",
              help="Suppress issues whose path matches REGEX. Can be repeated.")
@click.option("--binary", "binary_path", default=None,
              help="Path to the Periphery executable (overrides config).")
@click.pass_context
@_handle_errors
def scan_command(ctx: click.Context, output_format: str | None, annotations: str,
                 excludes: tuple[str, ...], binary_path: str | None) -> None:
    """Scan the project configured in periphery.yaml."""
    from periphery_review.plugin import PeripheryPlugin

    config = _load_config(ctx)
    plugin = PeripheryPlugin(
        _make_host(annotations),
        binary_path=binary_path or config.binary_path,
        output_format=output_format or config.format,
        timeout=config.timeout,
    )

    callback = None
    if excludes:
        patterns = [re.compile(p) for p in excludes]

        def callback(issue):
            return not any(p.search(issue.path) for p in patterns)

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Scanning with format '{plugin.format}'", err=True)

    issues = plugin.scan(config.options, callback=callback)
    click.echo(f"{len(issues)} unused declaration(s) reported.", err=True)


# ---------------------------------------------------------------------------
# install
# ---------------------------------------------------------------------------

@cli.command("install")
@click.option("--version", "version", default="latest", show_default=True,
              help="Periphery release to install.")
@click.option("--path", "path", default="periphery", show_default=True,
              help="Destination of the executable, including its file name.")
@click.option("--force", is_flag=True, default=False,
              help="Overwrite an existing file.")
@click.pass_context
@_handle_errors
def install_command(ctx: click.Context, version: str, path: str, force: bool) -> None:
    """Download a Periphery release binary."""
    from periphery_review.installer import Installer

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Installing Periphery {version} to {path}", err=True)

    target = Installer(version).install(path, force=force)
    click.echo(f"Periphery installed to '{target.resolve()}'.")


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------

@cli.command("version")
@click.pass_context
@_handle_errors
def version_command(ctx: click.Context) -> None:
    """Print the version of the Periphery executable."""
    from periphery_review.runner import Runner

    config = _load_config(ctx)
    click.echo(Runner(config.binary_path, timeout=config.timeout).version())


if __name__ == "__main__":  # pragma: no cover
    cli()
