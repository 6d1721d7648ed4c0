import logging
from pathlib import Path

import click

from tfdriver.cli.commands.machine import create_cmd, remove_cmd
from tfdriver.cli.commands.operations import (
    apply_cmd,
    destroy_cmd,
    get_cmd,
    output_cmd,
    refresh_cmd,
    validate_cmd,
)
from tfdriver.cli.ensure import Ensure
from tfdriver.cli.output import machine_output, user_output
from tfdriver.core.config import FilesystemConfigStore
from tfdriver.core.context import DriverContext, create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_LOG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tfdriver")
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path, file_okay=False, exists=True),
    help="Directory containing the Terraform configuration (default: current directory).",
)
@click.option(
    "--terraform",
    "terraform_path",
    type=click.Path(path_type=Path, dir_okay=False),
    envvar="TFDRIVER_TERRAFORM",
    help="Path to the Terraform executable (default: search PATH).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Driver config file (default: ~/.tfdriver/config.toml).",
)
@click.option("--debug", is_flag=True, envvar="TFDRIVER_DEBUG", help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_dir: Path | None,
    terraform_path: Path | None,
    config_path: Path | None,
    debug: bool,
) -> None:
    """Drive Terraform to provision machines."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format=DEBUG_LOG_FORMAT)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is not None:
        return

    with Ensure.terraform_succeeds():
        try:
            ctx.obj = create_context(
                config_dir=config_dir,
                terraform_path=terraform_path,
                config_store=FilesystemConfigStore(config_path),
                debug=debug,
            )
        except ValueError as e:
            Ensure.invariant(False, str(e))


@click.command("which")
@click.pass_obj
def which_cmd(ctx: DriverContext) -> None:
    """Show the resolved Terraform executable and configuration directory."""
    Ensure.invariant(
        ctx.executable_path is not None, "Terraform executable has not been resolved"
    )
    machine_output(str(ctx.executable_path))
    user_output(f"Configuration directory: {ctx.config_dir}")


cli.add_command(apply_cmd)
cli.add_command(create_cmd)
cli.add_command(destroy_cmd)
cli.add_command(get_cmd)
cli.add_command(output_cmd)
cli.add_command(refresh_cmd)
cli.add_command(remove_cmd)
cli.add_command(validate_cmd)
cli.add_command(which_cmd)


def main() -> None:
    """CLI entry point used by the `tfdriver` console script."""
    cli()
