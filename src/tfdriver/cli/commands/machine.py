"""Commands that run the full machine provisioning workflow."""

from pathlib import Path

import click

from tfdriver.cli.commands.operations import var_file_option, var_option
from tfdriver.cli.ensure import Ensure
from tfdriver.cli.output import stream_operation_with_feedback, user_output
from tfdriver.core import commands
from tfdriver.core.context import DriverContext
from tfdriver.core.workflow import Provisioner


@click.command("create")
@click.option("--name", "machine_name", required=True, help="Name of the machine to create.")
@var_option
@var_file_option
@click.option(
    "--refresh/--no-refresh",
    default=None,
    help="Refresh state after applying (default: refresh_after_apply from config).",
)
@click.option("--skip-validate", is_flag=True, help="Don't run 'terraform validate'.")
@click.pass_obj
def create_cmd(
    ctx: DriverContext,
    machine_name: str,
    inline_variables: tuple[str, ...],
    additional_variables_file: Path | None,
    refresh: bool | None,
    skip_validate: bool,
) -> None:
    """Provision a machine from the configuration."""
    variables_file = commands.variables_file_for(ctx.config_dir)
    should_refresh = refresh if refresh is not None else ctx.config.refresh_after_apply

    with Ensure.terraform_succeeds():
        user_output(f"Will create machine '{machine_name}' from '{ctx.config_dir}'")

        store = stream_operation_with_feedback(
            "prepare configuration",
            lambda handler: Provisioner(ctx.terraform, handler).prepare(
                cwd=ctx.cwd,
                context_values={"dm_machine_name": machine_name},
                inline_variables=inline_variables,
                additional_variables_file=additional_variables_file,
                config_variables=ctx.config.variables,
                validate=not skip_validate,
            ),
        )
        user_output(f"Wrote {len(store)} variables to {variables_file}")

        info = stream_operation_with_feedback(
            "create machine",
            lambda handler: Provisioner(ctx.terraform, handler).create(refresh=should_refresh),
        )

    user_output(click.style("✓ ", fg="green") + f"Machine '{machine_name}' created")
    user_output(f"  IP address: {info.ip_address}")
    if info.ssh_user is not None:
        user_output(f"  SSH user:   {info.ssh_user}")
    user_output(f"  URL:        {info.url}")


@click.command("remove")
@click.pass_obj
def remove_cmd(ctx: DriverContext) -> None:
    """Destroy a machine created from the configuration."""
    with Ensure.terraform_succeeds():
        stream_operation_with_feedback(
            "terraform destroy", lambda handler: Provisioner(ctx.terraform, handler).remove()
        )
    user_output(click.style("✓ ", fg="green") + "Machine removed")
