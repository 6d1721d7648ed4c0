"""Commands wrapping the individual Terraform operations."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from tfdriver.cli.ensure import Ensure
from tfdriver.cli.output import machine_output, stream_operation_with_feedback, user_output
from tfdriver.core import commands
from tfdriver.core.context import DriverContext
from tfdriver.core.outputs import OutputRecord
from tfdriver.core.workflow import Provisioner

var_option = click.option(
    "--var",
    "inline_variables",
    multiple=True,
    metavar="NAME=VALUE",
    help="Additional variable for the configuration (repeatable).",
)
var_file_option = click.option(
    "--var-file",
    "additional_variables_file",
    type=click.Path(path_type=Path, dir_okay=False),
    help="JSON file containing additional variables for the configuration.",
)


def _existing_variables_file(ctx: DriverContext) -> Path | None:
    variables_file = commands.variables_file_for(ctx.config_dir)
    if variables_file.exists():
        return variables_file
    return None


@click.command("get")
@click.pass_obj
def get_cmd(ctx: DriverContext) -> None:
    """Fetch the configuration's modules."""
    with Ensure.terraform_succeeds():
        stream_operation_with_feedback(
            "terraform get", lambda handler: commands.get_modules(ctx.terraform, handler)
        )


@click.command("validate")
@click.pass_obj
def validate_cmd(ctx: DriverContext) -> None:
    """Validate the configuration."""
    with Ensure.terraform_succeeds():
        stream_operation_with_feedback(
            "terraform validate", lambda handler: commands.validate(ctx.terraform, handler)
        )


@click.command("apply")
@var_option
@var_file_option
@click.option(
    "--refresh/--no-refresh",
    default=None,
    help="Refresh state after applying (default: refresh_after_apply from config).",
)
@click.pass_obj
def apply_cmd(
    ctx: DriverContext,
    inline_variables: tuple[str, ...],
    additional_variables_file: Path | None,
    refresh: bool | None,
) -> None:
    """Apply the configuration.

    When --var or --var-file is given, the variables file is rewritten first.
    """
    with Ensure.terraform_succeeds():
        if inline_variables or additional_variables_file is not None:
            provisioner = Provisioner(ctx.terraform)
            store = provisioner.build_variables(
                cwd=ctx.cwd,
                inline_variables=inline_variables,
                additional_variables_file=additional_variables_file,
                config_variables=ctx.config.variables,
            )
            store.persist_to(provisioner.variables_file)
            user_output(f"Wrote {len(store)} variables to {provisioner.variables_file}")

        variables_file = _existing_variables_file(ctx)
        stream_operation_with_feedback(
            "terraform apply",
            lambda handler: commands.apply(ctx.terraform, variables_file, handler),
        )

        should_refresh = refresh if refresh is not None else ctx.config.refresh_after_apply
        if should_refresh:
            stream_operation_with_feedback(
                "terraform refresh",
                lambda handler: commands.refresh(ctx.terraform, variables_file, handler),
            )


@click.command("refresh")
@click.pass_obj
def refresh_cmd(ctx: DriverContext) -> None:
    """Refresh the configuration's state."""
    variables_file = _existing_variables_file(ctx)
    with Ensure.terraform_succeeds():
        stream_operation_with_feedback(
            "terraform refresh",
            lambda handler: commands.refresh(ctx.terraform, variables_file, handler),
        )


@click.command("destroy")
@click.pass_obj
def destroy_cmd(ctx: DriverContext) -> None:
    """Destroy the configuration's resources."""
    variables_file = _existing_variables_file(ctx)
    with Ensure.terraform_succeeds():
        stream_operation_with_feedback(
            "terraform destroy",
            lambda handler: commands.destroy(ctx.terraform, variables_file, handler),
        )


def _display_value(record: OutputRecord) -> str:
    if record.sensitive:
        return "<sensitive>"
    if isinstance(record.value, str):
        return record.value
    return json.dumps(record.value)


@click.command("output")
@click.option("--json", "as_json", is_flag=True, help="Print outputs as JSON.")
@click.pass_obj
def output_cmd(ctx: DriverContext, as_json: bool) -> None:
    """Show the configuration's outputs."""
    with Ensure.terraform_succeeds():
        outputs = commands.output_query(ctx.terraform)

    if as_json:
        data = {
            name: {"type": record.data_type, "value": record.value, "sensitive": record.sensitive}
            for name, record in outputs.items()
        }
        machine_output(json.dumps(data, indent=2))
        return

    if not outputs:
        user_output("No outputs found")
        return

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("name", style="cyan", no_wrap=True)
    table.add_column("type", no_wrap=True)
    table.add_column("value")
    for name in sorted(outputs):
        record = outputs[name]
        table.add_row(name, record.data_type, _display_value(record))

    Console(stderr=True).print(table)
