"""
Command-line status report for capability configuration.

Resolves the AWS_* settings from the environment (and .env) and reports
which capabilities would start, without contacting any AWS service.

Dependencies: typer
System role: Operator tooling for configuration checks
"""

import json

import typer

from cms_cloud.configs.settings import ResolvedCapabilities, get_settings, resolve_capabilities
from cms_cloud.application.orchestrator import describe_config
from cms_cloud.core.capability import Capability
from cms_cloud.core.exceptions import ConfigInvalidError
from cms_cloud.observability.logger import configure_logging

SUCCESS_EXIT_CODE = 0
CONFIG_ERROR_EXIT_CODE = 2

app = typer.Typer(no_args_is_help=True, help="Cloud capability configuration tools")


def _capability_report(resolved: ResolvedCapabilities) -> dict[str, dict[str, str]]:
    report = {}
    for capability in Capability:
        if not resolved.is_enabled(capability):
            report[capability.value] = {"status": "disabled"}
        elif capability in resolved.invalid:
            report[capability.value] = {
                "status": "invalid",
                "missing": ", ".join(resolved.invalid[capability].missing),
            }
        else:
            report[capability.value] = {
                "status": "configured",
                "settings": describe_config(capability, resolved),
            }
    return report


@app.command("status")
def status(
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Show which capabilities are disabled, configured or invalid."""
    report = _capability_report(resolve_capabilities())
    if as_json:
        typer.echo(json.dumps(report, sort_keys=True))
        return
    for name, entry in report.items():
        detail = entry.get("settings") or entry.get("missing")
        line = f"{name}: {entry['status']}"
        if entry["status"] == "invalid":
            line += f" (missing {detail})"
        elif detail:
            line += f" ({detail})"
        typer.echo(line)


@app.command("check")
def check(
    require: list[Capability] = typer.Option(
        [], "--require", "-r", help="Capability that must be enabled and valid"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details"),
) -> None:
    """Exit non-zero when a required capability is disabled or misconfigured."""
    if verbose:
        configure_logging("DEBUG")
    try:
        resolve_capabilities(required=require)
    except ConfigInvalidError as exc:
        typer.echo(f"error: {exc.message}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc
    typer.echo("ok")
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def main() -> None:
    configure_logging(get_settings().log_level)
    app()
