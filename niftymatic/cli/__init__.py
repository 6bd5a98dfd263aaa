"""Expose the project-wide Click group for the ``niftymatic-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires common global flags (configuration file, verbosity, log mirror);
* loads the merged configuration once and stores it in the Click context;
* sets up logging via :pyfunc:`niftymatic.utils.logging.setup_logging`;
* registers every sub-command located in sibling modules.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict

import click

from niftymatic import __version__
from niftymatic.config import load_config
from niftymatic.utils.errors import ConfigurationInvalid
from niftymatic.utils.logging import setup_logging


class LazyGroup(click.Group):
    """Click group that imports sub-commands lazily."""

    def __init__(self, *args, **kwargs):
        self._lazy: dict[str, str] = {}
        super().__init__(*args, **kwargs)

    def set_lazy_command(self, name: str, target: str) -> None:
        """Register *name* to be imported from ``module:attr`` on first use."""
        self._lazy[name] = target

    def list_commands(self, ctx):  # noqa: D401 - Click signature
        """Return eager and lazy command names, sorted."""
        return sorted(set(super().list_commands(ctx)) | set(self._lazy))

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        """Resolve *cmd_name* from the eager map or import table."""
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        cmd = getattr(importlib.import_module(module_name), attr)
        self.add_command(cmd, name=cmd_name)
        return cmd


_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
niftymatic-cli – fetal brain reconstruction with NiftyMIC.

""",
)
@click.version_option(__version__)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML file overriding the packaged and system configuration.",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG console output, including tool output.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *niftymatic-cli*.

    Raises:
        click.ClickException: When the configuration cannot be loaded or
            the log files cannot be opened.
    """
    try:
        cfg = load_config(config_path)
    except ConfigurationInvalid as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        setup_logging(
            log_root=Path(cfg.output.base_directory),
            verbose=verbose,
            debug=debug,
            extra_text_log=save_logfile,
        )
    except OSError as exc:
        raise click.ClickException(f"Could not set up logging: {exc}") from exc

    ctx.obj = {
        "cfg": cfg,
        "verbose": verbose,
        "debug": debug,
    }


main.set_lazy_command("convert-dicom", "niftymatic.cli.convert:convert_dicom")
main.set_lazy_command("convert-nifti", "niftymatic.cli.convert:convert_nifti")
main.set_lazy_command("generate-masks", "niftymatic.cli.masks:cli")
main.set_lazy_command("reconstruct", "niftymatic.cli.reconstruct:cli")
main.set_lazy_command("pipeline", "niftymatic.cli.pipeline:cli")
main.set_lazy_command("status", "niftymatic.cli.status:cli")

cli = main
__all__: list[str] = ["main"]
