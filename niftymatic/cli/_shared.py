"""
Helpers reused by several Click commands.

* :func:`reconstruction_options` adds one flag per
  :class:`~niftymatic.pipelines.types.ReconstructionOptions` field.
* :func:`pipeline_errors` turns pipeline errors into
  :class:`click.ClickException` so the user sees one line instead of a
  traceback.
* :func:`open_reconstruction` attaches to a working directory and checks the
  stage precondition unless ``--force`` is given.
"""

from __future__ import annotations

import contextlib
import functools
from pathlib import Path
from typing import Callable, Iterator

import click
import structlog

from niftymatic.pipelines.reconstruct import Reconstruction
from niftymatic.pipelines.types import PipelineStage, ReconstructionOptions
from niftymatic.utils.errors import NiftymaticError

log = structlog.get_logger()

_DEFAULTS = ReconstructionOptions()

workdir_argument = click.argument(
    "working_directory",
    type=click.Path(path_type=Path, exists=True, file_okay=False),
)

force_option = click.option(
    "--force",
    is_flag=True,
    help="Run even if the previous stage's output is missing.",
)


@contextlib.contextmanager
def pipeline_errors() -> Iterator[None]:
    """Re-raise :class:`NiftymaticError` as :class:`click.ClickException`."""
    try:
        yield
    except NiftymaticError as exc:
        log.error("cli.failed", error=str(exc), kind=type(exc).__name__)
        raise click.ClickException(str(exc)) from exc


def open_reconstruction(
    ctx_obj: dict,
    working_directory: Path,
    *,
    requires: PipelineStage,
    force: bool,
) -> Reconstruction:
    """Return a :class:`Reconstruction` for *working_directory*.

    Raises:
        StagePreconditionFailed: When *requires* is not met and *force* is
            not set.
    """
    rec = Reconstruction.from_working_directory(working_directory, ctx_obj["cfg"])
    if not force:
        rec.require_stage(requires)
    return rec


def reconstruction_options(func: Callable) -> Callable:
    """Decorate a command with reconstruction flags.

    The wrapped callback receives a single ``options`` keyword argument
    holding a validated :class:`ReconstructionOptions`.
    """

    @click.option("--alpha", type=float, default=_DEFAULTS.alpha, help="Regularisation weight.")
    @click.option(
        "--outlier-rejection/--no-outlier-rejection",
        default=_DEFAULTS.outlier_rejection,
        help="Reject misregistered slices.",
    )
    @click.option("--threshold-first", type=float, default=_DEFAULTS.threshold_first,
                  help="Outlier threshold of the first cycle.")
    @click.option("--threshold", type=float, default=_DEFAULTS.threshold,
                  help="Outlier threshold of the last cycle.")
    @click.option(
        "--intensity-correction/--no-intensity-correction",
        default=_DEFAULTS.intensity_correction,
        help="Correct intensities across stacks.",
    )
    @click.option("--isotropic-resolution", type=float, default=_DEFAULTS.isotropic_resolution,
                  help="Output voxel size in mm.")
    @click.option("--two-step-cycles", type=int, default=_DEFAULTS.two_step_cycles,
                  help="Number of registration/reconstruction cycles.")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        fields = (
            "alpha",
            "outlier_rejection",
            "threshold_first",
            "threshold",
            "intensity_correction",
            "isotropic_resolution",
            "two_step_cycles",
        )
        values = {name: kwargs.pop(name) for name in fields}
        with pipeline_errors():
            kwargs["options"] = ReconstructionOptions(**values)
        return func(*args, **kwargs)

    return wrapper
