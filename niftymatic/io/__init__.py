"""Public façade for the ``io`` sub-package.

Wrappers around the host-native converters used by the first and last
pipeline stages.

Attributes:
    run_dcm2niix (Callable): DICOM folder → NIfTI volumes.
    run_medcon (Callable): NIfTI volume → per-slice DICOM files.
"""

from .dcm2niix import run_dcm2niix
from .medcon import run_medcon

__all__ = ["run_dcm2niix", "run_medcon"]
