"""
niftymatic package initialisation.

1. **Expose the version string**
   ``niftymatic.__version__`` is resolved from the installed distribution
   metadata so every runtime context surfaces the same value.

2. **Re-export the public YAML loader**
   :func:`niftymatic.config.load_config` is available at the top level::

       from niftymatic import load_config
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("niftymatic")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

from .config import load_config  # noqa: E402

__all__: list[str] = ["load_config", "__version__"]
