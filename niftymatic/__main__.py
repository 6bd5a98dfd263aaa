"""
Module entry-point that makes the package runnable with

    python -m niftymatic

The behaviour is identical to the *niftymatic-cli* console script.
"""

from niftymatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
