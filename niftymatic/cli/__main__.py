"""Module wrapper so running ``python -m niftymatic.cli`` matches the console script."""

from niftymatic.cli import main


if __name__ == "__main__":  # pragma: no cover
    main()
