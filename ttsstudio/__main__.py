"""Module entrypoint for running TTS Studio as ``python -m ttsstudio``."""

from __future__ import annotations

from ttsstudio.cli import main


if __name__ == "__main__":
    main()
