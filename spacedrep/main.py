import argparse
from typing import Optional, Sequence

from spacedrep.app import AppSettings, run_report

__all__ = ["main"]


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the application."""
    parser = argparse.ArgumentParser(description="Show the spaced-repetition status of an owner's cards.")
    parser.add_argument("owner_id", help="Owner whose cards should be summarised.")
    args = parser.parse_args(argv)

    settings = AppSettings.from_env()
    run_report(settings, args.owner_id)


if __name__ == "__main__":
    main()
