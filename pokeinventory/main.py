import sys

from .cli.cli import parse_args, route_command, validate_args
from .config import LOGGER


def main(argv: list[str] | None = None) -> int:
    """
    Run one pokeinventory command, e.g. main(["inventory", "list"]).
    Reads sys.argv when `argv` is None. Returns the process exit code.
    """
    args = parse_args(argv)

    problem = validate_args(args)
    if problem:
        LOGGER.error(f"Error: {problem}")
        return 1

    try:
        route_command(args)
    except SystemExit as e:
        # Command handlers exit with their result's exit code
        return int(e.code) if e.code is not None else 1
    except Exception as e:
        LOGGER.error(f"Error executing command '{args.command}': {e}")
        return 1
    return 0


def cli_main() -> None:
    """Entry point of the `pokeinventory` console script."""
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
