"""Command-line interface for phab-build-status"""

import sys

from rich.console import Console
from rich.markup import escape

from phab_build_status.cli.args import parse_args
from phab_build_status.config import Config, resolve_conduit_settings
from phab_build_status.core import BuildStatusReport
from phab_build_status.logging_config import setup_logging

console = Console()
error_console = Console(stderr=True)


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    report = None
    try:
        parsed_args = parse_args(argv)

        # Setup logging before anything talks to the repository or Conduit
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        settings = resolve_conduit_settings(
            parsed_args.repo, uri=parsed_args.conduit_uri, token=parsed_args.conduit_token
        )
        config = Config(
            conduit_uri=settings["conduit_uri"],
            conduit_token=settings["conduit_token"],
            timeout=parsed_args.timeout,
            max_workers=parsed_args.workers,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            error_console.print("[yellow]Debug mode enabled[/yellow]")
            error_console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                error_console.print(f"  {key}: {value}")

        report = BuildStatusReport(parsed_args.repo, config, output=console)

        if parsed_args.debug:
            user = report.conduit.whoami()
            error_console.print(f"  conduit user: {user.get('userName', 'unknown')}")

        report.run()
        return 0
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        error_console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            error_console.print_exception()
        return 1
    finally:
        if report is not None:
            report.close()


if __name__ == "__main__":
    sys.exit(main())
