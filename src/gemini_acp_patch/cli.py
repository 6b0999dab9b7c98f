"""
Gemini CLI ACP Patch - command-line tool for patching @google/gemini-cli.

Running `gemini --experimental-acp` as a subprocess with piped stdio hangs because
stdin is consumed by readStdin() before the ACP connection can use it for JSON-RPC.
This tool inserts an early exit for ACP mode ahead of the sandbox/relaunch logic.

Usage:
    gemini-acp-patch [target] [options]

Options:
    target            Path to gemini.js (searched for if omitted)
    --check           Report whether the file is patched, change nothing
    --dry-run         Validate that the patch can be applied, change nothing
    --restore         Restore gemini.js from its backup
    --config PATH     YAML file with extra search locations
    --log-dir PATH    Write debug logs to rotating files in PATH
    --verbose         Show detailed output
    --no-color        Disable colored output
"""

import argparse
from datetime import datetime, timezone
import glob
import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from types import TracebackType
from typing import List

from gemini_acp_patch.acp_patch_applier import AcpPatchApplier
from gemini_acp_patch.acp_patch_config import AcpPatchConfig
from gemini_acp_patch.acp_patch_exceptions import AcpPatchConfigError
from gemini_acp_patch.acp_patch_locator import AcpPatchLocator
from gemini_acp_patch.acp_patch_types import AcpPatchResult


LOG_DIR_ENV = "GEMINI_ACP_PATCH_LOG_DIR"


class Colors:
    """ANSI color codes for progress and diagnostic lines."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'     # errors
    GREEN = '\033[92m'   # success marks
    YELLOW = '\033[93m'
    BLUE = '\033[94m'    # verbose lines
    CYAN = '\033[96m'    # paths

    @classmethod
    def disable(cls) -> None:
        """Blank every code so output is plain text (pipes, --no-color)."""
        for name in ('RESET', 'BOLD', 'RED', 'GREEN', 'YELLOW', 'BLUE', 'CYAN'):
            setattr(cls, name, '')


def setup_logging(log_dir: str | None = None) -> None:
    """
    Configure application logging.

    Files are only written when a log directory is given; otherwise warnings
    and above go to stderr.

    Args:
        log_dir: Directory for timestamped, rotating log files, if any
    """
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    if not log_dir:
        logging.basicConfig(
            level=logging.WARNING,
            format=log_format,
            handlers=[logging.StreamHandler(sys.stderr)]
        )
        return

    os.makedirs(log_dir, exist_ok=True)

    # Generate timestamp for log filename
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M-%S-%f")[:23]
    log_file = os.path.join(log_dir, f"{timestamp}.log")

    # Keep up to 50 log files, max 1MB each; the file opens on first record
    handler = RotatingFileHandler(
        log_file,
        maxBytes=1024*1024,
        backupCount=49,  # Keep 50 files total (current + 49 backups)
        encoding='utf-8',
        delay=True
    )

    logging.basicConfig(
        level=logging.DEBUG,
        format=log_format,
        handlers=[handler]
    )

    cleanup_old_logs(log_dir, max_logs=50)


def cleanup_old_logs(log_dir: str, max_logs: int) -> None:
    """Remove oldest log files if we exceed maximum count."""
    log_files = glob.glob(os.path.join(log_dir, "*.log*"))
    log_files.sort(key=os.path.getctime)  # Oldest first

    # Drop the oldest files until we are back under the limit
    while len(log_files) > max_logs:
        try:
            os.remove(log_files.pop(0))

        except OSError:
            pass  # Another run may have removed it


def install_global_exception_handler() -> None:
    """Log uncaught exceptions before the default handler reports them."""
    logger = logging.getLogger('GlobalExceptionHandler')

    def handle_exception(
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_traceback: TracebackType | None
    ) -> None:
        """Handle uncaught exceptions and log them."""
        if not issubclass(exc_type, KeyboardInterrupt):
            logger.critical(
                "Uncaught exception",
                exc_info=(exc_type, exc_value, exc_traceback),
                stack_info=True
            )

        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    sys.excepthook = handle_exception


class AcpPatcher:
    """
    Main patcher application.

    Coordinates:
    - Resolving the target file
    - Running the requested operation
    - Reporting the result
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize patcher with command-line arguments.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self.verbose = args.verbose
        self._logger = logging.getLogger("AcpPatcher")

        # Disable colors if not in terminal or if explicitly disabled
        if not sys.stdout.isatty() or args.no_color:
            Colors.disable()

        self.applier = AcpPatchApplier()

    def run(self) -> int:
        """
        Run the patcher.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        self._show_banner()

        try:
            target_path = self._resolve_target()

        except (AcpPatchConfigError, FileNotFoundError) as e:
            self._print_error(str(e))
            return 1

        if target_path is None:
            self._show_not_found_help()
            return 1

        if not os.path.exists(target_path):
            self._print_error(f"File not found: {target_path}")
            return 1

        print(f"Found gemini.js at: {Colors.CYAN}{target_path}{Colors.RESET}")
        print("")

        try:
            result = self._run_operation(target_path)

        except KeyboardInterrupt:
            self._print_error("\nInterrupted by user")
            return 130

        self._show_result(result)
        return 0 if result.success else 1

    def _show_banner(self) -> None:
        """Display the tool banner."""
        print(f"{Colors.BOLD}Gemini CLI ACP Patch{Colors.RESET}")
        print("====================")
        print("")

    def _load_config(self) -> AcpPatchConfig:
        """Build configuration from the environment and optional file."""
        if self.args.config:
            self._print_verbose(f"Loading configuration from {self.args.config}")
            return AcpPatchConfig.load_from_file(self.args.config)

        return AcpPatchConfig.from_environment()

    def _resolve_target(self) -> str | None:
        """
        Get the target path from the command line or by searching.

        Configuration is only built when searching, so an explicit target never
        probes for a Node.js runtime.
        """
        if self.args.target:
            return self.args.target

        print("Searching for @google/gemini-cli installation...")
        locator = AcpPatchLocator(self._load_config())
        if self.verbose:
            for directory in locator.candidate_directories():
                self._print_verbose(f"Candidate: {directory}")

        return locator.find()

    def _run_operation(self, target_path: str) -> AcpPatchResult:
        """Run the operation selected on the command line."""
        print(f"Reading {target_path}...")

        if self.args.check:
            return self.applier.check(target_path)

        if self.args.restore:
            return self.applier.restore(target_path)

        return self.applier.apply(target_path, dry_run=self.args.dry_run)

    def _show_result(self, result: AcpPatchResult) -> None:
        """Display the outcome of an operation."""
        self._logger.info("Result: %s (%s)", result.status.value, result.message)

        if not result.success:
            self._print_error(result.message)
            if self.verbose and result.error_details:
                for key, value in result.error_details.items():
                    self._print_verbose(f"{key}: {value}")

            return

        print(f"{Colors.GREEN}✓{Colors.RESET} {result.message}")
        if result.backup_path and self.verbose:
            self._print_verbose(f"Backup: {result.backup_path}")

    def _show_not_found_help(self) -> None:
        """Explain how to supply the path manually."""
        lines = [
            "",
            "Could not find @google/gemini-cli installation.",
            "",
            "Please provide the path to gemini.js manually:",
            "  gemini-acp-patch /path/to/@google/gemini-cli/dist/src/gemini.js",
            "",
            "You can find it by running:",
            "  npm root -g   # then look in @google/gemini-cli/dist/src/gemini.js",
            "  pnpm root -g  # then look in @google/gemini-cli/dist/src/gemini.js",
        ]
        for line in lines:
            print(line, file=sys.stderr)

    def _print_error(self, message: str) -> None:
        """Print error message."""
        print(f"{Colors.RED}Error:{Colors.RESET} {message}", file=sys.stderr)

    def _print_verbose(self, message: str) -> None:
        """Print verbose message."""
        if self.verbose:
            print(f"{Colors.BLUE}[verbose]{Colors.RESET} {message}")


def parse_arguments(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="gemini-acp-patch",
        description="Patch @google/gemini-cli so ACP mode works with piped stdio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for gemini-cli and apply the patch
  gemini-acp-patch

  # Patch a specific file
  gemini-acp-patch /usr/local/lib/node_modules/@google/gemini-cli/dist/src/gemini.js

  # See whether the installed copy is patched
  gemini-acp-patch --check

  # Put the original file back
  gemini-acp-patch --restore
        """
    )

    parser.add_argument(
        'target',
        nargs='?',
        help='Path to gemini.js (searched for if omitted)'
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--check',
        action='store_true',
        help='Report whether the file is patched without changing it'
    )
    mode.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate that the patch can be applied without changing anything'
    )
    mode.add_argument(
        '--restore',
        action='store_true',
        help='Restore the file from its .backup copy'
    )

    parser.add_argument(
        '--config',
        help='YAML configuration file with additional search locations'
    )

    parser.add_argument(
        '--log-dir',
        help=f'Write rotating debug logs to this directory (default: ${LOG_DIR_ENV}, else none)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show detailed output'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.log_dir or os.environ.get(LOG_DIR_ENV))
    install_global_exception_handler()
    patcher = AcpPatcher(args)
    return patcher.run()


if __name__ == "__main__":
    sys.exit(main())
