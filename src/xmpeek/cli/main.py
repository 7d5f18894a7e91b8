"""Main CLI entry point for the xmpeek command-line tool.

Provides commands to display the XMP tree of a file, export the raw packet
bytes and scan many files for packet positions.
"""

import argparse
import csv
import io
import json
import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from xmpeek import __version__
from xmpeek.api import LoadResult, XmpLoader
from xmpeek.shared.config import ConfigError, XmpeekConfig
from xmpeek.shared.errors import PacketIOError
from xmpeek.shared.logging import get_logger
from xmpeek.tree import render_text

DEFAULT_EXPORT_NAME = "xpacket.xml"


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.loader_config = XmpeekConfig.default()
        self.max_workers = None  # Use system default
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON XmpeekConfig file.

        Raises:
            ConfigError: If the file exists but is not a valid configuration
        """
        config = cls()
        if config_path.exists():
            try:
                text = config_path.read_text()
            except OSError as e:
                raise ConfigError(f"Could not read config file: {e}") from e
            config.loader_config = XmpeekConfig.from_json(text)
        return config


class ProgressTracker:
    """Progress tracking for batch scans."""

    def __init__(self, total: int, description: str = "Scanning", enabled: bool = True):
        self.total = total
        self.completed = 0
        self.description = description
        self.enabled = enabled
        self.start_time = time.time()
        self.last_update = 0.0

    def update(self, increment: int = 1):
        """Update progress and display if needed."""
        self.completed += increment
        current_time = time.time()

        # Update every second or on completion
        if current_time - self.last_update >= 1.0 or self.completed >= self.total:
            self._display_progress()
            self.last_update = current_time

    def _display_progress(self):
        if not self.enabled or self.total == 0:
            return

        percentage = (self.completed / self.total) * 100
        progress_bar = "=" * int(percentage // 2)
        progress_bar += " " * (50 - len(progress_bar))

        print(f"\r{self.description}: [{progress_bar}] "
              f"{percentage:.1f}% ({self.completed}/{self.total})",
              end="", file=sys.stderr)

        if self.completed >= self.total:
            print(file=sys.stderr)


class PacketProcessor:
    """Loads host files for CLI commands."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.loader = XmpLoader(config.loader_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a single file and return its summary."""
        return self.loader.load_file(file_path).summary()

    def find_host_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Find candidate host files under ``path``."""
        if path.is_file():
            yield path
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file():
                    yield candidate
        else:
            # Let the loader report the missing file
            yield path

    def batch_process(
        self,
        paths: List[Path],
        recursive: bool = False,
        show_progress: bool = True,
    ) -> List[Dict[str, Any]]:
        """Load many files, in parallel when there is more than one."""
        all_files: List[Path] = []
        for path in paths:
            all_files.extend(self.find_host_files(path, recursive))

        if not all_files:
            return []

        results: List[Dict[str, Any]] = []
        progress = ProgressTracker(len(all_files), "Scanning files", enabled=show_progress)

        if len(all_files) == 1 or self.config.max_workers == 1:
            for file_path in all_files:
                results.append(self.process_single_file(file_path))
                progress.update()
        else:
            # Completion order is arbitrary; report in input order
            slots: List[Optional[Dict[str, Any]]] = [None] * len(all_files)
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                future_to_index = {
                    executor.submit(self.process_single_file, file_path): index
                    for index, file_path in enumerate(all_files)
                }
                for future in as_completed(future_to_index):
                    slots[future_to_index[future]] = future.result()
                    progress.update()
            results = [r for r in slots if r is not None]

        self.logger.info(
            "Batch scan completed",
            extra={
                "file_count": len(results),
                "successful": sum(1 for r in results if r["success"]),
            },
        )
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xmpeek",
        description="Locate, display and export the XMP packet embedded in a file"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Show command
    show_parser = subparsers.add_parser("show", help="Display the XMP tree of a file")
    show_parser.add_argument("file", type=Path, help="Host file to inspect")
    show_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    show_parser.add_argument(
        "--max-depth",
        type=int,
        help="Deepest level to display (root = 0)"
    )
    show_parser.add_argument(
        "--qualified-names",
        action="store_true",
        help="Keep namespace prefixes in element and attribute names"
    )
    show_parser.add_argument(
        "--full-text",
        action="store_true",
        help="Do not truncate long attribute values and text"
    )

    # Extract command
    extract_parser = subparsers.add_parser("extract", help="Save the raw XMP packet")
    extract_parser.add_argument("file", type=Path, help="Host file to extract from")
    extract_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path(DEFAULT_EXPORT_NAME),
        help=f"Output file (default: {DEFAULT_EXPORT_NAME})"
    )

    # Info command
    info_parser = subparsers.add_parser("info", help="Report packet positions for many files")
    info_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to scan"
    )
    info_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively scan directories"
    )
    info_parser.add_argument(
        "--format", "-f",
        choices=["json", "csv", "text"],
        help="Output format (default: text)"
    )
    info_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel workers"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format scan results for output."""
    if format_type == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["file", "success", "offset", "length", "elements", "error_kind", "error"])
        for result in results:
            error = result.get("error") or {}
            writer.writerow([
                result["file"],
                result["success"],
                "" if result.get("offset") is None else result["offset"],
                "" if result.get("length") is None else result["length"],
                result.get("element_count", 0),
                error.get("kind", ""),
                error.get("message", ""),
            ])
        return buffer.getvalue().rstrip("\n")

    if format_type == "text":
        if not results:
            return "No results to display."

        successful = sum(1 for r in results if r.get("success", False))
        lines = [f"Scanned {len(results)} files, {successful} with a readable packet"]
        lines.append("-" * 60)

        for result in results:
            status = "✓" if result.get("success", False) else "✗"
            lines.append(f"{status} {result['file']}")
            if result.get("offset") is not None:
                lines.append(
                    f"   Offset: {result['offset']}, Size: {result['length']}, "
                    f"Elements: {result.get('element_count', 0)}"
                )
            error = result.get("error")
            if error:
                lines.append(f"   Error ({error['kind']}): {error['message']}")

        return "\n".join(lines)

    return json.dumps(results, indent=2)


def _report_failure(result: LoadResult) -> None:
    if result.error is not None:
        print(f"Error: {result.error.message}", file=sys.stderr)


def cmd_show(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle show command."""
    loader_config = config.loader_config
    if args.qualified_names:
        loader_config = loader_config.override(tree__qualified_names=True)

    result = XmpLoader(loader_config).load_file(args.file)
    if not result.success:
        _report_failure(result)
        return 1

    if args.format == "json":
        output = {"packet": result.packet.to_dict(), "root": result.root.to_dict()}
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        max_text_length = None if args.full_text else loader_config.tree.max_text_preview
        print(render_text(result.root, max_depth=args.max_depth, max_text_length=max_text_length))

    if not args.quiet:
        print(result.status_line, file=sys.stderr)
    return 0


def cmd_extract(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle extract command."""
    result = XmpLoader(config.loader_config).load_file(args.file)
    if result.packet is None:
        _report_failure(result)
        return 1

    # The packet is exported even when its XML is broken
    if result.error is not None and not args.quiet:
        print(f"Warning: {result.error.message}", file=sys.stderr)

    try:
        output_path = result.packet.save(args.output)
    except PacketIOError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Saved {result.packet.length} bytes to {output_path}", file=sys.stderr)
    return 0


def cmd_info(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle info command."""
    if args.workers:
        config.max_workers = args.workers
    if args.format:
        config.output_format = args.format

    processor = PacketProcessor(config)
    results = processor.batch_process(args.paths, args.recursive, show_progress=not args.quiet)
    print(format_results(results, config.output_format))

    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def _configure_logging(args: argparse.Namespace, config: CLIConfig) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, config.loader_config.global_.logging_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = CLIConfig()
    if args.config:
        try:
            config = CLIConfig.from_file(args.config)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    _configure_logging(args, config)

    try:
        if args.command == "show":
            return cmd_show(args, config)
        elif args.command == "extract":
            return cmd_extract(args, config)
        elif args.command == "info":
            return cmd_info(args, config)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
