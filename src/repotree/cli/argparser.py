"""Command-line argument parsing for repotree.

This module defines the command-line interface for repotree,
handling argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from repotree import __version__
from repotree.chunker import DEFAULT_MAX_NODES_PER_CHUNK
from repotree.exclusion_rules.base_rules import BaseExclusionRules
from repotree.serializers.json_serializer import DEFAULT_JSON_INDENT
from repotree.types import ExportFormat


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class for handling exclusion rules.

    This factory function creates an action class that will update the provided
    exclusion rules object as arguments are processed. This preserves the exact
    order of exclusion specifications as they appear on the command line.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        """Action to update exclusion rules as arguments are processed."""

        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            if option_string in ("-e", "--exclude"):
                if isinstance(values, (str, os.PathLike)):
                    exclusion_rules.load_rules(values)
                else:
                    exclusion_rules.load_rules(Path(str(values)))
            else:  # -i/--ignore
                exclusion_rules.add_rule(str(values))

            recorded = getattr(namespace, self.dest, None) or []
            recorded.append(values)
            setattr(namespace, self.dest, recorded)

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with repotree's options.
    """
    description = """
    repotree: Inspect, filter, chunk, and export a repository's file tree.

    The input is a JSON document describing a repository tree, in one of three shapes:
    - a nested tree as written by `repotree -f json`
    - a repository-hosting API tree response: an object with a "tree" list of entries
    - a bare list of entries, each with "path", "type" (blob/tree) and optional "size"

    The tree is optionally filtered by name and extension, then written as an
    indented text tree, JSON, or a Markdown outline, or split into chunks for
    lazy loading.
    """

    epilog = """
    Examples:
      # Draw the tree of a saved API response
      repotree --name my-repo tree.json

      # Only TypeScript files whose name contains "util"
      repotree -s util -x ts -x tsx tree.json

      # Exclude paths with gitignore-style patterns
      repotree -i "node_modules/" -i "*.lock" -e .gitignore tree.json

      # Drop files over 1MB and export Markdown into a directory
      repotree --max-size 1MB -f markdown -o exports/ tree.json

      # Split into chunks of at most 200 entries for lazy loading
      repotree --chunk 200 -o chunks.json tree.json

      # Print statistics of the input tree to stderr
      repotree -S stderr tree.json
    """

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"repotree {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "input",
        help="JSON file holding the repository tree, or '-' to read from stdin.",
    )
    parser.add_argument(
        "-n",
        "--name",
        metavar="NAME",
        help="Root name for flat entry listings (default: the input file name without extension).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=[fmt.value for fmt in ExportFormat],
        help="Export format (default: text; json when --chunk is given).",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=DEFAULT_JSON_INDENT,
        metavar="N",
        help=f"Indent width for JSON output; 0 for compact output (default: {DEFAULT_JSON_INDENT}).",
    )
    parser.add_argument(
        "-s",
        "--search",
        default="",
        metavar="TEXT",
        help="Keep only files and folders whose name contains TEXT (case-insensitive).",
    )
    parser.add_argument(
        "-x",
        "--extension",
        action="append",
        default=[],
        metavar="EXT",
        help="Keep only files with this extension (can be specified multiple times).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="Path to a gitignore-style file whose patterns exclude nodes (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help=(
            "Individual gitignore-style pattern matched against node paths. Can be specified multiple "
            "times; patterns are applied in the order given, mixed with -e/--exclude options."
        ),
    )
    parser.add_argument(
        "--max-size",
        metavar="SIZE",
        help="Exclude files larger than SIZE (e.g. 500KB, 1MB, 2048).",
    )
    parser.add_argument(
        "-c",
        "--chunk",
        type=int,
        metavar="N",
        help=(
            "Instead of exporting the tree, write its chunked view as JSON, with at most N entries per chunk "
            f"(typical value: {DEFAULT_MAX_NODES_PER_CHUNK})."
        ),
    )
    parser.add_argument(
        "-S",
        "--stats",
        metavar="DEST",
        choices=["stdout", "stderr"],
        help="Print statistics of the input tree. Valid destinations: stdout, stderr.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="PATH",
        help="Output file, or existing directory to write '<name>-structure.<ext>' into (default: stdout).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debugging details to stderr.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.indent < 0:
        raise ValueError("--indent must not be negative")
    if args.chunk is not None:
        if args.chunk <= 0:
            raise ValueError("--chunk must be a positive number of entries")
        if args.format not in (None, ExportFormat.JSON.value):
            raise ValueError("--chunk always writes JSON; it cannot be combined with -f/--format " + args.format)
