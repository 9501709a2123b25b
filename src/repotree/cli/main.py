"""Command-line interface for repotree.

This module provides the command-line interface for repotree, which reads a
repository tree from JSON, optionally filters it, and writes it out as text, JSON,
Markdown, or a chunked view for lazy loading.

Exit Codes:
    0: Successful completion
    1: Runtime error during execution (unreadable input, malformed tree, ...)
    2: Command-line syntax error
    141: Broken pipe (output closed early, e.g. when piping to `head`)

Example:
    # Draw a tree saved from the repository-hosting API
    $ repotree --name my-repo tree.json

    # Display version information
    $ repotree --version
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from repotree.chunker import chunk_tree
from repotree.cli.argparser import create_parser, validate_args
from repotree.cli.safe_writer import SafeWriter
from repotree.exceptions import MalformedTreeError
from repotree.exclusion_rules.base_rules import BaseExclusionRules
from repotree.exclusion_rules.composite_rules import CompositeExclusionRules
from repotree.exclusion_rules.git_rules import GitIgnoreExclusionRules
from repotree.exclusion_rules.size_rules import SizeExclusionRules
from repotree.serializers.export import export_filename, get_serializer
from repotree.serializers.json_serializer import JSONSerializer
from repotree.tree_filter import NodeMatch, filter_tree
from repotree.tree_model.tree_builder import build_tree, tree_from_dict
from repotree.tree_model.tree_node import TreeNode
from repotree.tree_stats import compute_stats, format_stats
from repotree.types import ExportFormat

logger = logging.getLogger(__name__)


def parse_tree_document(data: Any, root_name: str) -> TreeNode:
    """Build a tree from a decoded JSON document in any supported input shape.

    Args:
        data: The decoded document: a nested tree mapping, an API response with a
            ``tree`` list, or a bare list of flat entries.
        root_name: Root name used for flat entry listings.

    Raises:
        MalformedTreeError: If the document has none of the supported shapes or
            describes an invalid tree.
    """
    if isinstance(data, list):
        return build_tree(data, root_name)
    if isinstance(data, dict):
        if isinstance(data.get("tree"), list):
            if data.get("truncated"):
                logger.warning("Input listing is marked as truncated; the tree is incomplete")
            return build_tree(data["tree"], root_name)
        if "name" in data:
            return tree_from_dict(data)
    raise MalformedTreeError("Input is neither a nested tree, an API tree response, nor a list of entries")


def load_tree(source: str, root_name: Optional[str] = None) -> TreeNode:
    """Read and parse a tree document from a file path or '-' for stdin.

    Raises:
        OSError: If the file cannot be read.
        MalformedTreeError: If the content is not valid JSON, is nested deeper than
            the JSON decoder supports, or is not a valid tree.
    """
    try:
        if source == "-":
            data = json.load(sys.stdin)
            default_name = "repo"
        else:
            with open(source, "r", encoding="utf-8") as f:
                data = json.load(f)
            default_name = Path(source).stem
    except json.JSONDecodeError as e:
        raise MalformedTreeError(f"Input is not valid JSON ({e})")
    except RecursionError:
        raise MalformedTreeError("Input is nested too deeply to be decoded as JSON")

    return parse_tree_document(data, root_name or default_name)


def build_exclusion_rules(git_rules: GitIgnoreExclusionRules, max_size: Optional[str]) -> BaseExclusionRules:
    """Combine the pattern rules collected during parsing with an optional size limit."""
    rules: List[BaseExclusionRules] = [git_rules]
    if max_size is not None:
        rules.append(SizeExclusionRules(max_size))
    return CompositeExclusionRules(rules)


def main() -> None:
    """Main entry point for the repotree command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        141: Broken pipe
    """
    try:
        # Populated in command-line order while the arguments are parsed
        git_rules = GitIgnoreExclusionRules()
        parser = create_parser(git_rules)
        # argparse exits with status 2 on syntax errors and 0 for --version
        args = parser.parse_args()

        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

        validate_args(args)

        tree = load_tree(args.input, args.name)
        logger.debug("Loaded tree %r", tree.name)

        if args.stats:
            summary_text = format_stats(compute_stats(tree))
            if args.stats == "stderr":
                print(summary_text, file=sys.stderr)

        rules = build_exclusion_rules(git_rules, args.max_size)
        filtered = filter_tree(tree, NodeMatch(args.search, args.extension), exclusion_rules=rules)
        if filtered is None:
            print("Warning: No nodes matched the given filters. No output generated.", file=sys.stderr)

        if args.chunk is not None:
            export_format = ExportFormat.JSON
            chunked = chunk_tree(filtered, args.chunk)
            output = JSONSerializer(indent=args.indent).serialize_chunked(chunked) + "\n"
        else:
            export_format = ExportFormat(args.format or ExportFormat.TEXT.value)
            output = get_serializer(export_format, indent=args.indent).serialize(filtered)
            if export_format is ExportFormat.JSON and output:
                output += "\n"

        target = args.output
        if target is not None and target.is_dir():
            target = target / export_filename(tree, export_format)

        with SafeWriter(target if target is not None else sys.stdout.fileno()) as writer:
            writer.write(output)
            if args.stats == "stdout":
                writer.write(("\n" if output else "") + summary_text + "\n")

    except BrokenPipeError:
        sys.exit(141)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
