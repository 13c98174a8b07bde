#!/usr/bin/env python3
# run_engine.py
# This file is part of Formulary - A Formula Expression Engine
#
# Command-line interface for formula inspection with configurable logging levels

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Dict, Mapping

from calculus import classify, partial_derivatives
from dependency import DEFAULT_MAX_DEPTH, DependencyTreeNode, TreeNodeKind, build_tree
from expression import extract_variables, parse
from expression.exceptions import ParseError
from layout import layout
from utils.formula_reader import FormulaFormatError, read_formula_map
from utils.graph_visualizer import render_expression_graph
from utils.logger import configure_logging, get_logger


class UnknownFormulaError(KeyError):
    """Raised when the requested root formula is not in the formula file."""

    pass


TREE_MARKERS = {
    TreeNodeKind.FORMULA: "ƒ",
    TreeNodeKind.LEAF: "•",
    TreeNodeKind.CIRCULAR: "↻",
}


def select_root(formulas: Mapping[str, str], name: str = None) -> str:
    """Pick the formula to inspect.

    Args:
        formulas: Loaded formula map
        name: Requested name, or None for the first formula in the file

    Returns:
        Name of the root formula

    Raises:
        UnknownFormulaError: If the name is missing or the map is empty
    """
    if name is None:
        if not formulas:
            raise UnknownFormulaError("Formula file is empty")
        return next(iter(formulas))

    if name not in formulas:
        raise UnknownFormulaError(f"Unknown formula: {name}")
    return name


def render_tree(node: DependencyTreeNode) -> str:
    """Render a dependency tree as indented text."""
    lines = []
    for current in node.iter_nodes():
        indent = "  " * current.depth
        detail = f" = {current.expression}" if current.expression else ""
        lines.append(f"{indent}{TREE_MARKERS[current.kind]} {current.name}{detail}")
    return "\n".join(lines)


def inspect_formula(args: argparse.Namespace, formulas: Mapping[str, str]) -> Dict[str, Any]:
    """Run every requested analysis on the selected formula.

    Args:
        args: Parsed command line
        formulas: Loaded formula map

    Returns:
        Report keyed by analysis name, JSON-compatible
    """
    logger = get_logger()
    root = select_root(formulas, args.name)
    expression = formulas[root]
    report: Dict[str, Any] = {"name": root, "formula": expression}

    if args.check:
        ast = parse(expression)
        report["ast"] = str(ast)
        report["variables"] = sorted(extract_variables(ast))
        logger.info(f"✅ {root} = {ast}")
        logger.info(f"   variables: {', '.join(report['variables']) or '(none)'}")

    if args.tree:
        tree = build_tree(root, formulas, max_depth=args.max_depth)
        report["tree"] = tree.to_dict()
        logger.info(f"\n🌳 Dependency tree of {root}:\n{render_tree(tree)}")

    if args.derivatives:
        derivatives = partial_derivatives(expression)
        report["derivatives"] = derivatives
        logger.info(f"\n📐 Partial derivatives of {root}:")
        for variable, derivative in derivatives.items():
            reading = classify(derivative)
            logger.info(
                f"  ∂{root}/∂{variable} = {derivative}  ({reading.impact}, {reading.relation})"
            )

    if args.layout or args.render:
        graph = layout(root, formulas, expanded=frozenset(args.expand))
        report["graph"] = graph.to_dict()
        logger.info(
            f"\n🗺️  Layout of {root}: {len(graph.nodes)} nodes, {len(graph.edges)} edges"
        )

        if args.render:
            report["rendered"] = render_expression_graph(graph, root, args.render, args.format)

    return report


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Formulary Formula Expression Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_engine.py -f formulas.json -n Total_Cost --tree
  python run_engine.py -f formulas.json -n Total_Cost --derivatives -v
  python run_engine.py -f formulas.csv -n Total_Cost --layout --expand Capex --json
  python run_engine.py -f formulas.json -n Total_Cost --render total_cost --format svg

Formula file format:
  formulas.json:
    {"Total_Cost": "(Capex + Opex) * (1 + Inflation_Rate)",
     "Capex": "Equipment + Installation"}

  formulas.csv:
    name,formula
    Total_Cost,(Capex + Opex) * (1 + Inflation_Rate)
        """,
    )

    parser.add_argument(
        "-f", "--formulas", required=True, type=Path, help="Path to JSON or CSV formula file"
    )

    parser.add_argument(
        "-n", "--name", default=None, help="Formula to inspect (default: first in file)"
    )

    parser.add_argument(
        "--check", action="store_true", help="Parse the formula and list its variables"
    )

    parser.add_argument("--tree", action="store_true", help="Print the dependency tree")

    parser.add_argument(
        "--derivatives", action="store_true", help="Print partial derivatives"
    )

    parser.add_argument(
        "--layout", action="store_true", help="Compute the expression graph layout"
    )

    parser.add_argument(
        "--expand",
        action="append",
        default=[],
        metavar="NAME",
        help="Variable to expand inline in the layout (repeatable)",
    )

    parser.add_argument(
        "--render",
        metavar="BASENAME",
        default=None,
        help="Render the layout with Graphviz into formula_visualizations/BASENAME",
    )

    parser.add_argument(
        "--format", default="png", help="Graphviz output format for --render (default: png)"
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Dependency tree depth limit (default: {DEFAULT_MAX_DEPTH})",
    )

    parser.add_argument(
        "--json", action="store_true", help="Print the full report as JSON on stdout"
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the formula inspection tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Without an explicit analysis, just validate the formula
    if not (args.tree or args.derivatives or args.layout or args.render):
        args.check = True

    # Human-readable output needs INFO messages
    configure_logging(verbose=args.verbose or not args.json, debug=args.debug)
    logger = get_logger()

    try:
        formulas = read_formula_map(str(args.formulas))
        report = inspect_formula(args, formulas)

        if args.json:
            print(json.dumps(report, indent=2, ensure_ascii=False))

        return 0

    except FormulaFormatError as e:
        logger.error(f"Formula file error: {e}")
        return 1

    except ParseError as e:
        logger.error(f"Formula parsing error: {e}")
        return 2

    except UnknownFormulaError as e:
        logger.error(f"Formula selection error: {e.args[0]}")
        return 3

    except KeyboardInterrupt:
        logger.error("Inspection interrupted by user")
        return 4

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return 5


if __name__ == "__main__":
    sys.exit(main())
