"""Command-line interface for the rule-based Sudoku solver."""

import argparse
import logging
import sys

from .core import Grid, InputDataError, render_grid, render_candidates
from .solvers import RuleSolver, MAX_ITERATIONS
from .benchmark import BatchRunner
from .benchmark.visualizer import Visualizer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Rule-based Sudoku solver with optional brute-force guessing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve one puzzle with deduction rules only
  python -m logicsudoku.cli solve --puzzle "530070000600195000..."

  # Solve every puzzle in a file, guessing when the rules stall
  python -m logicsudoku.cli batch puzzles.txt --brute-force --output results/
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a single puzzle")
    solve_parser.add_argument(
        "--puzzle", "-p", type=str, required=True,
        help="Puzzle string (81 chars, 0 for empty cells)"
    )
    _add_solver_arguments(solve_parser)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Solve every puzzle in a file")
    batch_parser.add_argument(
        "file", type=str,
        help="Text file with one 81-character puzzle per line"
    )
    batch_parser.add_argument(
        "--output", "-o", type=str, default=None,
        help="Output directory for JSON results and charts"
    )
    batch_parser.add_argument(
        "--no-charts", action="store_true",
        help="Skip chart generation"
    )
    _add_solver_arguments(batch_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "solve":
        cmd_solve(args)
    elif args.command == "batch":
        cmd_batch(args)


def _add_solver_arguments(parser):
    parser.add_argument(
        "--brute-force", "-b", action="store_true",
        help="Guess and recurse when no rule makes progress"
    )
    parser.add_argument(
        "--max-iterations", type=int, default=MAX_ITERATIONS,
        help=f"Rule cycles allowed per search level (default: {MAX_ITERATIONS})"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log every rule application"
    )


def cmd_solve(args):
    """Handle the solve command."""
    try:
        grid = Grid.from_string(args.puzzle)
    except InputDataError as e:
        print(f"Error parsing puzzle: {e}")
        sys.exit(1)

    print("Solving puzzle...")
    print(f"Brute force guessing is *{'ON' if args.brute_force else 'OFF'}*")
    print(render_grid(grid, initial=True))
    print()

    solver = RuleSolver(brute_force=args.brute_force, max_iterations=args.max_iterations)
    solution, stats = solver.solve(grid)

    if stats.solved:
        print("SOLVED!")
        print(render_grid(solution))
        print(solution.serialize())
        print(f"Solved in {stats.iterations} iterations ({stats.time_seconds:.4f}s).")
        if args.brute_force:
            print(f"  Guesses: {stats.nodes_explored:,}, failed: {stats.backtracks:,}, max depth: {stats.max_depth}")
    else:
        print(f"FAILED ({stats.status.value}): {stats.error}")
        print("Final state:")
        print(render_grid(solver.last_grid))
        print(f"Gave up after {stats.iterations} iterations.")
        print(f"Numbers remaining: {sorted(solver.last_grid.remaining_digits())}")
        print(render_candidates(solver.last_grid))

    print("Rule stats:")
    for rule, rule_stats in stats.rule_stats.items():
        print(f"\t{rule}:: Invoked: {rule_stats.invocations} times, "
              f"Invoked w/ no effect: {rule_stats.no_effect} times.")

    if not stats.solved:
        sys.exit(2)


def cmd_batch(args):
    """Handle the batch command."""
    runner = BatchRunner(brute_force=args.brute_force, max_iterations=args.max_iterations)

    try:
        results = runner.run_file(args.file)
    except OSError as e:
        print(f"Error reading {args.file}: {e}")
        sys.exit(1)

    summary = runner.get_summary()

    print("\n" + "=" * 60)
    print("RESULTS:")
    print(f"\tSolved {summary['total_solved']} of {summary['total_puzzles']} puzzles.")
    print(f"\tTotal time was {summary['total_time_seconds']:.4f} seconds.")
    print(f"\tCould not solve the following puzzles: {summary['failed_puzzles']}")
    for status, count in sorted(summary["statuses"].items()):
        print(f"\t  {status}: {count}")
    print("=" * 60)

    if args.output:
        runner.save_results(args.output)
        print(f"Results saved to {args.output}/")

        if not args.no_charts and results:
            print("\nGenerating charts...")
            visualizer = Visualizer(results, args.output)
            for chart in visualizer.generate_all():
                print(f"  - {chart}")


if __name__ == "__main__":
    main()
