"""
Run scripted playthroughs and report the ending distribution.

Usage:
    python -m afterlife.simulation --persona striver --runs 20
    python -m afterlife.simulation --persona all --seed 7 --save-dir simulations
"""

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .personas import PERSONAS
from .runner import run_simulation

logger = logging.getLogger(__name__)

console = Console()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="afterlife-sim",
        description="Play Shadow Afterlife runs with scripted personas",
    )
    parser.add_argument(
        "--persona",
        default="all",
        choices=sorted(PERSONAS) + ["all"],
    )
    parser.add_argument("--runs", type=int, default=10, help="Runs per persona")
    parser.add_argument("--seed", type=int, default=0, help="Base seed; run i uses seed + i")
    parser.add_argument("--weeks", type=int, default=None, help="Override the final week")
    parser.add_argument("--save-dir", type=Path, default=None, help="Write markdown transcripts here")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )

    personas = sorted(PERSONAS) if args.persona == "all" else [args.persona]
    config = {"final_week": args.weeks} if args.weeks else None

    table = Table(title="Ending distribution")
    table.add_column("Persona", style="cyan")
    table.add_column("Ending")
    table.add_column("Runs", justify="right")
    table.add_column("Avg week", justify="right", style="dim")

    for persona in personas:
        endings: Counter[str] = Counter()
        weeks: dict[str, list[int]] = {}

        for i in range(args.runs):
            transcript = run_simulation(
                persona,
                seed=args.seed + i,
                config=config,
                verbose=args.verbose,
            )
            name = transcript.ending_name or "?"
            endings[name] += 1
            weeks.setdefault(name, []).append(transcript.final_week)

            if args.save_dir:
                path = transcript.save(args.save_dir)
                logger.info("Saved transcript: %s", path)

        for name, count in endings.most_common():
            avg_week = sum(weeks[name]) / len(weeks[name])
            table.add_row(PERSONAS[persona]["name"], name, str(count), f"{avg_week:.1f}")

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
