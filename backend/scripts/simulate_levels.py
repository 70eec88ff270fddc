#!/usr/bin/env python3
"""Autoplay benchmark for generated levels.

Plays every layout archetype of the advanced tier (and the tutorial) with
both bot strategies and prints clear rates.

Usage:
    python simulate_levels.py [--iterations N] [--seed S] [--output FILE]
"""

import argparse
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from stackmatch.core.autoplay import AutoPlayer, AutoPlayStrategy
from stackmatch.core.generator import LevelGenerator
from stackmatch.models.tile import LayoutArchetype


class ArchetypeGenerator(LevelGenerator):
    """Generator pinned to one layout archetype."""

    def __init__(self, archetype: Optional[LayoutArchetype]):
        super().__init__()
        self.archetype = archetype

    def generate(self, level, seed=None, archetype=None):
        return super().generate(level, seed=seed, archetype=self.archetype)


def run_case(
    label: str,
    level: int,
    archetype: Optional[LayoutArchetype],
    strategy: AutoPlayStrategy,
    iterations: int,
    seed: Optional[int],
) -> Dict[str, Any]:
    player = AutoPlayer(generator=ArchetypeGenerator(archetype))

    start = time.perf_counter()
    result = player.simulate(level, iterations=iterations, strategy=strategy, seed=seed)
    elapsed_ms = (time.perf_counter() - start) * 1000

    row = {"case": label, "level": level, **result.to_dict(), "elapsed_ms": round(elapsed_ms, 1)}
    print(f"  {label:12} {strategy.value:7} clear={result.clear_rate:6.1%} "
          f"moves={result.avg_moves:5.1f} cleared={result.avg_tiles_cleared:5.1f} "
          f"({elapsed_ms:.0f}ms)")
    return row


def main():
    parser = argparse.ArgumentParser(description="Benchmark generated levels with autoplay bots")
    parser.add_argument("--iterations", "-i", type=int, default=100,
                        help="Games per case (default: 100)")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Base seed for reproducible runs")
    parser.add_argument("--output", "-o", type=str, default=None,
                        help="Output file for results (JSON)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show engine debug logs")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )

    cases = [("tutorial", 1, None)] + [
        (archetype.name.lower(), 2, archetype) for archetype in LayoutArchetype
    ]

    print("=" * 60)
    print(f"Autoplay benchmark: {args.iterations} games per case")
    print("=" * 60)

    rows: List[Dict[str, Any]] = []
    for label, level, archetype in cases:
        for strategy in AutoPlayStrategy:
            rows.append(run_case(label, level, archetype, strategy, args.iterations, args.seed))

    report = {
        "created_at": datetime.now().isoformat(),
        "iterations": args.iterations,
        "seed": args.seed,
        "results": rows,
    }

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"\nResults saved to: {output_path}")


if __name__ == "__main__":
    main()
