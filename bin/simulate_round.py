"""Play one simulated hide and seek round and print the result.

Usage: python bin/simulate_round.py --players 4 --seekers 1 --duration 30

Settings (catch distance, tick interval, log directory) come from
HIDESEEK_* environment variables.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from hideseek.server.settings import GameServerSettings
from hideseek.server.simulate import run_simulation
from shared.logging import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Play one simulated hide and seek round")
    parser.add_argument("--players", type=int, default=4, help="Total players including the host (default: 4)")
    parser.add_argument("--seekers", type=int, default=1, help="Number of seekers (default: 1)")
    parser.add_argument("--duration", type=float, default=None, help="Round length in seconds")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulated movement")
    parser.add_argument("--log-to-file", action="store_true", help="Also write logs to the configured log dir")
    args = parser.parse_args()

    settings = GameServerSettings()
    setup_logging(log_dir=settings.log_dir if args.log_to_file else None)

    try:
        snapshot = asyncio.run(
            run_simulation(
                settings,
                num_players=args.players,
                num_seekers=args.seekers,
                duration=args.duration,
                seed=args.seed,
            ),
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = snapshot.result.value if snapshot.result is not None else "none"
    print(f"Result: {result}")
    print(f"Caught: {len(snapshot.caught_ids)}/{snapshot.runner_count}")
    print(f"Elapsed: {snapshot.elapsed_seconds or 0:.1f}s")


if __name__ == "__main__":
    main()
