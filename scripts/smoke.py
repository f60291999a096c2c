# scripts/smoke.py
"""
Smoke Test Script for the shotstream aggregator.

Usage
-----
1. Run the built-in sample stream:
    $ python scripts/smoke.py

2. Run a recorded stream (JSON array or JSON Lines):
    $ python scripts/smoke.py --file runs/bell.jsonl
"""

import argparse
import logging
import sys
from pathlib import Path

from shotstream.cli import load_events
from shotstream.core.contracts.events import make_event
from shotstream.core.events import ManualTimer, ShotEventTarget

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
SAMPLE_EVENTS = [
    make_event("Message", text="Preparing Bell pair"),
    make_event("StateSnapshot", state={"|00⟩": [0.7071, 0.0], "|11⟩": [0.7071, 0.0]}),
    make_event("Result", success=True, value="[Zero, Zero]"),
    make_event("Message", text="Preparing Bell pair"),
    make_event("Result", success=True, value="[One, One]"),
    make_event("Result", success=False, value="qubit released while not in |0⟩ state"),
]


def main() -> None:
    """Execute the smoke workflow."""
    parser = argparse.ArgumentParser(description="Run shotstream smoke test")
    parser.add_argument("--file", "-f", type=str, help="Path to an event stream file")
    args = parser.parse_args()

    if args.file:
        path = Path(args.file)
        if not path.exists():
            print(f"❌ File not found: {path}")
            return
        events = load_events(path)
    else:
        events = SAMPLE_EVENTS

    timer = ManualTimer()
    target = ShotEventTarget(timer=timer, logger=logging.getLogger("shotstream"))
    target.subscribe(
        "ResultsRefresh",
        lambda _ev: print(f"🔄 refresh: {len(target.results())} shot(s)"),
    )

    for event in events:
        target.publish(event)
    timer.advance(target.scheduler.delay)

    print(f"\n✅ {len(events)} events -> {target.result_count()} closed shot(s)")
    for idx, shot in enumerate(target.results(), start=1):
        status = "ok" if shot.success else "failed"
        print(f"  {idx:02d}. [{status}] {shot.result!r} ({len(shot.sub_events)} sub-events)")


if __name__ == "__main__":
    main()
