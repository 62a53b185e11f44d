#!/usr/bin/env python3
"""
scripts/run_atm_simulation.py
ATM Simulation Script

목표:
- 이벤트 시퀀스를 State Machine에 순서대로 적용
- 각 step의 phase / cash_inside 출력
- journal 기록 (설정된 경우)

실행:
    python scripts/run_atm_simulation.py --cash 10 --fingerprint passthrough \\
        --events "swipe:1234 1 2 3 4 enter 1 enter"
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from atm_machine.application.atm import AtmMachine
from atm_machine.application.event_parser import parse_events, EventParseError
from atm_machine.application.session_runner import AtmSessionRunner
from atm_machine.domain.credentials import resolve_fingerprint
from atm_machine.domain.state import SessionState
from atm_machine.infrastructure.config import load_config, AtmConfigError
from atm_machine.infrastructure.hardware import FakeCashDispenser
from atm_machine.infrastructure.storage.journal_storage import JournalStorage

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run an ATM session simulation")
    parser.add_argument("--events", required=True,
                        help='Event tokens, e.g. "swipe:1234 1 2 enter"')
    parser.add_argument("--cash", type=int, default=None,
                        help="Initial cash inside (overrides config)")
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML config path (default: config/atm.yaml if present)")
    parser.add_argument("--journal-dir", type=Path, default=None,
                        help="Journal directory (overrides config)")
    parser.add_argument("--fingerprint", choices=["sha1", "passthrough"], default=None,
                        help="PIN verification fingerprint (overrides config)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except AtmConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        events = parse_events(args.events)
    except EventParseError as e:
        logger.error(f"Invalid events: {e}")
        return 2

    initial_cash = args.cash if args.cash is not None else config.initial_cash
    if initial_cash < 0:
        logger.error(f"Initial cash must be non-negative: {initial_cash}")
        return 2

    fingerprint_name = args.fingerprint or config.fingerprint
    journal_dir = args.journal_dir or config.journal_dir
    journal = JournalStorage(log_dir=journal_dir) if journal_dir else None
    dispenser = FakeCashDispenser()

    runner = AtmSessionRunner(
        machine=AtmMachine(fingerprint=resolve_fingerprint(fingerprint_name)),
        initial_state=SessionState.initial(initial_cash),
        dispenser=dispenser,
        journal=journal,
    )

    try:
        for i, result in enumerate(runner.handle_all(events), start=1):
            code = result.intents.log_intent.code if result.intents.log_intent else "no_op"
            print(
                f"[{i:02d}] {result.state.phase.name:<15} "
                f"cash={result.state.cash_inside:<8} {code}"
            )
    finally:
        if journal is not None:
            journal.close()

    logger.info("=" * 60)
    logger.info(f"Final phase: {runner.state.phase.name}")
    logger.info(f"Cash inside: {initial_cash} → {runner.state.cash_inside}")
    logger.info(f"Dispensed total: {dispenser.total_dispensed}")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
