"""Run a single bot cycle from the command line.

For schedulers that prefer launching a process over calling POST /api/v1/cron.
Prints the CycleResult as JSON; exits 1 only if the cycle failed outside its
guarded branches.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from metalpulse.core.llm import close_llm_gateway
from metalpulse.main import configure_logging
from metalpulse.schemas.cycle import CycleErrorResponse, CycleResult
from metalpulse.services.cycle_service import get_cycle_service

logger = logging.getLogger(__name__)


async def _run() -> CycleResult:
    try:
        return await get_cycle_service().run_cycle()
    finally:
        await close_llm_gateway()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run one MetalPulse bot cycle.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    args = parser.parse_args(argv)

    configure_logging()
    try:
        result = asyncio.run(_run())
    except Exception as e:
        logger.exception("Cycle failed outside its guarded branches")
        error = CycleErrorResponse(details=str(e) or type(e).__name__)
        print(json.dumps(error.model_dump(), indent=args.indent))
        return 1

    print(json.dumps(result.model_dump(mode="json"), indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
