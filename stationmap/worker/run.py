from __future__ import annotations
import argparse
import logging
import time

from stationmap.config import settings
from stationmap.worker.tasks import REFRESH_ERRORS, recompute_and_cache

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Keep the station cache warm.")
    parser.add_argument("--once", action="store_true", help="refresh once and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)

    while True:
        try:
            result = recompute_and_cache()
            logger.info("[worker] recomputed: %s", result.model_dump())
        except REFRESH_ERRORS + (OSError,):
            logger.exception("[worker] refresh failed")
            if args.once:
                return 1
        if args.once:
            return 0
        time.sleep(settings.WORKER_INTERVAL_SEC)


if __name__ == "__main__":
    raise SystemExit(main())
