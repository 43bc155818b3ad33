#!/usr/bin/env python3

import datetime
import logging
import time
from typing import Optional

import pytz

from config import settings
from errors import TotpServiceError
from seed_store import SeedStore
from totp_utils import generate_totp_code

logger = logging.getLogger("log_2fa_cron")


def format_log_line(code: str, now: float) -> str:
    timestamp = datetime.datetime.fromtimestamp(now, pytz.utc).strftime("%Y-%m-%d %H:%M:%S")
    return f"{timestamp} - 2FA Code: {code}"


def main(seed_path: Optional[str] = None, now: Optional[float] = None) -> Optional[str]:
    store = SeedStore(seed_path or settings.SEED_FILE_PATH)
    if now is None:
        now = time.time()

    # 1. Read hex seed
    try:
        hex_seed = store.load()
    except TotpServiceError as e:
        logger.error("Cannot generate 2FA code: %s (%s)", e.message, e.details)
        return None

    # 2. Generate TOTP
    code = generate_totp_code(
        hex_seed,
        period_seconds=settings.TOTP_PERIOD,
        digits=settings.TOTP_DIGITS,
        now=now,
    )

    # 3. Output with UTC timestamp
    line = format_log_line(code, now)
    print(line)
    return line


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    main()
