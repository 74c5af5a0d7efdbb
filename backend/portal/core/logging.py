# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Logging setup shared by the API process and migration scripts
"""
import logging
import sys

from portal.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure the root logger once with a single stream handler"""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # Avoid duplicate handlers when the app factory runs more than once
    if any(getattr(h, "_portal_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._portal_handler = True
    root.addHandler(handler)

    # SQL echo is controlled by DATABASE_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
