import os
from typing import Mapping, Optional

from coalescer.logging import LEVELS
from coalescer.validation import check_option

LOG_LEVEL_VAR = "COALESCER_LOG_LEVEL"


def get_log_level(environ: Mapping[str, str] = os.environ) -> Optional[str]:
    return (
        check_option(
            LOG_LEVEL_VAR, environ.get(LOG_LEVEL_VAR), LEVELS, ignore_list=[None, ""]
        )
        or None
    )


LOG_LEVEL = get_log_level()
"""
Level of the ``coalescer`` package logger, read from environment variable ``COALESCER_LOG_LEVEL``. One of 'DEBUG', 'INFO', 'WARNING', 'ERROR' or 'CRITICAL'. Defaults to ``None`` (level left unchanged).
"""
