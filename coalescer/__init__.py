import logging

from coalescer.environ import LOG_LEVEL

if LOG_LEVEL:
    logging.getLogger(__name__).setLevel(LOG_LEVEL)

from coalescer.runner import Coalescer, coalesce

__all__ = ["Coalescer", "coalesce"]
