#!/usr/bin/env python3
"""
Strategy Chain - Run ordered extraction strategies until one produces a result

Each strategy is a (name, function) pair. A strategy that raises counts as "no
result" so one broken heuristic never aborts the page.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Strategy = Tuple[str, Callable[..., Any]]


def run_strategies(label: str, strategies: Sequence[Strategy], *args) -> Optional[Any]:
    """
    Invoke strategies in priority order

    Args:
        label: Field name for log messages (e.g. 'title')
        strategies: Ordered (name, function) pairs
        *args: Passed to every strategy

    Returns:
        First non-empty result, or None when every strategy came up empty
    """
    for name, strategy in strategies:
        try:
            result = strategy(*args)
        except Exception as e:
            logger.warning(f"{label}: strategy '{name}' failed: {e}", exc_info=True)
            continue

        if result:
            logger.debug(f"{label}: found using strategy '{name}'")
            return result

    logger.debug(f"{label}: no strategy produced a result")
    return None
