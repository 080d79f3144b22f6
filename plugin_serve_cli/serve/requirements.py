"""Check that the external tools `serve` shells out to are installed."""

import logging
import shutil
from typing import Callable, Iterable, Optional, Tuple

from ..config import REQUIRED_TOOLS
from ..exceptions import MissingToolError

logger = logging.getLogger(__name__)


def check_requirements(
    tools: Iterable[Tuple[str, Optional[str]]] = REQUIRED_TOOLS,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> None:
    """Raise MissingToolError for the first tool not found on PATH."""
    for name, hint in tools:
        location = which(name)
        if not location:
            raise MissingToolError(name, hint)
        logger.debug("Found %s at %s", name, location)
