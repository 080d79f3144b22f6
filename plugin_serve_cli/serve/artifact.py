"""Locate the built plugin artifact under the build output directory."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..config import ARTIFACT_DEPTH, ARTIFACT_EXTENSION, ARTIFACT_ROOT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """A build output file to be served."""

    path: Path

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def name(self) -> str:
        return self.path.name


def find_artifacts(
    root: Union[str, Path] = ARTIFACT_ROOT,
    depth: int = ARTIFACT_DEPTH,
    extension: str = ARTIFACT_EXTENSION,
) -> List[Path]:
    """Return files exactly ``depth`` levels below ``root`` ending in ``extension``.

    ``root/a/b/plugin.wasm`` is at depth 3. Results are sorted by path so the
    choice between several matches does not depend on filesystem order.
    """
    root = Path(root)
    if depth < 1:
        raise ValueError(f"depth must be at least 1, got {depth}")
    if not root.is_dir():
        return []

    pattern = "*/" * (depth - 1) + f"*{extension}"
    return sorted(p for p in root.glob(pattern) if p.is_file())


def find_artifact(
    root: Union[str, Path] = ARTIFACT_ROOT,
    depth: int = ARTIFACT_DEPTH,
    extension: str = ARTIFACT_EXTENSION,
) -> Optional[Artifact]:
    """Return the artifact to serve, or None if nothing matched."""
    matches = find_artifacts(root, depth, extension)
    if not matches:
        logger.debug("No *%s found %d levels below %s", extension, depth, root)
        return None

    if len(matches) > 1:
        logger.warning(
            "Found %d *%s artifacts under %s, serving %s",
            len(matches), extension, root, matches[0],
        )
    return Artifact(matches[0])
