"""File-backed persistence for map documents.

Saves are atomic: the document is written to a temporary file in the same
directory and moved into place, so a failed save leaves the previous file
intact. Loads return a brand-new ShapeSet or raise.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from zonemerge.persistence.codec import DecodedMap, decode, encode
from zonemerge.persistence.exceptions import DecodeError
from zonemerge.shapes import ShapeSet
from zonemerge.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MapStore:
    """Reads and writes one map document on disk."""

    path: Path

    def exists(self) -> bool:
        return self.path.is_file()

    def save(
        self,
        shape_set: ShapeSet,
        circle_count: int = 0,
        earned_reward: bool = False,
    ) -> None:
        """Atomically write the encoded document to `path`."""
        document = encode(shape_set, circle_count, earned_reward)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info(
            "Saved map document",
            path=str(self.path),
            features=len(document["features"]),
        )

    def load(self) -> DecodedMap:
        """Read and decode the document at `path`.

        Raises:
            FileNotFoundError: If there is no document at `path`.
            DecodeError: If the document is malformed.
        """
        text = self.path.read_text(encoding="utf-8")
        try:
            decoded = decode(text)
        except DecodeError as exc:
            logger.error(
                "Failed to load map document", path=str(self.path), error=str(exc)
            )
            raise
        logger.info(
            "Loaded map document",
            path=str(self.path),
            shapes=len(decoded.shape_set.circles) + len(decoded.shape_set.regions),
        )
        return decoded
