"""
Payment Proof Storage

Keeps uploaded payment-proof files on local disk under the configured
upload directory. Files are written before the database row that points at
them, so a stored registration always has its file.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentProofUpload:
    """An uploaded file as received from the client."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class PaymentProofStore:
    """Reads and writes payment-proof files in one directory."""

    def __init__(self, upload_dir: Path | str):
        self.upload_dir = Path(upload_dir).resolve()

    def _write(self, filename: str, content: bytes) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / filename
        path.write_bytes(content)
        return path

    async def save(self, filename: str, content: bytes) -> Path:
        """
        Write a file and return its absolute path.

        Args:
            filename: Storage filename (already derived from the registration id)
            content: File bytes

        Raises:
            OSError: If the file cannot be written
        """
        path = await asyncio.to_thread(self._write, filename, content)
        logger.info(f"Stored payment proof {path.name} ({len(content)} bytes)")
        return path

    async def discard(self, path: Path | str) -> None:
        """Remove a stored file, logging rather than raising on failure."""
        try:
            await asyncio.to_thread(Path(path).unlink, True)
            logger.info(f"Removed orphaned payment proof {Path(path).name}")
        except OSError as e:
            logger.error(f"Could not remove orphaned payment proof {path}: {e}")

    def exists(self, path: Path | str) -> bool:
        return Path(path).is_file()
