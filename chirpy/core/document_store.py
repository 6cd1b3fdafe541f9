"""
File-backed document store.

The whole document is loaded on every access and rewritten in full on
every mutation. Writes go to a temp file in the same directory and are
moved over the target, so a crash mid-write leaves the previous document
intact.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models.document import Document
from ..utils.exceptions import DocumentDecodeError, DocumentEncodeError, StorageError
from ..utils.logger import get_logger
from .guard import TransactionGuard

logger = get_logger(__name__)


class DocumentStore:
    """Persistent document plus the transaction discipline around it"""

    def __init__(self, path: Union[str, Path], guard: Optional[TransactionGuard] = None):
        self.path = Path(path)
        self.guard = guard or TransactionGuard()
        self._init_lock = threading.Lock()
        self.ensure()

    def ensure(self) -> None:
        """Create the store with an empty document if it does not exist yet."""
        with self._init_lock:
            if self.path.exists():
                return
            logger.info("Creating document store", path=str(self.path))
            self.replace(Document())

    def load(self) -> Document:
        """Read and validate the whole document. Caller must hold the guard."""
        if not self.path.exists():
            self.ensure()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Failed to read document", path=str(self.path), error=str(e))
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        try:
            return Document.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error("Failed to decode document", path=str(self.path), error=str(e))
            raise DocumentDecodeError(f"Invalid document in {self.path}: {e}") from e

    def replace(self, document: Document) -> None:
        """Atomically overwrite the stored document. Caller must hold the guard."""
        try:
            payload = document.model_dump(mode="json")
            data = json.dumps(payload, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Failed to encode document", error=str(e))
            raise DocumentEncodeError(f"Failed to encode document: {e}") from e

        dir_path = self.path.parent
        temp_path = None
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w", dir=str(dir_path), delete=False, encoding="utf-8",
                prefix=f".{self.path.name}.", suffix=".tmp",
            ) as tf:
                temp_path = Path(tf.name)
                tf.write(data)
                tf.flush()
                os.fsync(tf.fileno())
        except OSError as e:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            logger.error("Failed to write document", path=str(self.path), error=str(e))
            raise StorageError(f"Failed to write {self.path}: {e}") from e

        try:
            # Atomic replace on the same filesystem
            os.replace(str(temp_path), str(self.path))
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            logger.error("Failed to replace document", path=str(self.path), error=str(e))
            raise StorageError(f"Failed to save document to {self.path}: {e}") from e

    @contextmanager
    def read(self) -> Generator[Document, None, None]:
        """Snapshot of the document under the shared guard."""
        with self.guard.shared():
            yield self.load()

    @contextmanager
    def transaction(self) -> Generator[Document, None, None]:
        """
        Exclusive read-modify-write unit.

        The yielded document is written back when the block exits normally.
        If the block raises, nothing is written.
        """
        with self.guard.exclusive():
            document = self.load()
            yield document
            self.replace(document)
