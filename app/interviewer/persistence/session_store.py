"""
Purpose: Interview session storage behind the SessionRepository protocol.
Why: The controller stays stateless between requests; a session can be
reloaded, resumed, or inspected.

What is inside:
- InMemorySessionStore: keeps the serialized JSON text per session id.
- JSONFileSessionStore: one `<session_id>.json` file per session.

Both apply whole-record replace on put(): a reader sees either the old or the
new record, never a mix. Records go through dump_session/load_session, so a
corrupt record is rejected with SessionPayloadError instead of being guessed at.

Testing:
In-memory: simple state tests.
File: tmp_path fixture; round trip and corrupt-file rejection.
"""

from __future__ import annotations
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

import structlog

from ..errors import ValidationError
from ..models import InterviewSession
from ..session_state import dump_session, load_session

logger = structlog.get_logger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class InMemorySessionStore:
    def __init__(self) -> None:
        self._records: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[InterviewSession]:
        with self._lock:
            payload = self._records.get(session_id)
        return load_session(payload) if payload is not None else None

    def put(self, session_id: str, session: InterviewSession) -> None:
        payload = dump_session(session)
        with self._lock:
            self._records[session_id] = payload

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._records.pop(session_id, None)

    def reset(self) -> None:
        with self._lock:
            self._records = {}


class JSONFileSessionStore:
    def __init__(self, storage_dir: Union[str, Path] = "data/sessions"):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        if not _SAFE_ID.match(session_id or ""):
            raise ValidationError(f"Invalid session id: {session_id!r}")
        return self.storage_dir / f"{session_id}.json"

    def get(self, session_id: str) -> Optional[InterviewSession]:
        path = self._path(session_id)
        if not path.exists():
            return None
        return load_session(path.read_text(encoding="utf-8"))

    def put(self, session_id: str, session: InterviewSession) -> None:
        path = self._path(session_id)
        fd, tmp = tempfile.mkstemp(
            prefix=f".{session_id}.", suffix=".tmp", dir=self.storage_dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                file.write(dump_session(session))
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug("session_saved", session_id=session_id, path=str(path))

    def delete(self, session_id: str) -> None:
        path = self._path(session_id)
        if path.exists():
            path.unlink()
