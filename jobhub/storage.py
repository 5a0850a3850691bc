"""Local key-value store (JSON files) for locally authored jobs and applications."""
from __future__ import annotations

import fcntl
import json
import os
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Any, Iterator

from jobhub.errors import StorageError
from jobhub.log import get_logger
from jobhub.models import ApplicationRecord, Job

log = get_logger(__name__)

JOBS_KEY = "jobs"
APPLICATIONS_KEY = "applications"
KEYS: tuple[str, ...] = (JOBS_KEY, APPLICATIONS_KEY)


@contextmanager
def _locked(path: Path, exclusive: bool = True) -> Iterator[None]:
    """Advisory file lock (Unix fcntl) held on a sidecar ``.lock`` file."""
    with open(path.with_suffix(path.suffix + ".lock"), "a", encoding="utf-8") as lf:
        try:
            fcntl.flock(lf.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
        except OSError:
            pass
        try:
            yield
        finally:
            try:
                fcntl.flock(lf.fileno(), fcntl.LOCK_UN)
            except OSError:
                pass


class LocalStore:
    """Whole-collection reads and writes; no partial update API.

    Each key lives in ``<data_dir>/<key>.json``. A missing file reads as an
    empty list. Writes go to a temp file first so a failed write never
    leaves a truncated collection behind.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def path(self, key: str) -> Path:
        if key not in KEYS:
            raise ValueError(f"Unknown store key: {key!r}")
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> list[dict[str, Any]]:
        path = self.path(key)
        if not path.exists():
            return []
        try:
            with _locked(path, exclusive=False):
                text = path.read_text(encoding="utf-8")
            data = json.loads(text) if text.strip() else []
        except (OSError, ValueError) as exc:
            log.error("Could not read %s: %s", path.name, exc)
            raise StorageError(key, f"unreadable collection ({exc})") from exc
        if not isinstance(data, list):
            raise StorageError(key, f"expected a JSON list, found {type(data).__name__}")
        return data

    def write(self, key: str, items: list[dict[str, Any]]) -> None:
        path = self.path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with _locked(path):
                tmp.write_text(json.dumps(items, indent=2, ensure_ascii=False), encoding="utf-8")
                os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as exc:
            log.error("Could not write %s: %s", path.name, exc)
            with suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(key, f"write failed ({exc})") from exc
        log.debug("Wrote %d item(s) → %s", len(items), path.name)

    # ── typed views ──────────────────────────────────────────────────────

    def load_jobs(self) -> list[Job]:
        try:
            return [Job.from_dict(d) for d in self.read(JOBS_KEY)]
        except (KeyError, TypeError, AttributeError) as exc:
            raise StorageError(JOBS_KEY, f"malformed job entry ({exc})") from exc

    def save_jobs(self, jobs: list[Job]) -> None:
        self.write(JOBS_KEY, [j.to_dict() for j in jobs])

    def load_applications(self) -> list[ApplicationRecord]:
        try:
            return [ApplicationRecord.from_dict(d) for d in self.read(APPLICATIONS_KEY)]
        except (KeyError, TypeError, AttributeError) as exc:
            raise StorageError(APPLICATIONS_KEY, f"malformed application entry ({exc})") from exc

    def save_applications(self, records: list[ApplicationRecord]) -> None:
        self.write(APPLICATIONS_KEY, [r.to_dict() for r in records])
