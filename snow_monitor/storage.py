from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .logging import get_logger
from .models import Snapshot

logger = get_logger(__name__)


class SnapshotStore:
    """Publishes the latest snapshot as ``data.json`` plus the rendered page.

    Both files are written to temporary files in the output directory first
    and moved into place with :func:`os.replace`. If the page cannot be moved,
    the previous ``data.json`` is put back, so the two files never disagree.
    Each publish fully replaces the previous snapshot.
    """

    def __init__(
        self,
        directory: Path | str = Path("docs"),
        *,
        html_name: str = "index.html",
        data_name: str = "data.json",
    ) -> None:
        self.directory = Path(directory)
        self.html_path = self.directory / html_name
        self.data_path = self.directory / data_name

    def _write_temp(self, path: Path, content: str) -> str:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return tmp_name

    def _restore_data(self, previous: Optional[str]) -> None:
        if previous is None:
            self.data_path.unlink(missing_ok=True)
            return
        tmp_name = self._write_temp(self.data_path, previous)
        try:
            os.replace(tmp_name, self.data_path)
        finally:
            Path(tmp_name).unlink(missing_ok=True)

    @staticmethod
    def serialize(snapshot: Snapshot) -> str:
        return json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)

    def publish(self, snapshot: Snapshot, html: str) -> None:
        data = self.serialize(snapshot)
        self.directory.mkdir(parents=True, exist_ok=True)
        temps: List[str] = []
        try:
            temps.append(self._write_temp(self.data_path, data))
            temps.append(self._write_temp(self.html_path, html))
            previous = self.data_path.read_text(encoding="utf-8") if self.data_path.exists() else None
            os.replace(temps[0], self.data_path)
            try:
                os.replace(temps[1], self.html_path)
            except BaseException:
                # page and data must always belong to the same snapshot
                self._restore_data(previous)
                raise
        finally:
            for tmp_name in temps:
                Path(tmp_name).unlink(missing_ok=True)
        logger.info(
            "snapshot.published",
            directory=str(self.directory),
            resorts=len(snapshot.resorts),
            generated_at=snapshot.generated_at.isoformat(),
        )

    def load_latest(self) -> Optional[Dict[str, Any]]:
        if not self.data_path.exists():
            return None
        data: Mapping[str, Any] = json.loads(self.data_path.read_text(encoding="utf-8"))
        return dict(data)
