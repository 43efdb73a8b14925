#!/usr/bin/env python3
"""
File-backed status channel for decoupling the viewer daemon and web preview.
"""

import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from issue_source import RepositoryCounts


class FileStatusChannel:
    """
    JSON file the daemon writes after every cycle and the web preview reads.
    Writes are atomic (temp file + rename) so the reader never sees partial data.
    """

    def __init__(self, status_path: str = "run_state/status.json"):
        self.status_path = Path(status_path)
        self.status_path.parent.mkdir(parents=True, exist_ok=True)

    def _atomic_write(self, path: Path, payload: Dict[str, Any]):
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, separators=(",", ":"))
        tmp_path.replace(path)

    def read_status(self) -> Optional[Dict[str, Any]]:
        if not self.status_path.exists():
            return None
        try:
            with self.status_path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            print(f"⚠️ Failed to read status file {self.status_path}: {exc}", file=sys.stderr)
            return None

    def write_status(self, payload: Dict[str, Any]):
        payload = dict(payload)
        payload.setdefault("updated_at", time.time())
        self._atomic_write(self.status_path, payload)

    def record_cycle(self, display, columns_used: int,
                     counts: Iterable[RepositoryCounts] = (),
                     error: Optional[str] = None):
        """Snapshot the frame on the panel and the cycle outcome"""
        frame: List[List[List[int]]] = [[list(pixel) for pixel in row] for row in display.shown_rows()]
        self.write_status({
            "grid": {"width": display.width, "height": display.height},
            "frame": frame,
            "columns_used": columns_used,
            "repositories": [
                {
                    "repository": c.repository,
                    "open": c.open,
                    "closed": c.closed,
                    "merged": c.merged,
                    "assigned": c.assigned,
                }
                for c in counts
            ],
            "last_error": error,
        })
