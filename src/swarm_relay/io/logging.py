from __future__ import annotations
import csv, json, time, threading, queue, pathlib, datetime
from typing import Dict, Optional

import pandas as pd

class RunLogger:
    """Per-frame run logger for headless swarm runs.

    Frames (nested dicts such as ``{"tick": 3, "stats": {...}}``) are queued
    by the stepping thread and a background writer appends them to
    ``<root>/<run_id>/frames.csv``, nested keys joined with dots. ``meta.json``
    holds the run id, creation time and whatever ``meta`` the caller passes
    (the driver stores the SwarmConfig there).
    """
    def __init__(self, root: str = "runs", run_id: Optional[str] = None, meta: Optional[Dict] = None):
        self.run_id = run_id or datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        self.dir = pathlib.Path(root) / self.run_id
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "frames.csv"
        self.meta_path = self.dir / "meta.json"
        self._frames: "queue.Queue[dict]" = queue.Queue()
        self._writer: Optional[threading.Thread] = None
        self._done = threading.Event()
        self._columns: Optional[list[str]] = None
        self.rows_queued = 0
        self.rows_written = 0
        self.meta_path.write_text(json.dumps({"run_id": self.run_id, "created": time.time(), **(meta or {})},
                                             indent=2, default=list))

    @property
    def rows_pending(self) -> int:
        return self.rows_queued - self.rows_written

    def start(self) -> None:
        self._done.clear()
        self._writer = threading.Thread(target=self._writer_loop, name=f"run-logger-{self.run_id}", daemon=True)
        self._writer.start()

    def stop(self, timeout: Optional[float] = None) -> int:
        """Signal the writer to drain and wait for it. Returns rows still unwritten (0 unless timed out)."""
        self._done.set()
        if self._writer: self._writer.join(timeout=timeout)
        return self.rows_pending

    def __enter__(self) -> "RunLogger":
        self.start(); return self

    def __exit__(self, *exc) -> None:
        self.stop()

    def log(self, frame: Dict) -> None:
        """Enqueue a frame dict."""
        self.rows_queued += 1
        self._frames.put(frame)

    def read_frames(self) -> pd.DataFrame:
        return pd.read_csv(self.csv_path)

    # ---- internals ---------------------------------------------------------
    def _flatten(self, frame: Dict, prefix: str = "") -> Dict[str, object]:
        out: Dict[str, object] = {}
        for k, v in frame.items():
            key = f"{prefix}{k}"
            if isinstance(v, dict):
                out.update(self._flatten(v, prefix=f"{key}."))
            elif isinstance(v, (int, float, str, bool)) or v is None:
                out[key] = v
        return out

    def _widen(self, f, fieldnames: list[str]):
        """Rewrite the CSV with extra (empty) columns; returns a fresh append handle."""
        if f: f.close()
        df = pd.read_csv(self.csv_path)
        for missing in [k for k in fieldnames if k not in df.columns]:
            df[missing] = None
        df = df[fieldnames]
        df.to_csv(self.csv_path, index=False)
        return open(self.csv_path, "a", newline="", encoding="utf-8")

    def _writer_loop(self) -> None:
        f = None; writer = None
        try:
            while not (self._done.is_set() and self._frames.empty()):
                try:
                    flat = self._flatten(self._frames.get(timeout=0.2))
                except queue.Empty:
                    continue
                if self._columns is None:
                    self._columns = sorted(flat)
                    f = open(self.csv_path, "w", newline="", encoding="utf-8")
                    writer = csv.DictWriter(f, fieldnames=self._columns)
                    writer.writeheader()
                elif not flat.keys() <= set(self._columns):
                    self._columns = sorted(set(self._columns) | flat.keys())
                    f = self._widen(f, self._columns)
                    writer = csv.DictWriter(f, fieldnames=self._columns)
                writer.writerow({k: flat.get(k) for k in self._columns})
                f.flush()
                self.rows_written += 1
        finally:
            if f: f.close()
