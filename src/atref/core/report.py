from __future__ import annotations

"""
Runtime report for folder compilation runs.

Stages timed by the orchestrator:
- discover: markdown file discovery
- graph: dependency graph construction
- sort: topological ordering and cycle detection
- compile: recursive compilation of every document
- write: writing compiled documents to the output tree
"""

import json
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class RunReport:
    started_at: float = field(default_factory=time.perf_counter)
    finished_at: float | None = None
    duration_s: float | None = None

    documents: int = 0
    documents_written: int = 0
    references_total: int = 0
    references_failed: int = 0
    duplicates: int = 0

    time_by_stage: Dict[str, float] = field(
        default_factory=lambda: {
            "discover": 0.0,
            "graph": 0.0,
            "sort": 0.0,
            "compile": 0.0,
            "write": 0.0,
        }
    )

    root: Optional[str] = None
    output_dir: Optional[str] = None
    cyclic_documents: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def add_time(self, stage: str, seconds: float) -> None:
        self.time_by_stage[stage] = self.time_by_stage.get(stage, 0.0) + seconds

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def finish(self) -> None:
        self.finished_at = time.perf_counter()
        self.duration_s = self.finished_at - self.started_at

    def to_dict(self) -> Dict[str, object]:
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "duration_s": self.duration_s,
            "documents": self.documents,
            "documents_written": self.documents_written,
            "references_total": self.references_total,
            "references_failed": self.references_failed,
            "duplicates": self.duplicates,
            "time_by_stage": self.time_by_stage,
            "root": self.root,
            "output_dir": self.output_dir,
            "cyclic_documents": self.cyclic_documents,
            "errors": self.errors,
        }

    def to_json(self, *, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class StageTimer:
    def __init__(self, report: RunReport, stage: str):
        self._report = report
        self._stage = stage
        self._t0: float | None = None

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._t0 is not None:
            self._report.add_time(self._stage, time.perf_counter() - self._t0)
        return False
