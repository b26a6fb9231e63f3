"""Run report generation service."""

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ReportService:
    """Collects per-version outcomes and writes the run report JSON."""

    def __init__(self, report_file: str, logger):
        self.report_file = report_file
        self.logger = logger
        self.report: Dict[str, Any] = {
            "test_name": None,
            "models": [],
            "status": "running",
            "started_at": None,
            "finished_at": None,
            "duration_seconds": None,
            "versions": [],
        }

    def start_run(self, test_name: str, models):
        self.report["test_name"] = test_name
        self.report["models"] = list(models)
        self.report["status"] = "running"
        self.report["started_at"] = self._now()
        self.write()

    def add_result(self, version: str, passed: bool, models=None, error: Optional[str] = None):
        self.report["versions"].append(
            {
                "version": version,
                "status": "passed" if passed else "failed",
                "models": sorted(models or []),
                "error": error,
            }
        )
        self.write()

    def finalize(self):
        failed = any(entry["status"] == "failed" for entry in self.report["versions"])
        self.report["status"] = "failed" if failed else "passed"
        self.report["finished_at"] = self._now()
        if self.report.get("started_at"):
            started_at = datetime.fromisoformat(self.report["started_at"])
            finished_at = datetime.fromisoformat(self.report["finished_at"])
            self.report["duration_seconds"] = (finished_at - started_at).total_seconds()
        self.write()

    def write(self):
        os.makedirs(os.path.dirname(self.report_file) or ".", exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            prefix="run-report-", suffix=".json", dir=os.path.dirname(self.report_file) or "."
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                json.dump(self.report, file_obj, indent=2, sort_keys=True)
                file_obj.write("\n")
            os.replace(temp_path, self.report_file)
        except OSError as exc:
            self.logger.warning("Could not write report file '%s': %s", self.report_file, exc)
            try:
                os.remove(temp_path)
            except OSError:
                pass

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
