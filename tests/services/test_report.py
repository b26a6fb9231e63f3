import json

from gradleharness.services.report import ReportService


class DummyLogger:
    def warning(self, *_args, **_kwargs):
        return None


def test_report_records_each_version(tmp_path):
    report_file = tmp_path / "reports" / "run-report.json"
    service = ReportService(str(report_file), logger=DummyLogger())

    service.start_run("test_external_project", ["ExternalProject"])
    service.add_result("1.9", True, models=["ExternalProject"])
    service.add_result("1.10", False, error="daemon failed")
    service.finalize()

    report = json.loads(report_file.read_text(encoding="utf-8"))
    assert report["test_name"] == "test_external_project"
    assert report["status"] == "failed"
    assert report["versions"][0] == {
        "version": "1.9",
        "status": "passed",
        "models": ["ExternalProject"],
        "error": None,
    }
    assert report["versions"][1]["error"] == "daemon failed"
    assert report["duration_seconds"] >= 0


def test_report_passes_when_every_version_passes(tmp_path):
    report_file = tmp_path / "run-report.json"
    service = ReportService(str(report_file), logger=DummyLogger())

    service.start_run("test_external_project", ["ExternalProject"])
    service.add_result("1.9", True, models=["ExternalProject"])
    service.finalize()

    assert json.loads(report_file.read_text(encoding="utf-8"))["status"] == "passed"
