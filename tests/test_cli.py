"""Tests for the command-line interface."""

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from readiness_verdict import __version__
from readiness_verdict.cli import main
from readiness_verdict.cli.main import EXIT_LOAD_ERROR, cli

CLEAN_ENV = {
    "PRC_TARGET_CAPACITY": None,
    "PRC_BASELINE_CAPACITY": None,
    "PRC_TEST_COVERAGE": None,
    "PRC_TOTAL_PHASES": None,
}

PHASES = [
    "static_analysis",
    "database_simulation",
    "security_audit",
    "performance_analysis",
    "configuration_audit",
]


def make_finding(message, severity="LOW", category="NATIVE", id="F-001"):
    return {
        "id": id,
        "status": "FAIL",
        "severity": severity,
        "category": category,
        "message": message,
    }


def write_document(path, status="PASS", findings=None):
    phases = {phase_id: {"status": status} for phase_id in PHASES}
    phases["security_audit"]["results"] = list(findings or [])
    Path(path).write_text(yaml.safe_dump({"phases": phases, "critical_issues": []}))
    return path


def sql_injection_document(path):
    return write_document(path, status="FAIL", findings=[
        make_finding("SQL injection in attendance query", severity="CRITICAL",
                     category="SECURITY", id="SEC-1"),
    ])


class TestEvaluateCommand:
    """Tests for the evaluate command."""

    def test_clean_run_is_go(self):
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            write_document("run.yaml")
            result = runner.invoke(cli, ["evaluate", "run.yaml", "--target-capacity", "120"])

        assert result.exit_code == 0, result.output
        assert "GO" in result.output
        assert "System Health" in result.output

    def test_blocker_exits_nonzero(self):
        """Test that a NO_GO recommendation fails the command."""
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            sql_injection_document("run.yaml")
            result = runner.invoke(cli, ["evaluate", "run.yaml"])

        assert result.exit_code == 1
        assert "NO_GO" in result.output
        assert "SEC-1" in result.output

    def test_no_fail(self):
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            sql_injection_document("run.yaml")
            result = runner.invoke(cli, ["evaluate", "run.yaml", "--no-fail"])

        assert result.exit_code == 0
        assert "NO_GO" in result.output

    def test_malformed_document(self):
        """Test that a document that is not a mapping is a load error."""
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            Path("run.yaml").write_text("- one\n- two\n")
            result = runner.invoke(cli, ["evaluate", "run.yaml"])

        assert result.exit_code == EXIT_LOAD_ERROR
        assert "Error" in result.output

    def test_unknown_phase(self):
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            Path("run.yaml").write_text(yaml.safe_dump({"phases": {"device_testing": {"status": "PASS"}}}))
            result = runner.invoke(cli, ["evaluate", "run.yaml"])

        assert result.exit_code == EXIT_LOAD_ERROR

    def test_phases_as_list(self):
        """Test that a list under phases is a load error, not a crash."""
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            Path("run.yaml").write_text("phases:\n  - static_analysis\n")
            result = runner.invoke(cli, ["evaluate", "run.yaml"])

        assert result.exit_code == EXIT_LOAD_ERROR
        assert "must be a mapping" in result.output

    def test_null_message(self):
        """Test that a finding with a null message is evaluated."""
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            Path("run.yaml").write_text(yaml.safe_dump({"phases": {
                "performance_analysis": {
                    "status": "CONDITIONAL",
                    "results": [{"id": "P-1", "severity": "LOW", "category": "PERFORMANCE",
                                 "message": None}],
                },
            }}))
            result = runner.invoke(cli, ["evaluate", "run.yaml", "--no-fail"])

        assert result.exception is None, result.output
        assert result.exit_code == 0

    def test_invalid_option_value(self):
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            write_document("run.yaml")
            result = runner.invoke(cli, ["evaluate", "run.yaml", "--target-capacity", "0"])

        assert result.exit_code == EXIT_LOAD_ERROR

    def test_config_file_and_env(self):
        """Test that the environment overrides the config file."""
        runner = CliRunner(env={**CLEAN_ENV, "PRC_TARGET_CAPACITY": "120"})
        with runner.isolated_filesystem():
            write_document("run.yaml")
            Path("prv.yaml").write_text("target_concurrent_users: 500\n")
            result = runner.invoke(cli, ["evaluate", "run.yaml", "--config", "prv.yaml"])

        assert result.exit_code == 0, result.output

    def test_output_report(self):
        """Test writing the JSON report."""
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            sql_injection_document("run.yaml")
            result = runner.invoke(cli, [
                "evaluate", "run.yaml", "--output", "reports", "--name", "field app", "--no-fail",
            ])

            reports = list(Path("reports").glob("prv_report_field_app_*.json"))
            assert len(reports) == 1
            report = json.loads(reports[0].read_text())

        assert result.exit_code == 0
        assert report["summary"]["recommendation"] == "NO_GO"
        assert report["metadata"]["config"]["target_concurrent_users"] == 150


class TestClassifyCommand:
    """Tests for the classify command."""

    def test_classify(self, monkeypatch):
        monkeypatch.setattr(main.console, "width", 200)
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            write_document("run.yaml", status="FAIL", findings=[
                make_finding("SQL injection in login", severity="CRITICAL", category="SECURITY", id="SEC-1"),
                make_finding("Logging gap", id="LOG-1"),
            ])
            result = runner.invoke(cli, ["classify", "run.yaml", "--priority", "critical"])

        assert result.exit_code == 0
        assert "SEC-1" in result.output
        assert "LOG-1" not in result.output
        assert "Severity" in result.output

    def test_classify_null_message(self):
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            write_document("run.yaml", status="FAIL", findings=[
                {"id": "SEC-2", "severity": "HIGH", "category": "SECURITY", "message": None},
            ])
            result = runner.invoke(cli, ["classify", "run.yaml"])

        assert result.exception is None, result.output
        assert result.exit_code == 0

    def test_classify_empty(self):
        runner = CliRunner(env=CLEAN_ENV)
        with runner.isolated_filesystem():
            write_document("run.yaml")
            result = runner.invoke(cli, ["classify", "run.yaml"])

        assert result.exit_code == 0
        assert "No issues found matching criteria." in result.output


class TestConfigCommand:
    """Tests for the config command."""

    def test_shows_settings(self):
        runner = CliRunner(env={**CLEAN_ENV, "PRC_TEST_COVERAGE": "80"})
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "target_concurrent_users" in result.output
        assert "PRC_TARGET_CAPACITY" in result.output
        assert "80.0" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
