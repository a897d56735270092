"""Tests for the CLI implementation."""

import json

import pytest
from typer.testing import CliRunner

from metricproxy.cli import app, parse_field_option
from metricproxy.core.model import Field


NODE_STATUS = {"result": {"block": "0x10", "peers": 3, "synced": False}}


class TestCLI:
    """Test the CLI functionality."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def node_url(self, httpserver):
        """URL of a local endpoint serving a node status document."""
        httpserver.expect_request("/status").respond_with_json(NODE_STATUS)
        return httpserver.url_for("/status")

    @pytest.fixture
    def broken_url(self, httpserver):
        """URL of a local endpoint that always fails."""
        httpserver.expect_request("/broken").respond_with_data("down", status=502)
        return httpserver.url_for("/broken")

    @pytest.fixture
    def config_path(self, tmp_path, node_url, broken_url):
        """Config file with one healthy and one failing target."""
        path = tmp_path / "targets.json"
        path.write_text(json.dumps({"targets": [
            {"url": node_url, "fields": [
                {"selector": "result.block", "metric_name": "block"},
                {"selector": "result.missing", "metric_name": "missing"},
            ]},
            {"url": broken_url, "fields": [{"selector": "x", "metric_name": "x"}]},
        ]}), encoding="utf-8")
        return path

    def test_adhoc_url_pretty(self, runner, node_url):
        """Test a single ad-hoc target prints one pretty JSON object."""
        result = runner.invoke(app, [
            "--url", node_url,
            "--field", "result.block=block",
            "--field", "result.synced=synced",
        ])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["url"] == node_url
        assert [r["value"] for r in payload["results"]] == [16.0, 0.0]
        assert [r["metric_name"] for r in payload["results"]] == ["block", "synced"]

    def test_field_error_keeps_exit_code(self, runner, node_url):
        """Test per-field errors are reported but do not fail the run."""
        result = runner.invoke(app, ["--url", node_url, "-f", "result.nope=nope", "-f", "result.peers=peers"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        nope, peers = payload["results"]
        assert nope["success"] is False
        assert "not found" in nope["error"]
        assert peers["value"] == 3.0

    def test_config_file_jsonl(self, runner, config_path):
        """Test a config with several targets prints JSON lines."""
        result = runner.invoke(app, [str(config_path)])

        # one target failed fatally
        assert result.exit_code == 1
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 2
        good, bad = (json.loads(line) for line in lines)
        assert good["success"] is True
        assert good["results"][0]["value"] == 16.0
        assert good["results"][1]["success"] is False
        assert bad["success"] is False
        assert bad["error"] == "unexpected status code: 502"
        assert bad["results"] == []

    def test_config_file_sync(self, runner, config_path):
        """Test --sync produces the same output as the async default."""
        sync_result = runner.invoke(app, ["--sync", str(config_path)])
        async_result = runner.invoke(app, [str(config_path)])

        assert sync_result.exit_code == async_result.exit_code == 1
        assert sync_result.stdout == async_result.stdout

    def test_config_from_stdin(self, runner, node_url):
        """Test '-' reads the configuration from stdin."""
        config = json.dumps([{"url": node_url, "fields": [{"selector": "result.peers", "metric": "peers"}]}])
        result = runner.invoke(app, ["-"], input=config)

        assert result.exit_code == 0
        assert json.loads(result.stdout)["results"][0]["value"] == 3.0

    def test_force_jsonl_single_target(self, runner, node_url):
        """Test --jsonl forces JSON lines even for one target."""
        result = runner.invoke(app, ["--jsonl", "--url", node_url, "-f", "result.peers=peers"])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["results"][0]["value"] == 3.0

    def test_output_file(self, runner, node_url, tmp_path):
        """Test -o writes to a file instead of stdout."""
        out = tmp_path / "out.json"
        result = runner.invoke(app, ["--url", node_url, "-f", "result.peers=peers", "-o", str(out)])

        assert result.exit_code == 0
        assert result.stdout == ""
        assert json.loads(out.read_text())["results"][0]["value"] == 3.0

    def test_post_body(self, runner, httpserver):
        """Test --method and --body are forwarded."""
        httpserver.expect_request("/rpc", method="POST", data='{"id":1}').respond_with_json({"result": "0x2a"})
        result = runner.invoke(app, [
            "--url", httpserver.url_for("/rpc"), "-X", "post", "-d", '{"id":1}', "-f", "result=height",
        ])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["results"][0]["value"] == 42.0

    def test_fatal_single_target(self, runner, broken_url):
        """Test a failed fetch exits with code 1."""
        result = runner.invoke(app, ["--url", broken_url, "--sync"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False

    def test_no_targets(self, runner):
        """Test error when no targets are given."""
        result = runner.invoke(app, [])
        assert result.exit_code == 1

    def test_missing_config_file(self, runner, tmp_path):
        """Test a missing config file is reported."""
        result = runner.invoke(app, [str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_invalid_config(self, runner, tmp_path):
        """Test a malformed config file is reported."""
        path = tmp_path / "bad.json"
        path.write_text('{"targets": [{"method": "GET"}]}', encoding="utf-8")
        result = runner.invoke(app, [str(path)])
        assert result.exit_code == 1

    def test_field_without_url(self, runner):
        """Test --field requires --url."""
        result = runner.invoke(app, ["-f", "a=b"])
        assert result.exit_code == 2

    def test_bad_field_option(self, runner, node_url):
        """Test a --field value without '='."""
        result = runner.invoke(app, ["--url", node_url, "-f", "no-metric-name"])
        assert result.exit_code == 2


class TestParseFieldOption:
    """Test SELECTOR=METRIC parsing."""

    def test_simple(self):
        """Test the basic form."""
        assert parse_field_option("result.peers=peers") == Field("result.peers", "peers")

    def test_last_equals_wins(self):
        """Test selectors containing '=' keep everything before the last one."""
        assert parse_field_option("a=b=c") == Field("a=b", "c")
