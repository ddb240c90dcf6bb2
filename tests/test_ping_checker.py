"""Tests for the ping checker and the system ping prober."""

import logging
import subprocess
from unittest.mock import patch

import pytest

from devtools.checks import DependencyStatus, PingChecker, PingResult, SystemPingProber
from devtools.checks.ping import parse_packet_loss


class TestPingChecker:
    """Health classification and error assignment."""

    def test_alive_is_healthy(self, make_prober, alive_result, ping_endpoint):
        checker = PingChecker(make_prober({"10.0.0.5": alive_result}))

        result = checker.check(ping_endpoint)

        assert result.status == DependencyStatus.HEALTHY
        assert result.error is None

    def test_total_loss_uses_output_as_error(self, make_prober, dead_result, ping_endpoint):
        checker = PingChecker(make_prober({"10.0.0.5": dead_result}))

        result = checker.check(ping_endpoint)

        assert result.status == DependencyStatus.UNHEALTHY
        assert result.error == dead_result.output

    def test_total_loss_with_empty_output(self, make_prober, ping_endpoint):
        ping_result = PingResult(alive=False, packet_loss="100.000", output="")
        checker = PingChecker(make_prober({"10.0.0.5": ping_result}))

        result = checker.check(ping_endpoint)

        assert result.error == "10.0.0.5 - Unknown"

    def test_unknown_loss_with_empty_output(self, make_prober, ping_endpoint):
        ping_result = PingResult(alive=False, packet_loss="unknown", output="")
        checker = PingChecker(make_prober({"10.0.0.5": ping_result}))

        result = checker.check(ping_endpoint)

        assert result.status == DependencyStatus.UNHEALTHY
        assert result.error == "10.0.0.5 - Unknown"

    def test_error_condition_is_independent_of_alive(self, make_prober, ping_endpoint):
        ping_result = PingResult(alive=True, packet_loss="100.000", output="odd reply")
        checker = PingChecker(make_prober({"10.0.0.5": ping_result}))

        result = checker.check(ping_endpoint)

        assert result.status == DependencyStatus.HEALTHY
        assert result.error == "odd reply"

    def test_partial_loss_not_alive_has_no_error(self, make_prober, ping_endpoint):
        ping_result = PingResult(alive=False, packet_loss="50.000", output="partial")
        checker = PingChecker(make_prober({"10.0.0.5": ping_result}))

        result = checker.check(ping_endpoint)

        assert result.status == DependencyStatus.UNHEALTHY
        assert result.error is None

    @pytest.mark.parametrize(
        "exc",
        [
            ValueError("잘못된 ping 대상: '-f'"),
            FileNotFoundError("ping"),
            subprocess.TimeoutExpired(cmd="ping", timeout=1),
            RuntimeError("backend crashed"),
        ],
    )
    def test_prober_failure_becomes_unhealthy(self, make_prober, ping_endpoint, exc):
        checker = PingChecker(make_prober({"10.0.0.5": exc}))

        result = checker.check(ping_endpoint)

        assert result.status == DependencyStatus.UNHEALTHY
        assert result.error.startswith("10.0.0.5 - ")

    def test_always_logs_raw_output(self, make_prober, alive_result, ping_endpoint, caplog):
        checker = PingChecker(make_prober({"10.0.0.5": alive_result}))

        with caplog.at_level(logging.INFO):
            checker.check(ping_endpoint)

        infos = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert any(alive_result.output in message for message in infos)
        assert not [r for r in caplog.records if r.levelno == logging.ERROR]


class TestParsePacketLoss:
    @pytest.mark.parametrize(
        "output, expected",
        [
            ("1 packets transmitted, 1 received, 0% packet loss, time 0ms", "0.000"),
            ("1 packets transmitted, 0 packets received, 100.0% packet loss", "100.000"),
            ("Packets: Sent = 1, Received = 0, Lost = 1 (100% loss),", "100.000"),
            ("ping: unknown host nowhere.invalid", "unknown"),
            ("", "unknown"),
        ],
    )
    def test_formats_three_decimals(self, output, expected):
        assert parse_packet_loss(output) == expected


class TestSystemPingProber:
    def test_rejects_option_like_target(self):
        with pytest.raises(ValueError):
            SystemPingProber().build_command("-f")

    def test_rejects_empty_target(self):
        with pytest.raises(ValueError):
            SystemPingProber().build_command("")

    def test_single_probe_command(self):
        command = SystemPingProber().build_command("example.com")

        assert command[0] == "ping"
        assert command[1] in ("-c", "-n")
        assert command[2:] == ["1", "example.com"]

    def test_probe_parses_completed_process(self):
        completed = subprocess.CompletedProcess(
            args=["ping"],
            returncode=0,
            stdout="1 packets transmitted, 1 received, 0% packet loss, time 0ms\n",
            stderr="",
        )
        with patch("devtools.checks.ping.subprocess.run", return_value=completed) as run:
            result = SystemPingProber(timeout=2).probe("example.com")

        assert result.alive is True
        assert result.packet_loss == "0.000"
        assert result.output == completed.stdout
        assert run.call_args.kwargs["timeout"] == 2

    def test_probe_unknown_host(self):
        completed = subprocess.CompletedProcess(
            args=["ping"], returncode=2, stdout="", stderr="ping: nowhere.invalid: Name or service not known"
        )
        with patch("devtools.checks.ping.subprocess.run", return_value=completed):
            result = SystemPingProber().probe("nowhere.invalid")

        assert result == PingResult(alive=False, packet_loss="unknown", output="")
