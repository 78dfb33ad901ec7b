"""Tests for the gps-stream command line entry point."""

import io
import json
from unittest.mock import patch

import pytest
import serial

from gps_stream import __main__ as cli
from gps_stream.gps_core.parsers import build_sentence
from gps_stream.gps_core.reader import GPSReader


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    """Keep main() away from the root logger and process signal handlers."""
    monkeypatch.setattr(cli, "setup_cli_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "install_signal_handlers", lambda on_signal: None)


def output_lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]


class TestArgumentParsing:

    def test_flags_override_config(self):
        args = cli.parse_args([
            "--port", "/dev/ttyUSB0",
            "--baud-rate", "4800",
            "--no-checksum",
            "--strict-terminator",
            "--sentences", "RMC,GGA",
            "--max-sentence-length", "96",
            "--fail-fast",
            "--log-level", "debug",
        ])

        config = cli.load_config(args)

        assert config.serial_port == "/dev/ttyUSB0"
        assert config.baud_rate == 4800
        assert config.require_checksum is False
        assert config.allow_bare_lf is False
        assert config.sentence_filter() == {"RMC", "GGA"}
        assert config.max_sentence_length == 96
        assert config.skip_errors is False
        assert config.log_level == "debug"

    def test_unset_flags_keep_config(self):
        config = cli.load_config(cli.parse_args([]))

        assert config.baud_rate == 9600
        assert config.require_checksum is True
        assert config.allow_bare_lf is True
        assert config.skip_errors is True

    def test_config_file(self, tmp_path):
        path = tmp_path / "config.txt"
        path.write_text("baud_rate = 38400\n")

        config = cli.load_config(cli.parse_args(["--config", str(path)]))

        assert config.baud_rate == 38400

    @pytest.mark.parametrize(
        "argv",
        [
            ["--baud-rate", "0"],
            ["--baud-rate", "fast"],
            ["--log-level", "loud"],
            ["--max-sentence-length", "5"],
        ],
    )
    def test_invalid_arguments(self, argv):
        with pytest.raises(SystemExit):
            cli.parse_args(argv)


class TestMain:

    def test_replay_prints_json_lines(self, nmea_capture, capsys):
        assert cli.main(["--replay", str(nmea_capture)]) == cli.EXIT_OK

        lines = output_lines(capsys)
        assert [line["tag"] for line in lines] == ["GPGGA", "GPRMC", "GPVTG", "GPGSA"]
        assert lines[1]["date"] == "1994-03-23"

    def test_sentence_filter(self, nmea_capture, capsys):
        assert cli.main(["--replay", str(nmea_capture), "--sentences", "RMC"]) == cli.EXIT_OK

        assert [line["tag"] for line in output_lines(capsys)] == ["GPRMC"]

    def test_summary(self, nmea_capture, capsys):
        assert cli.main(["--replay", str(nmea_capture), "--summary", "--chunk-size", "5"]) == cli.EXIT_OK

        lines = output_lines(capsys)
        assert len(lines) == 1
        assert lines[0]["latitude"] == pytest.approx(48.1173, abs=1e-4)
        assert lines[0]["fix_mode"] == "3D"
        assert lines[0]["has_position"] is True

    def test_errors_skipped_by_default(self, tmp_path, rmc_sentence, capsys):
        path = tmp_path / "bad.nmea"
        path.write_bytes(rmc_sentence.replace(b"*6A", b"*00") + build_sentence("GPTXT,01,01,02,ANTENNA OK"))

        assert cli.main(["--replay", str(path)]) == cli.EXIT_OK

        assert [line["tag"] for line in output_lines(capsys)] == ["GPTXT"]

    def test_fail_fast(self, tmp_path, rmc_sentence):
        path = tmp_path / "bad.nmea"
        path.write_bytes(rmc_sentence.replace(b"*6A", b"*00"))

        assert cli.main(["--replay", str(path), "--fail-fast"]) == cli.EXIT_STREAM_ERROR

    def test_missing_replay_file(self, tmp_path):
        assert cli.main(["--replay", str(tmp_path / "missing.nmea")]) == cli.EXIT_PORT_ERROR

    def test_port_open_failure(self):
        with patch(
            "gps_stream.gps_core.transports.serial_source.serial.Serial",
            side_effect=serial.SerialException("could not open port /dev/ttyNOPE"),
        ):
            assert cli.main(["--port", "/dev/ttyNOPE"]) == cli.EXIT_PORT_ERROR

    @pytest.mark.parametrize("setting", ["max_sentence_length = 4", "read_size = 0"])
    def test_invalid_config_file(self, tmp_path, nmea_capture, setting, capsys):
        path = tmp_path / "config.txt"
        path.write_text(setting + "\n")

        assert cli.main(["--replay", str(nmea_capture), "--config", str(path)]) == cli.EXIT_CONFIG_ERROR
        assert capsys.readouterr().out == ""

    def test_sigterm_stops_idle_receiver(self, monkeypatch):
        handlers = []
        monkeypatch.setattr(cli, "install_signal_handlers", handlers.append)

        class SilentSource:
            reads = 0

            def read(self, size):
                self.reads += 1
                if self.reads == 3:
                    handlers[0]()
                return b""

        source = SilentSource()
        reader = GPSReader(source, poll_interval=0)

        assert cli.run(reader, out=io.StringIO()) == cli.EXIT_OK
        assert source.reads == 3
