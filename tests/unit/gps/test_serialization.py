"""Unit tests for JSON views of records and snapshots."""

import json

import pytest

from gps_stream.gps_core.fix_state import FixAccumulator
from gps_stream.gps_core.parsers import build_sentence, parse_sentence
from gps_stream.gps_core.serialization import record_to_dict, record_to_json, snapshot_to_dict


class TestRecordSerialization:

    def test_rmc_dict(self, rmc_sentence):
        data = record_to_dict(parse_sentence(rmc_sentence))

        assert data["tag"] == "GPRMC"
        assert data["sentence_type"] == "RMC"
        assert data["talker"] == "GP"
        assert data["time"] == "12:35:19"
        assert data["fix_valid"] is True
        assert data["latitude"] == pytest.approx(48.1173, abs=1e-4)
        assert data["speed_knots"] == pytest.approx(22.4)
        assert data["magnetic_variation"] == pytest.approx(-3.1)
        assert data["date"] == "1994-03-23"
        assert data["timestamp"] == "1994-03-23T12:35:19+00:00"
        assert data["mode"] is None

    def test_json_is_loadable(self, gga_sentence):
        data = json.loads(record_to_json(parse_sentence(gga_sentence)))

        assert data["fix_quality"] == 1
        assert data["altitude_m"] == pytest.approx(545.4)
        assert data["date"] is None
        assert data["timestamp"] is None

    def test_satellites(self):
        record = parse_sentence(build_sentence("GPGSV,1,1,02,01,40,083,46,02,17,308,"))

        data = json.loads(record_to_json(record))

        assert data["satellites"] == [
            {"prn": 1, "elevation_deg": 40, "azimuth_deg": 83, "snr_db": 46},
            {"prn": 2, "elevation_deg": 17, "azimuth_deg": 308, "snr_db": None},
        ]

    def test_satellite_ids(self):
        record = parse_sentence(build_sentence("GPGSA,M,3,04,05,,,,,,,,,,,2.5,1.3,2.1"))

        data = record_to_dict(record)

        assert data["satellite_ids"] == [4, 5]
        assert data["selection_mode"] == "M"
        assert data["fix_type"] == 3


class TestSnapshotSerialization:

    def test_snapshot_dict(self, rmc_sentence):
        accumulator = FixAccumulator()
        accumulator.update(parse_sentence(rmc_sentence))

        data = snapshot_to_dict(accumulator.fix)

        assert "last_update_monotonic" not in data
        assert data["has_position"] is True
        assert data["time"] == "12:35:19"
        assert data["timestamp"] == "1994-03-23T12:35:19+00:00"
        assert json.loads(json.dumps(data)) == data

    def test_empty_snapshot(self):
        data = snapshot_to_dict(FixAccumulator().fix)

        assert data["has_position"] is False
        assert data["timestamp"] is None
        assert data["latitude"] is None
