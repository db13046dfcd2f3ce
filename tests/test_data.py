import numpy as np
import pytest

from kalmantrack.data import (
    Config,
    ConfigError,
    MeasurementPack,
    SensorType,
    load_config,
    load_data,
    parse_measurement,
    read_matrix,
)
from kalmantrack.geometry import normalize_angle

LIDAR_LINE = "L 8.46 0.25 1477010443000000 8.6 0.25 -3.0 0.0"
RADAR_LINE = "R 8.60 0.0247 -3.29 1477010443050000 8.45 0.25 -3.0 0.0"

CONFIG_TEXT = """
F:
  shape: [4, 4]
  data: [1, 0, 1, 0,  0, 1, 0, 1,  0, 0, 1, 0,  0, 0, 0, 1]
P:
  shape: [4, 4]
  data: [1, 0, 0, 0,  0, 1, 0, 0,  0, 0, 1000, 0,  0, 0, 0, 1000]
H:
  shape: [2, 4]
  data: [1, 0, 0, 0,  0, 1, 0, 0]
Q:
  shape: [4, 4]
  data: [1, 0, 0, 0,  0, 1, 0, 0,  0, 0, 1, 0,  0, 0, 0, 1]
U:
  shape: [4, 1]
  data: [0, 0, 0, 0]
R_lidar:
  shape: [2, 2]
  data: [0.0225, 0, 0, 0.0225]
R_radar:
  shape: [3, 3]
  data: [0.09, 0, 0, 0, 0.0009, 0, 0, 0, 0.09]
noise_ax: 9
noise_ay: 9
"""


def test_parse_lidar_line():
    pack = parse_measurement(LIDAR_LINE)
    assert pack.sensor_type is SensorType.LIDAR
    np.testing.assert_array_equal(pack.state, [8.46, 0.25])
    assert pack.t == 1477010443000000
    np.testing.assert_array_equal(pack.gt, [8.6, 0.25, -3.0, 0.0])


def test_parse_radar_line():
    pack = parse_measurement(RADAR_LINE)
    assert pack.sensor_type is SensorType.RADAR
    np.testing.assert_array_equal(pack.state, [8.60, 0.0247, -3.29])
    assert pack.t == 1477010443050000
    np.testing.assert_array_equal(pack.gt, [8.45, 0.25, -3.0, 0.0])


def test_parse_radar_wraps_bearing():
    pack = parse_measurement("R 1.0 4.0 0.5 10 0 0 0 0")
    assert pack.state[1] == normalize_angle(4.0)
    assert -np.pi <= pack.state[1] <= np.pi


def test_sensor_type_values_of_parsed_lines():
    assert parse_measurement(LIDAR_LINE).sensor_type.value == 0
    assert parse_measurement(RADAR_LINE).sensor_type.value == 1


def test_parse_unknown_sensor():
    with pytest.raises(ValueError):
        parse_measurement("X 1 2 3 4 5 6 7")


def test_parse_truncated_line():
    with pytest.raises(ValueError):
        parse_measurement("L 1.0 2.0 100")


def test_parse_non_numeric_field():
    with pytest.raises(ValueError):
        parse_measurement("L 1.0 abc 100 0 0 0 0")


def test_load_data_keeps_order_and_skips_blank_lines(tmp_path):
    path = tmp_path / "meas.txt"
    path.write_text(LIDAR_LINE + "\n\n" + RADAR_LINE + "\n", encoding="utf-8")
    packs = load_data(path)
    assert [p.sensor_type for p in packs] == [SensorType.LIDAR, SensorType.RADAR]
    assert [p.t for p in packs] == [1477010443000000, 1477010443050000]
    assert all(isinstance(p, MeasurementPack) for p in packs)


def test_load_data_reports_bad_line(tmp_path):
    path = tmp_path / "meas.txt"
    path.write_text(LIDAR_LINE + "\nQ 1 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match=":2:"):
        load_data(path)


def test_load_data_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_data(tmp_path / "absent.txt")


def test_read_matrix_row_major():
    node = {"M": {"shape": [2, 3], "data": [1, 2, 3, 4, 5, 6]}}
    matrix = read_matrix(node, "M")
    np.testing.assert_array_equal(matrix, [[1, 2, 3], [4, 5, 6]])


@pytest.mark.parametrize(
    "node",
    [
        {},
        {"M": [1, 2]},
        {"M": {"shape": [2], "data": [1, 2]}},
        {"M": {"shape": [2, 2]}},
        {"M": {"shape": [2, 2], "data": [1, 2, 3]}},
        {"M": {"shape": [1, 1], "data": ["x"]}},
    ],
)
def test_read_matrix_errors(node):
    with pytest.raises(ConfigError):
        read_matrix(node, "M")


def test_load_config(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(CONFIG_TEXT, encoding="utf-8")
    cfg = load_config(path)
    assert isinstance(cfg, Config)
    assert cfg.F.shape == (4, 4)
    assert cfg.F[0, 2] == 1
    assert cfg.H.shape == (2, 4)
    assert cfg.R_radar.shape == (3, 3)
    np.testing.assert_array_equal(cfg.U, np.zeros(4))
    assert cfg.noise_ax == 9.0
    assert cfg.noise_ay == 9.0
    assert cfg.use_control is False


def test_load_config_missing_noise(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(CONFIG_TEXT.replace("noise_ay: 9\n", ""), encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_missing_matrix(tmp_path):
    path = tmp_path / "cfg.yaml"
    text = CONFIG_TEXT.replace("R_radar:", "R_other:")
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="R_radar"):
        load_config(path)