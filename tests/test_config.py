import pytest

from ie_LaserLine import ConfigException, WeightedAverage
from ie_LaserLine.Utility.configReader import configReader


def write_conf(tmp_path, text):
    path = tmp_path / "laser_line.conf"
    path.write_text(text, encoding="utf-8")
    return path


def test_reader_parses_values_lists_and_comments(tmp_path):
    path = write_conf(
        tmp_path,
        "# header\n"
        "Minimum intensity value for a valid laser point\n"
        "intensity_threshold = 180  # tuned\n"
        "colors = red; green\n",
    )
    reader = configReader(path)
    assert reader.getInfo("intensity_threshold") == "180"
    assert reader.getInfo("colors") == ["red", "green"]
    assert reader.getInfo("missing") is None
    assert reader.getInt("intensity_threshold") == 180
    assert reader.getInt("missing", 7) == 7
    assert reader.getStr("missing", "red") == "red"


def test_reader_pads_list_fields(tmp_path):
    reader = configReader(write_conf(tmp_path, "a = 1\nb = 1; 2\n"), listFields=3)
    assert reader.getInfo("a") == ["1", "", ""]
    assert reader.getInfo("b") == ["1", "2", ""]


def test_reader_type_errors(tmp_path):
    reader = configReader(write_conf(tmp_path, "intensity_threshold = high\ncolors = red; green\n"))
    with pytest.raises(ConfigException):
        reader.getInt("intensity_threshold")
    with pytest.raises(ConfigException):
        reader.getStr("colors")


def test_missing_file(tmp_path):
    with pytest.raises(ConfigException):
        configReader(tmp_path / "nope.conf")


def test_weighted_average_from_config(tmp_path):
    algo = WeightedAverage.from_config(write_conf(tmp_path, "intensity_threshold = 90\nworkers = 4\n"))
    assert algo.intensity_threshold == 90
    assert algo.workers == 4


def test_weighted_average_from_config_defaults(tmp_path):
    algo = WeightedAverage.from_config(configReader(write_conf(tmp_path, "# empty\n")))
    assert algo.intensity_threshold == 220
    assert algo.workers == 1
