import pytest

from meterprofile import config
from meterprofile.exceptions import ConfigError, MeterProfileError


def test_defaults():
    cfg = config.default_config()
    assert cfg.value_unit == "auto"
    assert cfg.voltage_v == 400.0
    assert cfg.power_factor == 0.9
    assert cfg.columns == ()
    assert cfg.date_order(0) == "YMD"


def test_from_mapping_reads_camel_case_keys():
    cfg = config.ProcessConfig.from_mapping(
        {
            "valueColumnIndex": 3,
            "dateColumnIndex": 0,
            "timeColumnIndex": -1,
            "meterIdColumnIndex": 2,
            "columns": [{"index": 0, "name": "Date", "dataType": "date", "dateFormat": "DMY"}],
            "valueUnit": "kVA",
            "voltageV": 415,
            "powerFactor": 0.95,
        }
    )
    assert cfg.value_column_index == 3
    assert cfg.date_column_index == 0
    assert cfg.time_column_index is None
    assert cfg.meter_id_column_index == 2
    assert cfg.value_unit == "kVA"
    assert cfg.voltage_v == 415.0
    assert cfg.power_factor == 0.95
    assert cfg.date_order(0) == "DMY"
    assert cfg.date_order(1) == "YMD"


def test_coerce_config():
    cfg = config.ProcessConfig(value_unit="kWh")
    assert config.coerce_config(cfg) is cfg
    assert config.coerce_config(None) == config.default_config()
    assert config.coerce_config({"valueUnit": "Wh"}).value_unit == "Wh"


def test_config_is_frozen():
    cfg = config.default_config()
    with pytest.raises(AttributeError):
        cfg.value_unit = "kW"  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"voltage_v": 0},
        {"power_factor": 0},
        {"power_factor": 1.2},
        {"value_unit": "BTU"},
    ],
)
def test_invalid_process_config(kwargs):
    with pytest.raises(ConfigError):
        config.ProcessConfig(**kwargs)


def test_invalid_column_config():
    with pytest.raises(ConfigError):
        config.ColumnConfig(index=0, data_type="number")  # type: ignore[arg-type]
    with pytest.raises(ConfigError):
        config.ColumnConfig(index=0, date_format="DD/MM/YYYY")
    assert issubclass(ConfigError, MeterProfileError)


def test_from_mapping_null_numbers_fall_back_to_defaults():
    cfg = config.ProcessConfig.from_mapping(
        {"voltageV": None, "powerFactor": None, "valueColumnIndex": None}
    )
    assert cfg.voltage_v == 400.0
    assert cfg.power_factor == 0.9
    assert cfg.value_column_index is None


@pytest.mark.parametrize(
    "payload",
    [
        {"valueColumnIndex": "x"},
        {"voltageV": "high"},
        {"powerFactor": [0.9]},
        {"columns": [{"name": "Date", "dataType": "date"}]},
        {"columns": [{"index": "first"}]},
    ],
)
def test_from_mapping_bad_numbers_raise_config_error(payload):
    with pytest.raises(ConfigError):
        config.ProcessConfig.from_mapping(payload)
