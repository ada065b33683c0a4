from ipaddress import ip_network

import pytest

from configs.env_config import Env
from configs.settings import (
    SecurityConfig,
    ThresholdConfig,
    load_settings,
    parse_allowed_networks,
)
from utils.logger.config import LogLevel

DEFAULTS = {
    "VITALS_MEM": "90",
    "VITALS_DISK": "80",
    "VITALS_CPU": "90",
    "VITALS_PORT": "10321",
    "VITALS_BIND": "0.0.0.0",
    "VITALS_KEY": "",
    "VITALS_ALLOW": "",
    "VITALS_RATELIMIT": "60",
    "VITALS_LOG_DIR": "logs",
    "VITALS_LOG_LEVEL": "info",
}


@pytest.fixture(autouse=True)
def default_env(monkeypatch):
    for name, value in DEFAULTS.items():
        monkeypatch.setattr(Env, name, value)


def test_defaults():
    settings = load_settings([])

    assert settings.thresholds == ThresholdConfig(90, 80, 90)
    assert settings.server.bind == "0.0.0.0"
    assert settings.server.port == 10321
    assert settings.server.log_level is LogLevel.INFO
    assert settings.security.api_key is None
    assert settings.security.allowed_networks == ()
    assert settings.security.rate_limit == 60


def test_flags_override_environment(monkeypatch):
    monkeypatch.setattr(Env, "VITALS_MEM", "50")

    settings = load_settings(
        ["-mem", "70", "--disk", "60", "-key", "abc", "-allow", "10.0.0.0/24, 192.168.1.7", "-ratelimit", "0"]
    )

    assert settings.thresholds.mem_threshold == 70
    assert settings.thresholds.disk_threshold == 60
    assert settings.security.api_key == "abc"
    assert settings.security.allowed_networks == (ip_network("10.0.0.0/24"), ip_network("192.168.1.7/32"))
    assert settings.security.rate_limit == 0


def test_environment_used_when_flag_absent(monkeypatch):
    monkeypatch.setattr(Env, "VITALS_CPU", "75")
    monkeypatch.setattr(Env, "VITALS_KEY", "from-env")

    settings = load_settings([])

    assert settings.thresholds.cpu_threshold == 75
    assert settings.security.api_key == "from-env"


@pytest.mark.parametrize(
    "argv, message",
    [
        (["-mem", "0"], "invalid -mem value 0: must be between 1 and 100"),
        (["-disk", "101"], "invalid -disk value 101"),
        (["-cpu", "-5"], "invalid -cpu value -5"),
        (["-port", "70000"], "invalid -port value 70000: must be between 1 and 65535"),
        (["-ratelimit", "-1"], "invalid -ratelimit value -1: must be >= 0"),
        (["-allow", "10.0.0.0/33"], "invalid -allow CIDR"),
        (["-allow", "example.com"], "invalid -allow CIDR"),
        (["-log-level", "loud"], "invalid log level"),
    ],
)
def test_invalid_values_are_rejected(argv, message):
    with pytest.raises(ValueError, match=message):
        load_settings(argv)


def test_non_integer_environment_value(monkeypatch):
    monkeypatch.setattr(Env, "VITALS_PORT", "eighty")

    with pytest.raises(ValueError, match="VITALS_PORT"):
        load_settings([])


def test_parse_allowed_networks_normalises_entries():
    networks = parse_allowed_networks(" 10.0.0.5/24 ,,2001:db8::1, 10.0.0.0/24 ")

    assert networks == (ip_network("10.0.0.0/24"), ip_network("2001:db8::1/128"))


def test_empty_api_key_disables_auth():
    assert SecurityConfig(api_key="").api_key is None
