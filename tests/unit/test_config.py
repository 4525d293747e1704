"""Tests for pool configuration."""

import pytest

from cpamm.api.host import config_from_env
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.params import PoolParameters


class TestPoolConfig:
    def test_defaults(self):
        assert DEFAULT_POOL_CONFIG.fee_bps == 30
        assert DEFAULT_POOL_CONFIG.twap_interval_seconds == 3_600

    @pytest.mark.parametrize("fee_bps", [-1, 10_000])
    def test_invalid_fee_rejected(self, fee_bps):
        with pytest.raises(ValueError, match="fee_bps"):
            PoolConfig(fee_bps=fee_bps)

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError, match="twap_interval_seconds"):
            PoolConfig(twap_interval_seconds=-5)

    def test_parameters_are_a_mutable_copy(self):
        config = PoolConfig(fee_bps=5, twap_interval_seconds=10)
        params = PoolParameters.from_config(config)
        params.fee_bps = 7
        assert config.fee_bps == 5


class TestConfigFromEnv:
    def test_defaults_without_env(self, monkeypatch):
        monkeypatch.delenv("CPAMM_FEE_BPS", raising=False)
        monkeypatch.delenv("CPAMM_TWAP_INTERVAL", raising=False)
        assert config_from_env() == DEFAULT_POOL_CONFIG

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("CPAMM_FEE_BPS", "100")
        monkeypatch.setenv("CPAMM_TWAP_INTERVAL", "60")
        assert config_from_env() == PoolConfig(fee_bps=100, twap_interval_seconds=60)

    @pytest.mark.parametrize(
        "name,value",
        [
            ("CPAMM_FEE_BPS", "abc"),
            ("CPAMM_FEE_BPS", "10000"),
            ("CPAMM_TWAP_INTERVAL", "-1"),
            ("CPAMM_TWAP_INTERVAL", "1.5"),
        ],
    )
    def test_invalid_env_rejected(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match="CPAMM_|fee_bps|twap_interval_seconds"):
            config_from_env()
