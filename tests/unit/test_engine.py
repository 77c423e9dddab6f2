"""
📁 tests/unit/test_engine.py
=============================
비닝 오케스트레이터 테스트.

실행: pytest tests/unit/test_engine.py -v

[테스트 원칙]
  - 결과 불변식(범위, 건수 보존, IV 일관성, 재현성)을 여러 설정에서 검증
  - 원격 서버는 conftest.py의 FakeSession으로 대체
"""

import dataclasses

import pytest
import numpy as np
import requests

from config.binning_config import BinningConfiguration
from src.binning.builders import BinBuilderFactory
from src.binning.engine import BinningEngine
from src.binning.exceptions import BinningError, ValidationError
from src.binning.statistics import FALLBACK_WARNING, StatisticsCalculator
from src.stats_service.client import StatisticsClient


def remote_engine(session) -> BinningEngine:
    client = StatisticsClient(base_url="http://stats.test", session=session)
    return BinningEngine(StatisticsCalculator(client))


class TestScenarios:

    def test_equal_width_step_function(self, step_data):
        """0~99, 80 이상 불량, 등간격 5개 → 마지막 구간에 불량 20건"""
        feature, target = step_data
        result = BinningEngine().run(feature, target, BinningConfiguration(mode="equal_width", max_bins=5))

        assert result.n_bins == 5
        assert [b.bad_rate for b in result.bins] == [0.0, 0.0, 0.0, 0.0, 1.0]
        assert result.bins[-1].bads == 20
        for b in result.bins:
            assert b.max - b.min == pytest.approx(19.8)
        assert result.is_monotonic is True

    def test_unsmoothed_woe_is_flagged(self, step_data):
        """평활화 0 → 한쪽 클래스만 있는 구간은 ±inf, 경고로 알림"""
        feature, target = step_data
        config = BinningConfiguration(mode="equal_width", max_bins=5, woe_smoothing=0)
        result = BinningEngine().run(feature, target, config)

        assert [b.woe for b in result.bins] == [np.inf] * 4 + [-np.inf]
        assert any("not finite for 5 bin(s)" in w for w in result.warnings)

    def test_smoothed_woe_has_no_warning(self, step_data):
        feature, target = step_data
        result = BinningEngine().run(feature, target, BinningConfiguration(mode="equal_width", max_bins=5))
        assert all(np.isfinite(b.woe) for b in result.bins)
        assert not any("not finite" in w for w in result.warnings)

    def test_fifty_rows_rejected(self):
        feature = np.arange(50, dtype=float)
        target = np.array([0, 1] * 25)
        with pytest.raises(ValidationError):
            BinningEngine().run(feature, target)

    def test_three_class_target_rejected(self, step_data):
        feature, _ = step_data
        with pytest.raises(ValidationError):
            BinningEngine().run(feature, np.arange(100) % 3)

    def test_remote_timeout_falls_back(self, step_data, fake_session_factory):
        """원격 통계 서버 타임아웃 → 결과는 생성, Gini/KS = 0, 경고 포함"""
        session = fake_session_factory({
            "/api/binning/calculate-woe-iv": lambda body: requests.Timeout("timed out"),
            "/api/binning/calculate-statistics": lambda body: requests.Timeout("timed out"),
        })
        feature, target = step_data
        result = remote_engine(session).run(feature, target, BinningConfiguration(mode="equal_width", max_bins=5))

        assert FALLBACK_WARNING in result.warnings
        assert result.warnings.count(FALLBACK_WARNING) == 1
        assert result.gini_coefficient == 0
        assert result.ks_statistic == 0
        assert result.total_iv > 0


class TestRemoteStatistics:

    def test_server_values_are_reported(self, step_data, fake_session_factory, fake_response):
        session = fake_session_factory({
            "/api/binning/calculate-woe-iv": lambda body: fake_response({
                "woe_values": [0.1 * i for i in range(len(body["bins"]))],
                "iv_values": [0.01] * len(body["bins"]),
            }),
            "/api/binning/calculate-statistics": lambda body: fake_response({
                "total_iv": 0.42, "gini_coefficient": 0.5, "ks_statistic": 0.3,
                "warnings": ["server note"],
            }),
        })
        feature, target = step_data
        result = remote_engine(session).run(feature, target, BinningConfiguration(mode="equal_width", max_bins=5))

        assert [b.woe for b in result.bins] == pytest.approx([0.0, 0.1, 0.2, 0.3, 0.4])
        assert result.total_iv == 0.42
        assert result.gini_coefficient == 0.5
        assert result.ks_statistic == 0.3
        assert result.warnings == ("server note",)


class TestInvariants:

    CONFIGS = [
        BinningConfiguration(),
        BinningConfiguration(mode="equal_width", max_bins=8),
        BinningConfiguration(mode="equal_frequency", max_bins=10, enforce_monotonicity=True),
        BinningConfiguration(mode="optimal", max_bins=12, merge_similar_rates=True, merge_threshold=0.03),
    ]

    @pytest.mark.parametrize("config", CONFIGS)
    def test_coverage_and_count_conservation(self, risk_data, config):
        feature, target = risk_data
        result = BinningEngine().run(feature, target, config)
        bins = result.bins

        assert bins[0].min == feature.min()
        assert bins[-1].max == feature.max()
        for prev, cur in zip(bins, bins[1:]):
            assert prev.max == cur.min
        assert all(b.count > 0 for b in bins)
        assert result.total_count == len(feature)
        assert sum(b.bads for b in bins) == target.sum()

    @pytest.mark.parametrize("config", CONFIGS)
    def test_woe_iv_consistency(self, risk_data, config):
        feature, target = risk_data
        result = BinningEngine().run(feature, target, config)

        total_goods = sum(b.goods for b in result.bins)
        total_bads = sum(b.bads for b in result.bins)
        for b in result.bins:
            expected = (b.goods / total_goods - b.bads / total_bads) * b.woe
            assert b.iv == pytest.approx(expected, abs=1e-9)
        assert result.total_iv == pytest.approx(sum(b.iv for b in result.bins))

    @pytest.mark.parametrize("config", CONFIGS)
    def test_idempotent(self, risk_data, config):
        """같은 입력 + 설정 → 처리시간 외 동일 결과"""
        feature, target = risk_data
        engine = BinningEngine()
        first = dataclasses.replace(engine.run(feature, target, config), processing_time_ms=0)
        second = dataclasses.replace(engine.run(feature, target, config), processing_time_ms=0)
        assert first == second

    def test_monotonic_when_enforced(self, risk_data):
        feature, target = risk_data
        config = BinningConfiguration(mode="equal_frequency", max_bins=15, enforce_monotonicity=True)
        result = BinningEngine().run(feature, target, config)

        rates = [b.bad_rate for b in result.bins]
        assert result.is_monotonic is True
        assert rates == sorted(rates) or rates == sorted(rates, reverse=True)

    def test_ids_are_sequential(self, risk_data):
        feature, target = risk_data
        result = BinningEngine().run(feature, target, BinningConfiguration(merge_similar_rates=True))
        assert [b.id for b in result.bins] == list(range(1, result.n_bins + 1))


class TestProgressAndFailure:

    def test_progress_sequence(self, step_data):
        feature, target = step_data
        events = []
        BinningEngine().run(feature, target, on_progress=lambda step, pct: events.append((step, pct)))

        assert [pct for _, pct in events] == [10, 25, 50, 70, 85, 100]
        assert events[0][0] == "Validating data..."

    def test_failing_progress_callback_is_ignored(self, step_data):
        feature, target = step_data

        def broken(step, pct):
            raise RuntimeError("ui gone")

        result = BinningEngine().run(feature, target, on_progress=broken)
        assert result.n_bins > 0

    def test_unexpected_error_is_wrapped(self, step_data, monkeypatch):
        """예상치 못한 예외 → BinningError, 원인은 __cause__"""
        def boom(mode):
            raise RuntimeError("builder exploded")

        monkeypatch.setattr(BinBuilderFactory, "create", staticmethod(boom))
        feature, target = step_data

        with pytest.raises(BinningError, match="builder exploded") as exc_info:
            BinningEngine().run(feature, target)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_accepts_plain_lists(self, step_data):
        feature, target = step_data
        result = BinningEngine().run(feature.tolist(), target.tolist())
        assert result.total_count == 100

    def test_result_to_dict(self, step_data):
        feature, target = step_data
        data = BinningEngine().run(feature, target).to_dict()
        assert set(data) == {
            "bins", "total_iv", "gini_coefficient", "ks_statistic",
            "is_monotonic", "processing_time_ms", "warnings",
        }
        assert {"range", "bad_rate", "woe", "iv"} <= set(data["bins"][0])
