"""
📁 tests/unit/test_builders.py
===============================
초기 구간 생성기 단위 테스트.

실행: pytest tests/unit/test_builders.py -v
"""

import pytest
import numpy as np

from config.binning_config import BinningConfiguration, BinningMode
from src.binning.builders import (
    BinBuilderFactory, EqualWidthBinBuilder, EqualFrequencyBinBuilder, OptimalBinBuilder,
)
from src.binning.models import ObservationSet


def assert_covers(bins, feature):
    """구간이 [min, max]를 빈틈/겹침 없이 덮고, 건수가 실제 값과 일치하는지"""
    assert bins[0].min == feature.min()
    assert bins[-1].max == feature.max()
    for prev, cur in zip(bins, bins[1:]):
        assert prev.max == cur.min
    for i, b in enumerate(bins):
        lower_ok = feature >= b.min if i == 0 else feature > b.min
        assert b.count == int((lower_ok & (feature <= b.max)).sum())
        assert b.goods + b.bads == b.count
        assert b.count > 0
    assert sum(b.count for b in bins) == len(feature)


class TestEqualWidth:

    def test_step_data_five_bins(self, step_data):
        """0~99, 80 이상 불량 → 폭 19.8인 5개 구간, 마지막 구간에 불량 20건"""
        feature, target = step_data
        cfg = BinningConfiguration(mode="equal_width", max_bins=5)
        bins = EqualWidthBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)

        assert len(bins) == 5
        assert [b.count for b in bins] == [20] * 5
        assert [b.bad_rate for b in bins] == [0.0, 0.0, 0.0, 0.0, 1.0]
        assert bins[-1].bads == 20
        for b in bins:
            assert b.max - b.min == pytest.approx(19.8)
        assert_covers(bins, feature)

    def test_empty_intervals_are_omitted(self):
        """값이 없는 구간은 생략되고 범위는 다음 구간이 흡수"""
        feature = np.concatenate([np.arange(90, dtype=float), np.full(10, 1000.0)])
        target = np.array([0, 1] * 50)
        cfg = BinningConfiguration(mode="equal_width", max_bins=10)
        bins = EqualWidthBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)

        assert [b.count for b in bins] == [90, 10]
        assert bins[0].max == pytest.approx(100.0)
        assert bins[1].min == bins[0].max
        assert bins[1].max == 1000.0

    def test_ids_and_stats_initialized(self, step_data):
        feature, target = step_data
        cfg = BinningConfiguration(mode="equal_width", max_bins=5)
        bins = EqualWidthBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)
        assert [b.id for b in bins] == [1, 2, 3, 4, 5]
        assert all(b.woe == 0 and b.iv == 0 for b in bins)
        assert bins[0].range == "0.00 - 19.80"


class TestEqualFrequency:

    def test_equal_slices(self, step_data):
        feature, target = step_data
        cfg = BinningConfiguration(mode="equal_frequency", max_bins=4)
        bins = EqualFrequencyBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)

        assert [b.count for b in bins] == [25, 25, 25, 25]
        assert bins[0].max == 24.0
        assert_covers(bins, feature)

    def test_last_slice_absorbs_remainder(self):
        feature = np.arange(103, dtype=float)
        target = (feature > 70).astype(int)
        cfg = BinningConfiguration(mode="equal_frequency", max_bins=5)
        bins = EqualFrequencyBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)
        assert [b.count for b in bins] == [20, 20, 20, 20, 23]

    def test_tied_values_never_split(self, tied_data):
        """같은 피처값은 한 구간에만 속함"""
        feature, target = tied_data
        cfg = BinningConfiguration(mode="equal_frequency", max_bins=7)
        bins = EqualFrequencyBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)
        assert 1 < len(bins) <= 7
        assert_covers(bins, feature)


class TestOptimal:

    def test_greedy_split_earliest_first(self, step_data):
        """가장 앞쪽의 분할 가능한 구간부터 중앙에서 분할"""
        feature, target = step_data
        cfg = BinningConfiguration(mode="optimal", max_bins=10, min_population=10)
        bins = OptimalBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)

        # 2 × 10 = 20건 미만이 될 때까지 분할 → 8개 구간
        assert [b.count for b in bins] == [12, 13, 12, 13, 12, 13, 12, 13]
        assert_covers(bins, feature)

    def test_stops_at_max_bins(self, step_data):
        feature, target = step_data
        cfg = BinningConfiguration(mode="optimal", max_bins=3, min_population=10)
        bins = OptimalBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)
        assert [b.count for b in bins] == [25, 25, 50]

    def test_unsplittable_tie_run_is_skipped(self):
        """한 값으로만 이루어진 구간은 건너뛰고 다음 구간을 분할"""
        feature = np.concatenate([np.zeros(60), np.arange(1, 41, dtype=float)])
        target = np.array([0, 1] * 50)
        cfg = BinningConfiguration(mode="optimal", max_bins=10, min_population=10)
        bins = OptimalBinBuilder().build(ObservationSet.from_arrays(feature, target), cfg)

        assert [b.count for b in bins] == [60, 10, 10, 10, 10]
        assert bins[0].max == 0.0
        assert_covers(bins, feature)


@pytest.mark.parametrize("mode, cls", [
    ("optimal", OptimalBinBuilder),
    ("equal_width", EqualWidthBinBuilder),
    (BinningMode.EQUAL_FREQUENCY, EqualFrequencyBinBuilder),
])
def test_factory_selects_builder(mode, cls):
    assert isinstance(BinBuilderFactory.create(mode), cls)


@pytest.mark.parametrize("mode", ["optimal", "equal_width", "equal_frequency"])
def test_all_strategies_cover_range(mode, risk_data):
    feature, target = risk_data
    cfg = BinningConfiguration(mode=mode, max_bins=8)
    bins = BinBuilderFactory.create(cfg.mode).build(ObservationSet.from_arrays(feature, target), cfg)
    assert_covers(bins, feature)
