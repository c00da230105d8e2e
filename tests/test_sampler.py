"""Tests for the sampling tick: percentages, deltas, histories and fail-soft reads."""
from __future__ import annotations

import pytest

from sparkline_monitor.core.config import BYTES_PER_GIB, MetricsConfig
from sparkline_monitor.core.provider import InterfaceCounters, VolumeSpace
from sparkline_monitor.core.sampler import Sampler, percentage
from sparkline_monitor.core.state import (
    BATTERY_LEVEL, CPU, DISK_USAGE, DOWN, HISTORY_KEYS, RAM, UP,
    EMPTY_BATTERY, NetworkReading, Reading, ViewId, ViewModel, select_view,
)


class TestPercentage:

    def test_zero_total(self) -> None:
        assert percentage(0, 0) == 0.0
        assert percentage(5, 0) == 0.0

    def test_ratio(self) -> None:
        assert percentage(1, 4) == 25.0


class TestTick:

    def test_ram_from_memory_counters(self, provider) -> None:
        state = ViewModel()
        Sampler().tick(provider, state)
        assert state.reading.used_mem_mb == 4
        assert state.reading.total_mem_mb == 8
        assert state.reading.ram_percent == 50.0
        assert state.history(RAM).as_slice() == (50.0,)

    def test_oldest_evicted_after_capacity(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.total_mem = 100 * 1024
        for t in range(1, 122):
            provider.used_mem = t * 1024
            sampler.tick(provider, state)
        ram = state.history(RAM)
        assert len(ram) == 120
        assert ram.as_slice()[0] == pytest.approx(2.0)
        assert ram.as_slice()[-1] == pytest.approx(121.0)

    def test_every_enabled_history_gets_one_sample(self, provider) -> None:
        state = ViewModel()
        Sampler().tick(provider, state)
        for key in HISTORY_KEYS:
            assert len(state.history(key)) == 1

    def test_network_rate_from_summed_interfaces(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.nics = [InterfaceCounters("eth0", 60, 30), InterfaceCounters("wlan0", 40, 20)]
        sampler.tick(provider, state)
        assert state.reading.network == NetworkReading(0.0, 0.0, 100 / BYTES_PER_GIB, 50 / BYTES_PER_GIB)

        provider.nics = [InterfaceCounters("eth0", 120, 40), InterfaceCounters("wlan0", 60, 30)]
        sampler.tick(provider, state)
        assert state.reading.network.down_mbps == pytest.approx(80 * 8 / 1_000_000)
        assert state.reading.network.up_mbps == pytest.approx(20 * 8 / 1_000_000)
        assert state.history(DOWN).as_slice() == pytest.approx((0.0, 0.00064))
        assert state.history(UP).as_slice() == pytest.approx((0.0, 0.00016))

    def test_counter_reset_reports_zero(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.nics = [InterfaceCounters("eth0", 10_000, 10_000)]
        sampler.tick(provider, state)
        provider.nics = [InterfaceCounters("eth0", 10, 10_500)]
        sampler.tick(provider, state)
        assert state.reading.network.down_mbps == 0.0
        assert state.reading.network.up_mbps == pytest.approx(500 * 8 / 1_000_000)

    def test_disk_percent_and_gib(self, provider) -> None:
        state = ViewModel()
        provider.vols = [
            VolumeSpace("/", 100 * BYTES_PER_GIB, 40 * BYTES_PER_GIB),
            VolumeSpace("/data", 100 * BYTES_PER_GIB, 60 * BYTES_PER_GIB),
        ]
        Sampler().tick(provider, state)
        disk = state.reading.disk
        assert disk.percent == 50.0
        assert disk.used_gib == 100
        assert disk.total_gib == 200
        assert state.history(DISK_USAGE).as_slice() == (50.0,)

    def test_disk_without_volumes_is_zero(self, provider) -> None:
        state = ViewModel()
        provider.vols = []
        Sampler().tick(provider, state)
        assert state.reading.disk.percent == 0.0

    def test_zero_total_memory(self, provider) -> None:
        state = ViewModel()
        provider.used_mem = 0
        provider.total_mem = 0
        Sampler().tick(provider, state)
        assert state.reading.ram_percent == 0.0

    def test_battery_default_passes_through(self, provider) -> None:
        state = ViewModel()
        provider.battery = (100.0, False)
        Sampler().tick(provider, state)
        assert state.reading.battery.percent == 100.0
        assert state.reading.battery.charging is False
        assert state.history(BATTERY_LEVEL).as_slice() == (100.0,)

    def test_selected_view_does_not_change_sampling(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        for view in ViewId:
            select_view(state, view)
            sampler.tick(provider, state)
        for key in HISTORY_KEYS:
            assert len(state.history(key)) == 3


class TestDisabledClasses:

    def test_disabled_classes_not_read(self, provider) -> None:
        state = ViewModel(config=MetricsConfig(network=False, disk=False, battery=False))
        Sampler().tick(provider, state)
        assert provider.calls == ["cpu", "memory"]
        r = state.reading
        assert r.network is None and r.disk is None and r.battery is None
        for key in (DOWN, UP, DISK_USAGE, BATTERY_LEVEL):
            assert len(state.history(key)) == 0
        assert len(state.history(CPU)) == 1

    def test_reenabled_network_starts_from_fresh_baseline(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.nics = [InterfaceCounters("eth0", 1000, 1000)]
        sampler.tick(provider, state)
        state.set_config(MetricsConfig(network=False))
        sampler.tick(provider, state)
        state.set_config(MetricsConfig(network=True))
        provider.nics = [InterfaceCounters("eth0", 900_000, 900_000)]
        sampler.tick(provider, state)
        assert state.reading.network.down_mbps == 0.0


class TestFailSoft:

    def test_network_failure_skips_one_entry(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        for t in range(1, 7):
            provider.nics = [InterfaceCounters("eth0", t * 1000, t * 500)]
            provider.fail = {"network"} if t == 5 else set()
            sampler.tick(provider, state)
        assert len(state.history(CPU)) == 6
        assert len(state.history(RAM)) == 6
        assert len(state.history(DOWN)) == 5
        assert len(state.history(UP)) == 5

    def test_failed_metric_keeps_previous_reading(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.nics = [InterfaceCounters("eth0", 0, 0)]
        sampler.tick(provider, state)
        provider.nics = [InterfaceCounters("eth0", 125_000, 0)]
        sampler.tick(provider, state)
        before = state.reading.network

        provider.fail = {"network", "disk", "battery"}
        provider.cpu = 99.0
        sampler.tick(provider, state)
        assert state.reading.network == before
        assert state.reading.cpu_percent == 99.0
        assert len(state.history(DISK_USAGE)) == 2
        assert len(state.history(BATTERY_LEVEL)) == 2

    def test_cpu_failure_keeps_previous_value(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.cpu = 42.0
        sampler.tick(provider, state)
        provider.cpu = 7.0
        provider.fail = {"cpu"}
        sampler.tick(provider, state)
        assert state.reading.cpu_percent == 42.0
        assert state.history(CPU).as_slice() == (42.0,)
        assert len(state.history(RAM)) == 2

    def test_failure_on_first_tick_gives_zero_reading(self, provider) -> None:
        state = ViewModel()
        provider.fail = {"network"}
        Sampler().tick(provider, state)
        assert state.reading.network == NetworkReading()
        assert len(state.history(DOWN)) == 0

    def test_delta_spans_skipped_tick(self, provider) -> None:
        state = ViewModel()
        sampler = Sampler()
        provider.nics = [InterfaceCounters("eth0", 0, 0)]
        sampler.tick(provider, state)
        provider.fail = {"network"}
        provider.nics = [InterfaceCounters("eth0", 100, 0)]
        sampler.tick(provider, state)
        provider.fail = set()
        provider.nics = [InterfaceCounters("eth0", 250, 0)]
        sampler.tick(provider, state)
        assert state.reading.network.down_mbps == pytest.approx(250 * 8 / 1_000_000)

    def test_battery_enabled_with_failing_read_shows_empty_level(self, provider) -> None:
        state = ViewModel(config=MetricsConfig(battery=False))
        sampler = Sampler()
        sampler.tick(provider, state)
        state.set_config(MetricsConfig())
        provider.fail = {"battery"}
        sampler.tick(provider, state)
        assert state.reading.battery == EMPTY_BATTERY
        assert state.reading.battery == Reading.zero(MetricsConfig()).battery
