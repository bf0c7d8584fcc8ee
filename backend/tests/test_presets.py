import pytest

from indicator_engine.db.models import ChartPreset
from indicator_engine.schemas.indicators import IndicatorKind
from indicator_engine.schemas.market import Timeframe
from indicator_engine.services.base import IndexOutOfRangeError, UnknownIndicatorError
from indicator_engine.services.indicators import IndicatorManager
from indicator_engine.services.presets import PresetManager


@pytest.fixture
def presets(session_factory, factory):
    return PresetManager(session_factory, factory, "alice", "AAPL")


@pytest.fixture
async def manager(chart, factory):
    manager = IndicatorManager(chart, "AAPL", factory)
    await manager.create(IndicatorKind.SMA, [-256, 20, 1.0])
    await manager.create(IndicatorKind.BOLLINGER_BANDS, [-16711936, 14, 2.5, 3.0])
    return manager


class TestPresetSlots:
    @pytest.mark.parametrize("slot", [0, 6, -1])
    def test_slot_out_of_range(self, presets, slot):
        with pytest.raises(IndexOutOfRangeError):
            presets.get_slot(slot)

    def test_slots_start_empty(self, presets):
        assert presets.slot_count == 5
        assert all(len(presets.get_slot(n)) == 0 for n in range(1, 6))

    @pytest.mark.asyncio
    async def test_set_slot_copies_indicators(self, presets, manager):
        entries = presets.set_slot(2, manager.get_all().values())

        assert list(entries) == ["0", "1"]
        assert entries["1"].kind == IndicatorKind.BOLLINGER_BANDS
        assert entries["1"].timeframe == Timeframe.DAILY
        # Later changes on the chart do not leak into the preset
        await manager.change_settings("1", [-256, 50, 1.0])
        assert entries["0"].spec.period == 20

    def test_clear_slot(self, presets, factory):
        presets.set_slot(1, [factory.create("SMA", "x", "AAPL", Timeframe.DAILY, [1, 5, 1.0])])
        presets.clear_slot(1)
        assert len(presets.get_slot(1)) == 0


class TestPresetPersistence:
    @pytest.mark.asyncio
    async def test_store_and_load(self, session_factory, factory, presets, manager):
        presets.set_slot(1, manager.get_all().values())
        presets.set_slot(3, [manager.require("2")])
        assert await presets.store()

        reloaded = PresetManager(session_factory, factory, "alice", "AAPL")
        await reloaded.load()

        slot1 = reloaded.get_slot(1)
        assert list(slot1) == ["0", "1"]
        assert slot1["0"].kind == IndicatorKind.SMA
        assert slot1["0"].serialize_params() == "-256:20:1.0"
        assert slot1["1"].serialize_params() == "-16711936:14:2.5:3.0"
        assert len(reloaded.get_slot(2)) == 0
        assert reloaded.get_slot(3)["0"].kind == IndicatorKind.BOLLINGER_BANDS

    @pytest.mark.asyncio
    async def test_presets_are_scoped_to_user_and_symbol(self, session_factory, factory, presets, manager):
        presets.set_slot(1, manager.get_all().values())
        assert await presets.store()

        other_user = PresetManager(session_factory, factory, "bob", "AAPL")
        other_symbol = PresetManager(session_factory, factory, "alice", "MSFT")
        await other_user.load()
        await other_symbol.load()
        assert len(other_user.get_slot(1)) == 0
        assert len(other_symbol.get_slot(1)) == 0

    @pytest.mark.asyncio
    async def test_store_replaces_previous_rows(self, session_factory, factory, presets, manager):
        presets.set_slot(1, manager.get_all().values())
        assert await presets.store()
        presets.clear_slot(1)
        presets.set_slot(2, [manager.require("1")])
        assert await presets.store()

        reloaded = PresetManager(session_factory, factory, "alice", "AAPL")
        await reloaded.load()
        assert len(reloaded.get_slot(1)) == 0
        assert list(reloaded.get_slot(2)) == ["0"]

    @pytest.mark.asyncio
    async def test_failed_store_rolls_back(self, session_factory, factory, presets, manager, monkeypatch):
        presets.set_slot(1, manager.get_all().values())
        assert await presets.store()

        presets.set_slot(2, [manager.require("1")])
        broken = presets.get_slot(2)["0"]

        def fail():
            raise RuntimeError("disk full")

        monkeypatch.setattr(broken, "serialize_params", fail)
        assert not await presets.store()

        reloaded = PresetManager(session_factory, factory, "alice", "AAPL")
        await reloaded.load()
        assert list(reloaded.get_slot(1)) == ["0", "1"]
        assert len(reloaded.get_slot(2)) == 0

    @pytest.mark.asyncio
    async def test_unknown_kind_row_fails_load(self, session_factory, presets):
        async with session_factory() as session:
            async with session.begin():
                session.add(
                    ChartPreset(user_id="alice", preset_id=1, symbol="AAPL", type="RSI", params="-256:14:1.0")
                )

        with pytest.raises(UnknownIndicatorError):
            await presets.load()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", ["-256:inf:1.0", "-256:nan:1.0", "-256:5.7:1.0"])
    async def test_unusable_params_row_fails_load(self, session_factory, presets, params):
        presets.set_slot(1, [presets.factory.create("SMA", "0", "AAPL", Timeframe.DAILY, [1, 5, 1.0])])
        async with session_factory() as session:
            async with session.begin():
                session.add(
                    ChartPreset(user_id="alice", preset_id=2, symbol="AAPL", type="SMA", params=params)
                )

        with pytest.raises(UnknownIndicatorError):
            await presets.load()
        assert list(presets.get_slot(1)) == ["0"]

    @pytest.mark.asyncio
    async def test_symbol_is_normalized(self, session_factory, factory, presets, manager):
        presets.set_slot(1, manager.get_all().values())
        assert await presets.store()

        lower = PresetManager(session_factory, factory, "alice", "aapl")
        await lower.load()
        assert lower.symbol == "AAPL"
        assert list(lower.get_slot(1)) == ["0", "1"]
