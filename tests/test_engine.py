import dataclasses
import random

import pytest

from conftest import ScriptedRandom
from hit_trader.core.config_models import EngineConfig
from hit_trader.core.exceptions import (
    EngineClosed,
    InvalidSwapAmount,
    InvalidSwapPair,
    StakeLockActive,
)
from hit_trader.engine import TradingEngine
from hit_trader.paper.wallet_types import Asset, Wallet
from hit_trader.staking.stake_controller import StakeState


def test_flat_engine_starts_at_initial_price(flat_engine):
    snap = flat_engine.get_snapshot()
    assert snap.current_price == 420.69
    assert len(snap.history) == 200
    assert snap.wallet == Wallet(hit=0.0069, faux_usd=420.0)
    assert snap.stake_state is StakeState.IDLE
    assert snap.stake_lock is None
    assert snap.auto_trade.enabled is False
    assert snap.notification is None


def test_manual_swap_all_faux_usd(flat_engine):
    result = flat_engine.manual_swap("FauxUSD", "$HIT", 420)
    assert result.applied_amount == 420
    assert result.received_amount == pytest.approx(420 / 420.69)
    wallet = flat_engine.get_snapshot().wallet
    assert wallet.hit == pytest.approx(0.0069 + 420 / 420.69)
    assert wallet.faux_usd == 0.0
    assert flat_engine.journal.count("SwapExecuted") == 1


def test_manual_swap_reports_capped_amount(flat_engine):
    result = flat_engine.manual_swap(Asset.FAUX_USD, Asset.HIT, "1000")
    assert result.applied_amount == 420.0


def test_manual_swap_errors_leave_wallet_alone(flat_engine):
    before = flat_engine.get_snapshot().wallet
    with pytest.raises(InvalidSwapPair):
        flat_engine.manual_swap("$HIT", "$HIT", 1)
    with pytest.raises(InvalidSwapAmount):
        flat_engine.manual_swap("FauxUSD", "$HIT", "lots")
    with pytest.raises(InvalidSwapAmount):
        flat_engine.manual_swap("FauxUSD", "$HIT", -5)
    assert flat_engine.get_snapshot().wallet == before
    assert len(flat_engine.journal) == 0


def test_snapshot_is_detached_from_engine(flat_engine):
    snap = flat_engine.get_snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.current_price = 1.0
    snap.wallet.hit = 1000.0
    assert flat_engine.get_snapshot().wallet.hit == 0.0069


def test_quote_and_presets(flat_engine):
    assert flat_engine.quote("FauxUSD", "HIT", 420.69) == pytest.approx(1.0)
    assert flat_engine.quote("HIT", "FauxUSD", "2") == pytest.approx(841.38)
    with pytest.raises(InvalidSwapPair):
        flat_engine.quote("HIT", "HIT", 1)
    assert flat_engine.preset_amount("FauxUSD") == 420.0
    assert flat_engine.preset_amount("FauxUSD", 0.25) == 105.0
    assert flat_engine.preset_amount("$HIT", 0.5) == 0.00345
    with pytest.raises(ValueError):
        flat_engine.preset_amount("FauxUSD", 0)
    # quoting never touches the wallet
    assert flat_engine.get_snapshot().wallet == Wallet(hit=0.0069, faux_usd=420.0)


def test_stake_cycle_through_engine(flat_engine):
    outcome = flat_engine.trigger_stake(rng=ScriptedRandom([0.05]))
    assert outcome.is_failure
    assert flat_engine.trigger_stake() is None
    assert flat_engine.get_snapshot().stake_lock.remaining_seconds == 10

    for _ in range(10):
        flat_engine.tick_stake()

    snap = flat_engine.get_snapshot()
    assert snap.wallet.hit == pytest.approx(0.00345)
    assert snap.wallet.faux_usd == pytest.approx(210.0)
    assert snap.notification == outcome.message
    assert flat_engine.acknowledge_notification() == outcome.message
    assert flat_engine.get_snapshot().notification is None
    assert flat_engine.journal.count("StakeStarted") == 1
    assert flat_engine.journal.count("StakeResolved") == 1


def test_manual_swap_allowed_during_stake_by_default(flat_engine):
    flat_engine.trigger_stake(rng=ScriptedRandom([0.5]))
    result = flat_engine.manual_swap("FauxUSD", "HIT", 10)
    assert result.applied_amount == 10


def test_manual_swap_can_be_blocked_during_stake():
    cfg = EngineConfig(block_manual_swaps_while_staking=True)
    engine = TradingEngine(cfg, rng=random.Random(4))
    engine.trigger_stake(rng=ScriptedRandom([0.5]))
    with pytest.raises(StakeLockActive):
        engine.manual_swap("FauxUSD", "HIT", 10)
    engine.cancel_stake()
    assert engine.manual_swap("FauxUSD", "HIT", 10).applied_amount == 10


def test_cancel_stake_prevents_payout(flat_engine):
    flat_engine.trigger_stake(rng=ScriptedRandom([0.5]))
    assert flat_engine.cancel_stake()
    for _ in range(120):
        assert flat_engine.tick_stake() is None
    assert flat_engine.get_snapshot().wallet == Wallet(hit=0.0069, faux_usd=420.0)
    assert flat_engine.journal.count("StakeCancelled") == 1


def test_auto_trade_via_engine_follows_price_vs_sma():
    engine = TradingEngine(rng=random.Random(21))
    engine.set_auto_trade(True, 0.5)
    for i in range(40):
        engine.tick_price(now=float(i))
        before = engine.get_snapshot()
        average = engine.indicator()[-1]
        decision = engine.tick_auto_trade()
        if before.current_price > average and before.wallet.faux_usd > 0:
            assert decision.side == "BUY"
        elif before.current_price < average and before.wallet.hit > 0:
            assert decision.side == "SELL"
    assert engine.journal.count("AutoTradeExecuted") == engine.auto_trader.executed


def test_set_auto_trade_shows_in_snapshot(flat_engine):
    flat_engine.set_auto_trade(True, 0.3)
    assert flat_engine.get_snapshot().auto_trade.proportion == 0.3


def test_drain_scales_wallet(flat_engine):
    wallet = flat_engine.drain(0.5)
    assert wallet == Wallet(hit=0.00345, faux_usd=210.0)
    assert flat_engine.journal.count("WalletDrained") == 1


def test_trend_reflects_price_against_sma():
    engine = TradingEngine(rng=random.Random(2))
    snap = engine.get_snapshot()
    average = engine.indicator()[-1]
    assert snap.trend == ("above" if snap.current_price >= average else "below")


def test_close_stops_every_tick(flat_engine):
    flat_engine.trigger_stake(rng=ScriptedRandom([0.05]))
    flat_engine.set_auto_trade(True, 1.0)
    flat_engine.close()

    assert flat_engine.tick_price() is None
    assert flat_engine.tick_stake() is None
    assert flat_engine.tick_auto_trade() is None
    assert flat_engine.trigger_stake() is None
    snap = flat_engine.get_snapshot()
    assert snap.stake_state is StakeState.IDLE
    assert snap.wallet == Wallet(hit=0.0069, faux_usd=420.0)
    assert len(snap.history) == 200


def test_snapshot_exposes_pending_stake_outcome(flat_engine):
    assert flat_engine.get_snapshot().pending_outcome is None
    assert flat_engine.get_snapshot().expected_reward_pct is None

    outcome = flat_engine.trigger_stake(rng=ScriptedRandom([0.5]))
    snap = flat_engine.get_snapshot()

    assert not outcome.is_failure
    assert snap.pending_outcome == outcome
    assert snap.expected_reward_pct == pytest.approx((outcome.multiplier - 1.0) * 100.0)
    assert round(snap.expected_reward_pct) in (10, 40, 100)

    for _ in range(outcome.lock_seconds):
        flat_engine.tick_stake()
    assert flat_engine.get_snapshot().pending_outcome is None


def test_failed_stake_advertises_smallest_tier_reward(flat_engine):
    outcome = flat_engine.trigger_stake(rng=ScriptedRandom([0.05]))
    snap = flat_engine.get_snapshot()
    assert snap.pending_outcome.is_failure
    assert snap.pending_outcome.multiplier == 0.5
    assert snap.expected_reward_pct == pytest.approx(10.0)
    assert outcome.is_failure


def test_closed_engine_rejects_state_changes(flat_engine):
    flat_engine.close()

    with pytest.raises(EngineClosed):
        flat_engine.manual_swap("FauxUSD", "HIT", 10)
    with pytest.raises(EngineClosed):
        flat_engine.drain(0.5)
    with pytest.raises(EngineClosed):
        flat_engine.set_auto_trade(True, 0.5)

    snap = flat_engine.get_snapshot()
    assert snap.wallet == Wallet(hit=0.0069, faux_usd=420.0)
    assert snap.auto_trade.enabled is False
    assert flat_engine.journal.count("SwapExecuted") == 0
