"""
Тесты для MarketEngine

Проверяемые инварианты:
1. Пул стартует на кривой (I ≈ 0), дубликат → DuplicatePool
2. Принятый своп: I_after >= I_before - tolerance
3. Своп после maturity + grace → PoolExpired при любых суммах
4. Повторный вход из callback → Reentrant, резервы не меняются
5. Недоплата callback → BalanceShortfall, полный откат (включая внешний реестр)
6. События публикуются только после успешной операции
"""

import logging

import pytest

from src.amm import (
    BalanceShortfall,
    DuplicatePool,
    EngineConfig,
    InMemoryAssetLedger,
    InsufficientLiquidity,
    InsufficientMargin,
    InvalidCalibration,
    InvariantViolation,
    ManualClock,
    MarketEngine,
    PayFromAccount,
    PoolExpired,
    Reentrant,
    Uninitialized,
    ZeroInput,
    ZeroLiquidity,
    ZeroOutput,
)
from src.core.domain import EventType, PoolPhase
from src.core.math.fixed_point import WAD, FixedPointError

START = 1_700_000_000
MATURITY = START + 30 * 86_400
STRIKE = 1500 * WAD
VOLATILITY = 8000  # 80%
FEE = 15  # 0.15%
TOLERANCE = STRIKE >> 50  # допуск инварианта для пула с этим страйком
ENGINE_ID = "engine-1"


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def ledger():
    ledger = InMemoryAssetLedger()
    for holder in ("alice", "bob"):
        ledger.mint("QUOTE", holder, 10**30)
        ledger.mint("BASE", holder, 10**30)
    return ledger


@pytest.fixture
def pay(ledger):
    return PayFromAccount(ledger)


@pytest.fixture
def engine(ledger, clock):
    return MarketEngine(
        ledger,
        config=EngineConfig(engine_id=ENGINE_ID, validate_contracts=True),
        clock=clock,
    )


@pytest.fixture
def pool(engine, pay):
    """Пул: страйк 1500, 80%, 30 дней, комиссия 0.15%, 1000 quote на 2000 ликвидности."""
    return engine.create_pool(
        "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1000 * WAD, 2000 * WAD, callback=pay
    )


class ShortPayer:
    """Callback, доставляющий только половину запрошенного."""

    def __init__(self, ledger):
        self.ledger = ledger

    def settle(self, request):
        self.ledger.transfer(
            request.quote_asset, request.payer, request.pay_to, request.quote_owed // 2
        )
        self.ledger.transfer(
            request.base_asset, request.payer, request.pay_to, request.base_owed // 2
        )


class ReentrantPayer:
    """Callback, пытающийся повторно войти в swap."""

    def __init__(self, engine, pool_id):
        self.engine = engine
        self.pool_id = pool_id
        self.attempts = 0

    def settle(self, request):
        self.attempts += 1
        self.engine.swap(self.pool_id, request.payer, True, WAD, WAD)


class NestedCaller:
    """Callback, вызывающий другую мутирующую операцию движка."""

    def __init__(self, action):
        self.action = action
        self.attempts = 0

    def settle(self, request):
        self.attempts += 1
        self.action()


# =============================================================================
# ТЕСТЫ: Создание пула
# =============================================================================


class TestCreatePool:
    """Тесты create_pool."""

    def test_pool_starts_on_curve(self, engine, pool, ledger):
        reserve = engine.reserve_of(pool.pool_id)
        assert reserve.reserve_quote == 1000 * WAD
        assert reserve.reserve_base == pool.delta_base
        assert reserve.liquidity_supply == 2000 * WAD
        assert 0 <= engine.query_invariant(pool.pool_id) <= TOLERANCE

        # 1500 * Φ(-0.8 * sqrt(30 / 365.2425)) ≈ 614 base на единицу ликвидности
        assert 1_200_000 * WAD < pool.delta_base < 1_240_000 * WAD

        assert ledger.balance_of("QUOTE", ENGINE_ID) == 1000 * WAD
        assert ledger.balance_of("BASE", ENGINE_ID) == pool.delta_base

    def test_minimum_liquidity_burned(self, engine, pool):
        assert pool.burned_liquidity == engine.min_liquidity == 10**9
        assert engine.position_of("alice", pool.pool_id).liquidity == 2000 * WAD - 10**9
        assert pool.delta_liquidity == 2000 * WAD - 10**9

    def test_calibration_stored(self, engine, pool):
        calibration = engine.calibration_of(pool.pool_id)
        assert calibration.strike == STRIKE
        assert calibration.last_accrual == START
        assert calibration.tau == 30 * 86_400
        assert engine.pool_phase(pool.pool_id).phase == PoolPhase.ACTIVE

    def test_create_event(self, engine, pool):
        assert [event.event_type for event in engine.events] == [EventType.CREATE]
        assert engine.events[0].pool_id == pool.pool_id

    def test_duplicate_pool(self, engine, pool, pay, ledger):
        balance = ledger.balance_of("QUOTE", "alice")
        with pytest.raises(DuplicatePool):
            engine.create_pool(
                "bob", STRIKE, VOLATILITY, MATURITY, FEE, 10 * WAD, 20 * WAD, callback=pay
            )
        assert ledger.balance_of("QUOTE", "alice") == balance
        assert len(engine.events) == 1

    def test_different_fee_is_different_pool(self, engine, pool, pay):
        other = engine.create_pool(
            "bob", STRIKE, VOLATILITY, MATURITY, 30, 10 * WAD, 20 * WAD, callback=pay
        )
        assert other.pool_id != pool.pool_id
        assert len(engine.registry) == 2

    def test_maturity_in_past(self, engine, pay, clock):
        clock.set(MATURITY)
        with pytest.raises(PoolExpired):
            engine.create_pool(
                "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1000 * WAD, 2000 * WAD, callback=pay
            )

    @pytest.mark.parametrize(
        "strike,volatility,fee",
        [(0, VOLATILITY, FEE), (STRIKE, 0, FEE), (STRIKE, 10_000_001, FEE), (STRIKE, VOLATILITY, 1001)],
    )
    def test_invalid_calibration(self, engine, pay, strike, volatility, fee):
        with pytest.raises(InvalidCalibration):
            engine.create_pool(
                "alice", strike, volatility, MATURITY, fee, 1000 * WAD, 2000 * WAD, callback=pay
            )

    @pytest.mark.parametrize("initial_quote", [0, 2000 * WAD, 3000 * WAD])
    def test_quote_per_liquidity_out_of_range(self, engine, pay, initial_quote):
        with pytest.raises(InvalidCalibration):
            engine.create_pool(
                "alice", STRIKE, VOLATILITY, MATURITY, FEE, initial_quote, 2000 * WAD, callback=pay
            )

    def test_liquidity_not_above_minimum(self, engine, pay):
        with pytest.raises(ZeroLiquidity):
            engine.create_pool(
                "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1, 10**9, callback=pay
            )

    def test_unpaid_creation_rolled_back(self, engine, ledger):
        with pytest.raises(BalanceShortfall):
            engine.create_pool(
                "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1000 * WAD, 2000 * WAD
            )
        assert len(engine.registry) == 0
        assert engine.position_of("alice", "x").liquidity == 0
        assert len(engine.events) == 0

    def test_create_from_margin(self, engine, pay):
        engine.deposit("alice", 2000 * WAD, 2_000_000 * WAD, callback=pay)
        result = engine.create_pool(
            "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1000 * WAD, 2000 * WAD, use_margin=True
        )
        margin = engine.margin_of("alice")
        assert margin.quote == 1000 * WAD
        assert margin.base == 2_000_000 * WAD - result.delta_base

    def test_six_decimal_quote(self, ledger, clock, pay):
        engine = MarketEngine(
            ledger, quote_decimals=6, config=EngineConfig(engine_id="usdc"), clock=clock
        )
        assert engine.min_liquidity == 10**3
        result = engine.create_pool(
            "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1000 * 10**6, 2000 * WAD, callback=pay
        )
        assert engine.reserve_of(result.pool_id).reserve_quote == 1000 * 10**6
        assert 0 <= engine.query_invariant(result.pool_id) <= TOLERANCE


# =============================================================================
# ТЕСТЫ: Своп
# =============================================================================


class TestSwap:
    """Тесты swap."""

    def test_quote_for_base_keeps_invariant(self, engine, pool, ledger, pay):
        quote_before = ledger.balance_of("QUOTE", "bob")
        base_before = ledger.balance_of("BASE", "bob")

        event = engine.swap(pool.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, callback=pay)

        assert event.invariant_after >= event.invariant_before - TOLERANCE
        assert engine.query_invariant(pool.pool_id) >= -TOLERANCE
        assert event.delta_in_effective == 10 * WAD * 9985 // 10_000
        assert ledger.balance_of("QUOTE", "bob") == quote_before - 10 * WAD
        assert ledger.balance_of("BASE", "bob") == base_before + 14_000 * WAD

        reserve = engine.reserve_of(pool.pool_id)
        assert reserve.reserve_quote == 1010 * WAD
        assert reserve.reserve_base == pool.delta_base - 14_000 * WAD

    def test_base_for_quote(self, engine, pool, ledger, pay):
        quote_before = ledger.balance_of("QUOTE", "bob")
        event = engine.swap(pool.pool_id, "bob", False, 1500 * WAD, 9 * WAD // 10, callback=pay)
        assert event.invariant_after >= event.invariant_before - TOLERANCE
        assert ledger.balance_of("QUOTE", "bob") == quote_before + 9 * WAD // 10

    def test_greedy_swap_rejected(self, engine, pool, ledger, pay):
        reserve = engine.reserve_of(pool.pool_id)
        base_before = ledger.balance_of("BASE", "bob")

        with pytest.raises(InvariantViolation) as exc_info:
            engine.swap(pool.pool_id, "bob", True, 10 * WAD, 15_000 * WAD, callback=pay)

        assert exc_info.value.invariant_after < exc_info.value.invariant_before - TOLERANCE
        assert engine.reserve_of(pool.pool_id) == reserve
        assert ledger.balance_of("BASE", "bob") == base_before
        assert EventType.SWAP not in [event.event_type for event in engine.events]

    def test_output_above_reserve(self, engine, pool, pay):
        with pytest.raises(FixedPointError):
            engine.swap(pool.pool_id, "bob", False, WAD, 1001 * WAD, callback=pay)

    def test_zero_amounts(self, engine, pool, pay):
        with pytest.raises(ZeroInput):
            engine.swap(pool.pool_id, "bob", True, 0, WAD, callback=pay)
        with pytest.raises(ZeroOutput):
            engine.swap(pool.pool_id, "bob", True, WAD, 0, callback=pay)

    def test_dust_swaps_rejected(self, engine, pool, ledger, pay):
        """Вход, обнуляемый комиссией, не даёт вывести резервы в пределах допуска."""
        reserve = engine.reserve_of(pool.pool_id)
        invariant = engine.query_invariant(pool.pool_id)
        quote_before = ledger.balance_of("QUOTE", "bob")
        base_before = ledger.balance_of("BASE", "bob")

        for _ in range(50):
            with pytest.raises(ZeroInput, match="zero after fee"):
                engine.swap(pool.pool_id, "bob", True, 1, 10**12, callback=pay)

        assert engine.reserve_of(pool.pool_id) == reserve
        assert engine.query_invariant(pool.pool_id) == invariant
        assert ledger.balance_of("QUOTE", "bob") == quote_before
        assert ledger.balance_of("BASE", "bob") == base_before

    def test_smallest_input_cannot_buy_tolerance(self, engine, pool, pay):
        # 2 wei после комиссии = 1 wei; 1e12 base = 5e8 на единицу ликвидности
        with pytest.raises(InvariantViolation):
            engine.swap(pool.pool_id, "bob", True, 2, 10**12, callback=pay)

    def test_tolerance_for_pool(self, engine, pool):
        calibration = engine.calibration_of(pool.pool_id)
        assert engine.tolerance_for(calibration) == STRIKE >> 50
        assert 10**6 < engine.tolerance_for(calibration) < 2 * 10**6

        low_strike = calibration.model_copy(update={"strike": WAD})
        assert engine.tolerance_for(low_strike) == 10**6

    def test_uninitialized_pool(self, engine, pay):
        with pytest.raises(Uninitialized):
            engine.swap("f" * 64, "bob", True, WAD, WAD, callback=pay)

    def test_swap_within_grace_period(self, engine, pool, clock, pay):
        clock.set(MATURITY + 60)
        assert engine.pool_phase(pool.pool_id).phase == PoolPhase.ACTIVE_EXPIRED

        event = engine.swap(pool.pool_id, "bob", True, WAD, 1400 * WAD, callback=pay)
        assert event.last_accrual == MATURITY
        assert event.invariant_after >= event.invariant_before - TOLERANCE

    @pytest.mark.parametrize(
        "quote_for_base,delta_in,delta_out",
        [(True, WAD, 1), (True, 1000 * WAD, 1000 * WAD), (False, 10**6, 10**6)],
    )
    def test_frozen_pool_rejects_any_swap(
        self, engine, pool, clock, pay, quote_for_base, delta_in, delta_out
    ):
        clock.set(MATURITY + 121)
        assert engine.pool_phase(pool.pool_id).phase == PoolPhase.FROZEN
        with pytest.raises(PoolExpired):
            engine.swap(
                pool.pool_id, "bob", quote_for_base, delta_in, delta_out, callback=pay
            )
        # Неудачный своп не продвигает last_accrual
        assert engine.calibration_of(pool.pool_id).last_accrual == START

    def test_reentrant_swap_rejected(self, engine, pool, ledger):
        reserve = engine.reserve_of(pool.pool_id)
        base_before = ledger.balance_of("BASE", "bob")
        callback = ReentrantPayer(engine, pool.pool_id)

        with pytest.raises(Reentrant):
            engine.swap(pool.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, callback=callback)

        assert callback.attempts == 1
        assert engine.reserve_of(pool.pool_id) == reserve
        assert ledger.balance_of("BASE", "bob") == base_before
        assert not engine.busy

    @pytest.mark.parametrize("operation", ["create_pool", "allocate", "deposit"])
    def test_nested_operation_rejected(self, engine, pool, ledger, operation):
        """Callback любой операции не может вызвать другую мутирующую операцию."""
        nested = {
            "create_pool": lambda: engine.withdraw("alice", WAD, 0),
            "allocate": lambda: engine.remove(pool.pool_id, "alice", WAD),
            "deposit": lambda: engine.accrue_time(pool.pool_id),
        }[operation]
        callback = NestedCaller(nested)
        outer = {
            "create_pool": lambda: engine.create_pool(
                "bob", STRIKE, VOLATILITY, MATURITY, 30, 10 * WAD, 20 * WAD, callback=callback
            ),
            "allocate": lambda: engine.allocate(
                pool.pool_id, "bob", 10 * WAD, 13_000 * WAD, callback=callback
            ),
            "deposit": lambda: engine.deposit("bob", WAD, WAD, callback=callback),
        }[operation]

        balances = ledger.snapshot()
        reserve = engine.reserve_of(pool.pool_id)
        history = len(engine.events)

        with pytest.raises(Reentrant, match=f"re-entered while {operation}"):
            outer()

        assert callback.attempts == 1
        assert ledger.snapshot() == balances
        assert engine.reserve_of(pool.pool_id) == reserve
        assert len(engine.registry) == 1
        assert engine.position_of("bob", pool.pool_id).liquidity == 0
        assert engine.margin_of("bob").is_empty
        assert len(engine.events) == history
        assert not engine.busy

    def test_short_payment_rolled_back(self, engine, pool, ledger, clock):
        reserve = engine.reserve_of(pool.pool_id)
        engine_quote = ledger.balance_of("QUOTE", ENGINE_ID)
        clock.advance(600)

        with pytest.raises(BalanceShortfall) as exc_info:
            engine.swap(
                pool.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, callback=ShortPayer(ledger)
            )

        assert exc_info.value.asset == "QUOTE"
        assert exc_info.value.observed == exc_info.value.expected - 5 * WAD
        assert engine.reserve_of(pool.pool_id) == reserve
        assert engine.calibration_of(pool.pool_id).last_accrual == START
        assert ledger.balance_of("QUOTE", ENGINE_ID) == engine_quote

    def test_swap_through_margin(self, engine, pool, pay):
        engine.deposit("bob", 100 * WAD, 0, callback=pay)
        engine.swap(
            pool.pool_id,
            "bob",
            True,
            10 * WAD,
            14_000 * WAD,
            use_margin_in=True,
            use_margin_out=True,
        )
        margin = engine.margin_of("bob")
        assert (margin.quote, margin.base) == (90 * WAD, 14_000 * WAD)

    def test_swap_margin_shortfall(self, engine, pool):
        with pytest.raises(InsufficientMargin):
            engine.swap(
                pool.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, use_margin_in=True
            )

    def test_recipient_receives_output(self, engine, pool, ledger, pay):
        engine.swap(
            pool.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, recipient="carol", callback=pay
        )
        assert ledger.balance_of("BASE", "carol") == 14_000 * WAD

    def test_rollback_logged(self, engine, pool, pay, caplog):
        with caplog.at_level(logging.WARNING, logger="src.amm.engine"):
            with pytest.raises(InvariantViolation):
                engine.swap(pool.pool_id, "bob", True, 10 * WAD, 15_000 * WAD, callback=pay)
        assert "swap rolled back: InvariantViolation" in caplog.text


# =============================================================================
# ТЕСТЫ: Ликвидность и маржа
# =============================================================================


class TestLiquidity:
    """Тесты allocate / remove."""

    def test_allocate_then_remove(self, engine, pool, pay):
        delta_base = -(-pool.delta_base // 100)
        minted = engine.allocate(pool.pool_id, "bob", 10 * WAD, delta_base, callback=pay)
        assert minted == 20 * WAD

        delta_quote, returned_base = engine.remove(pool.pool_id, "bob", minted)
        assert delta_quote == 10 * WAD
        assert returned_base <= delta_base
        assert engine.margin_of("bob").quote == 10 * WAD
        assert engine.position_of("bob", pool.pool_id).liquidity == 0

    def test_allocate_from_margin_shortfall(self, engine, pool):
        with pytest.raises(InsufficientMargin):
            engine.allocate(pool.pool_id, "bob", 10 * WAD, 13_000 * WAD, use_margin=True)
        assert engine.position_of("bob", pool.pool_id).liquidity == 0

    def test_remove_more_than_position(self, engine, pool):
        with pytest.raises(InsufficientLiquidity):
            engine.remove(pool.pool_id, "bob", WAD)

    def test_remove_allowed_when_frozen(self, engine, pool, clock):
        clock.set(MATURITY + 10_000)
        delta_quote, delta_base = engine.remove(pool.pool_id, "alice", WAD)
        assert delta_quote > 0 and delta_base > 0


class TestMargin:
    """Тесты deposit / withdraw."""

    def test_deposit_withdraw(self, engine, ledger, pay):
        engine.deposit("bob", 5 * WAD, 7 * WAD, callback=pay)
        balance = engine.withdraw("bob", 5 * WAD, 2 * WAD, recipient="carol")
        assert (balance.quote, balance.base) == (0, 5 * WAD)
        assert ledger.balance_of("QUOTE", "carol") == 5 * WAD
        assert ledger.balance_of("BASE", "carol") == 2 * WAD

    def test_zero_deposit(self, engine, pay):
        with pytest.raises(ZeroInput):
            engine.deposit("bob", 0, 0, callback=pay)
        with pytest.raises(ZeroInput):
            engine.withdraw("bob", 0, 0)

    def test_negative_amount(self, engine, pay):
        with pytest.raises(ValueError, match="non-negative"):
            engine.deposit("bob", -1, 5, callback=pay)

    def test_unpaid_deposit(self, engine):
        with pytest.raises(BalanceShortfall):
            engine.deposit("bob", WAD, 0)
        assert engine.margin_of("bob").is_empty

    def test_overdraft(self, engine, pay):
        engine.deposit("bob", WAD, 0, callback=pay)
        with pytest.raises(InsufficientMargin):
            engine.withdraw("bob", 2 * WAD, 0)
        assert engine.margin_of("bob").quote == WAD


# =============================================================================
# ТЕСТЫ: Время, запросы, события
# =============================================================================


class TestAccrueTime:
    """Тесты accrue_time."""

    def test_monotonic_and_capped(self, engine, pool, clock):
        observed = []
        for step in (100, 86_400, 40 * 86_400, 1):
            clock.advance(step)
            observed.append(engine.accrue_time(pool.pool_id))
        assert observed == sorted(observed)
        assert observed[-1] == MATURITY
        assert all(value <= MATURITY for value in observed)

    def test_uninitialized(self, engine):
        with pytest.raises(Uninitialized):
            engine.accrue_time("f" * 64)


class TestQueries:
    """Тесты read-only запросов."""

    def test_snapshot(self, engine, pool):
        snapshot = engine.snapshot(pool.pool_id)
        assert snapshot["phase"] == "ACTIVE"
        assert snapshot["reserve"]["reserve_quote"] == 1000 * WAD
        assert snapshot["calibration"]["fee"] == FEE

    def test_spot_price(self, engine, pool):
        assert 1400 * WAD < engine.spot_price(pool.pool_id) < STRIKE

    def test_unknown_pool_phase(self, engine):
        assert engine.pool_phase("f" * 64).phase == PoolPhase.UNINITIALIZED


class TestEvents:
    """Тесты публикации событий."""

    def test_listener_receives_committed_events(self, engine, pay):
        received = []
        engine.subscribe(received.append)
        result = engine.create_pool(
            "alice", STRIKE, VOLATILITY, MATURITY, FEE, 1000 * WAD, 2000 * WAD, callback=pay
        )
        engine.swap(result.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, callback=pay)

        assert [event.event_type for event in received] == [
            EventType.CREATE,
            EventType.ACCRUE_TIME,
            EventType.SWAP,
        ]

    def test_no_events_on_failure(self, engine, pool, pay):
        received = []
        engine.subscribe(received.append)
        with pytest.raises(InvariantViolation):
            engine.swap(pool.pool_id, "bob", True, 10 * WAD, 15_000 * WAD, callback=pay)
        assert received == []

    def test_failing_listener_does_not_hide_events(self, engine, pool, pay, caplog):
        received = []

        def broken(event):
            raise RuntimeError("listener down")

        engine.subscribe(broken)
        engine.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="src.amm.engine"):
            with pytest.raises(RuntimeError, match="listener down"):
                engine.swap(pool.pool_id, "bob", True, 10 * WAD, 14_000 * WAD, callback=pay)

        assert [event.event_type for event in engine.events] == [
            EventType.CREATE,
            EventType.ACCRUE_TIME,
            EventType.SWAP,
        ]
        assert [event.event_type for event in received] == [
            EventType.ACCRUE_TIME,
            EventType.SWAP,
        ]
        assert engine.reserve_of(pool.pool_id).reserve_quote == 1010 * WAD
        assert "Listener failed on SWAP" in caplog.text
        assert not engine.busy

    def test_history_is_bounded(self, ledger, clock, pay):
        engine = MarketEngine(
            ledger, config=EngineConfig(engine_id="short", event_history=2), clock=clock
        )
        for amount in (1, 2, 3):
            engine.deposit("bob", amount, 0, callback=pay)

        assert len(engine.events) == 2
        assert [event.delta_quote for event in engine.events] == [2, 3]


class TestEngineConfig:
    """Тесты EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.grace_period == 120
        assert config.invariant_tolerance == 10**6
        assert config.event_history == 10_000
        assert len(config.engine_id) == 32

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"grace_period": -1},
            {"invariant_tolerance": -1},
            {"engine_id": ""},
            {"event_history": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_same_assets_rejected(self, ledger):
        with pytest.raises(ValueError):
            MarketEngine(ledger, quote_asset="X", base_asset="X")
