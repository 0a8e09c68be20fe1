"""MarketEngine — оркестратор covered-call AMM.

Операции: create_pool / deposit / withdraw / allocate / remove / swap /
accrue_time, плюс read-only запросы (query_invariant, pool_phase, snapshot).

Каждая мутирующая операция — атомарная единица работы:
1. Захват ReentrancyGuard (повторный вход → Reentrant)
2. Снимок состояния (реестр, позиции, маржа, внешний реестр активов)
3. Валидация → мутации → settlement callback → проверка баланса
4. Любое исключение → откат снимка целиком и проброс исключения
5. Успех → публикация событий (после освобождения guard)

Своп (state machine):
1. delta_in == 0 → ZeroInput, delta_out == 0 → ZeroOutput
2. accrue_time; now > last_accrual + grace_period → PoolExpired
3. I_before по текущим резервам на единицу ликвидности
4. delta_in_effective = delta_in * gamma / BPS; 0 после комиссии → ZeroInput
5. Кандидатные резервы (вход + effective, выход - delta_out) / L
6. I_after по кандидатным резервам
7. I_after < I_before - tolerance_for(calibration) → InvariantViolation
8. Фиксация резервов (вход целиком остаётся в пуле)
9. Выплата выхода (маржа или внешний перевод), сбор входа
   (маржа или callback + проверка баланса → BalanceShortfall)
10. SwapEvent
"""

import logging
import uuid
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional, Tuple

from src.amm.clock import Clock, SystemClock
from src.amm.errors import (
    BalanceShortfall,
    DuplicatePool,
    InvalidCalibration,
    InvariantViolation,
    PoolExpired,
    ZeroInput,
    ZeroLiquidity,
    ZeroOutput,
)
from src.amm.guard import ReentrancyGuard
from src.amm.ledger import ReserveLedger
from src.amm.lifecycle import DEFAULT_GRACE_PERIOD, PhaseResult, PoolLifecycle
from src.amm.margin import MarginAccount
from src.amm.registry import PoolRegistry
from src.amm.settlement import AssetLedger, SettlementCallback, SettlementRequest
from src.core.contracts.validators import validate_engine_event, validate_pool_snapshot
from src.core.domain.calibration import (
    MAX_FEE_BPS,
    MAX_VOLATILITY_BPS,
    MIN_VOLATILITY_BPS,
    Calibration,
    derive_pool_id,
)
from src.core.domain.events import (
    AccrueTimeEvent,
    AllocateEvent,
    CreateEvent,
    DepositEvent,
    EngineEvent,
    RemoveEvent,
    SwapEvent,
    WithdrawEvent,
)
from src.core.domain.margin import MarginBalance
from src.core.domain.position import LiquidityPosition
from src.core.domain.reserve import ReserveState
from src.core.math.fixed_point import (
    BPS,
    WAD,
    checked_add,
    checked_sub,
    mul_div_down,
    mul_div_up,
    scale_down_up,
    scale_factor_for,
    scale_up,
)
from src.core.math.replication import invariant, solve_complementary_amount

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Допуск проверки инварианта (WAD): 1e-12 в нормированных единицах
DEFAULT_INVARIANT_TOLERANCE = 10**6

# Допуск не меньше strike >> 50: ~4 ulp double на масштабе страйка
STRIKE_TOLERANCE_SHIFT = 50

# Глубина истории опубликованных событий
DEFAULT_EVENT_HISTORY = 10_000


# =============================================================================
# CONFIG / RESULTS
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Конфигурация движка.

    Attributes:
        grace_period: окно после maturity, в котором свопы разрешены (секунды)
        invariant_tolerance: нижняя граница допуска уменьшения инварианта при свопе
            (WAD); для пула допуск = max(invariant_tolerance, strike >> 50)
        engine_id: идентификатор экземпляра (входит в PoolId, адрес во внешнем реестре)
        validate_contracts: проверять события JSON Schema контрактами перед публикацией
        event_history: сколько последних событий хранить в MarketEngine.events
    """

    grace_period: int = DEFAULT_GRACE_PERIOD
    invariant_tolerance: int = DEFAULT_INVARIANT_TOLERANCE
    engine_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    validate_contracts: bool = False
    event_history: int = DEFAULT_EVENT_HISTORY

    def __post_init__(self) -> None:
        if self.grace_period < 0:
            raise ValueError(f"grace_period must be non-negative, got {self.grace_period}")
        if self.invariant_tolerance < 0:
            raise ValueError(
                f"invariant_tolerance must be non-negative, got {self.invariant_tolerance}"
            )
        if self.event_history < 1:
            raise ValueError(f"event_history must be positive, got {self.event_history}")
        if not self.engine_id:
            raise ValueError("engine_id must be non-empty")


@dataclass(frozen=True)
class CreateResult:
    """Результат создания пула."""

    pool_id: str
    delta_quote: int
    delta_base: int
    delta_liquidity: int  # начислено создателю (без burned)
    burned_liquidity: int


# =============================================================================
# ENGINE
# =============================================================================


class MarketEngine:
    """Covered-call AMM над одной парой активов.

    Args:
        ledger: внешний реестр активов
        quote_asset: имя актива quote во внешнем реестре
        base_asset: имя актива base во внешнем реестре
        quote_decimals: decimals quote (0..18)
        base_decimals: decimals base (0..18)
        config: конфигурация движка
        clock: источник времени (по умолчанию системное время)
    """

    def __init__(
        self,
        ledger: AssetLedger,
        quote_asset: str = "QUOTE",
        base_asset: str = "BASE",
        quote_decimals: int = 18,
        base_decimals: int = 18,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ):
        if quote_asset == base_asset:
            raise ValueError(f"quote and base assets must differ, got {quote_asset}")

        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self.ledger = ledger
        self.quote_asset = quote_asset
        self.base_asset = base_asset
        self.engine_id = self.config.engine_id
        self.address = self.engine_id

        self.quote_scale = scale_factor_for(quote_decimals)
        self.base_scale = scale_factor_for(base_decimals)
        # Сжигается при создании каждого пула
        self.min_liquidity = 10 ** (min(quote_decimals, base_decimals) // 2)

        self.registry = PoolRegistry(self.quote_scale, self.base_scale)
        self.reserves = ReserveLedger(self.registry)
        self.margins = MarginAccount()
        self.lifecycle = PoolLifecycle(self.config.grace_period)

        self._guard = ReentrancyGuard()
        self._pending_events: List[EngineEvent] = []
        self._listeners: List[Callable[[EngineEvent], None]] = []
        self.events: Deque[EngineEvent] = deque(maxlen=self.config.event_history)

    # -------------------------------------------------------------------------
    # Единица работы
    # -------------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._guard.busy

    def subscribe(self, listener: Callable[[EngineEvent], None]) -> None:
        """Подписка на события (вызывается после фиксации операции)."""
        self._listeners.append(listener)

    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[None]:
        with self._guard.hold(operation):
            checkpoint = self._checkpoint()
            self._pending_events = []
            try:
                yield
            except Exception as e:
                self._rollback(checkpoint)
                logger.warning(f"{operation} rolled back: {type(e).__name__}: {e}")
                raise
            events, self._pending_events = self._pending_events, []
        self._publish(events)

    def _checkpoint(self) -> Tuple[Any, ...]:
        return (
            self.registry.snapshot(),
            self.reserves.snapshot(),
            self.margins.snapshot(),
            self.ledger.snapshot(),
        )

    def _rollback(self, checkpoint: Tuple[Any, ...]) -> None:
        registry, positions, margins, ledger = checkpoint
        self.registry.restore(registry)
        self.reserves.restore(positions)
        self.margins.restore(margins)
        self.ledger.restore(ledger)
        self._pending_events = []

    def _emit(self, event: EngineEvent) -> None:
        if self.config.validate_contracts:
            validate_engine_event(event.model_dump(mode="json"))
        self._pending_events.append(event)

    def _publish(self, events: List[EngineEvent]) -> None:
        """
        История и лог получают все события до вызова подписчиков.
        Каждый подписчик получает каждое событие; первое исключение подписчика
        пробрасывается после полного обхода.
        """
        for event in events:
            self.events.append(event)
            logger.info(
                f"{event.event_type.value}: "
                f"{event.model_dump(exclude={'event_type', 'engine_id'})}"
            )

        errors: List[Exception] = []
        for event in events:
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception as e:
                    logger.error(
                        f"Listener failed on {event.event_type.value}: {type(e).__name__}: {e}"
                    )
                    errors.append(e)
        if errors:
            raise errors[0]

    def tolerance_for(self, calibration: Calibration) -> int:
        """Допуск проверки инварианта для пула (WAD на единицу ликвидности)."""
        return max(
            self.config.invariant_tolerance, calibration.strike >> STRIKE_TOLERANCE_SHIFT
        )

    # -------------------------------------------------------------------------
    # Settlement
    # -------------------------------------------------------------------------

    def _settle_external(
        self,
        payer: str,
        quote_owed: int,
        base_owed: int,
        callback: Optional[SettlementCallback],
        operation: str,
    ) -> None:
        """Сбор средств через callback с проверкой баланса движка после него.

        Raises:
            BalanceShortfall: если баланс движка вырос меньше, чем на owed
        """
        quote_before = self.ledger.balance_of(self.quote_asset, self.address)
        base_before = self.ledger.balance_of(self.base_asset, self.address)

        if callback is not None:
            callback.settle(
                SettlementRequest(
                    operation=operation,
                    payer=payer,
                    pay_to=self.address,
                    quote_asset=self.quote_asset,
                    base_asset=self.base_asset,
                    quote_owed=quote_owed,
                    base_owed=base_owed,
                )
            )

        if quote_owed > 0:
            self._check_balance(self.quote_asset, quote_before + quote_owed)
        if base_owed > 0:
            self._check_balance(self.base_asset, base_before + base_owed)

    def _check_balance(self, asset: str, expected: int) -> None:
        observed = self.ledger.balance_of(asset, self.address)
        if observed < expected:
            raise BalanceShortfall(asset, expected, observed)

    def _collect(
        self,
        payer: str,
        quote_owed: int,
        base_owed: int,
        use_margin: bool,
        callback: Optional[SettlementCallback],
        operation: str,
    ) -> None:
        if use_margin:
            self.margins.debit(payer, quote_owed, base_owed)
        else:
            self._settle_external(payer, quote_owed, base_owed, callback, operation)

    def _pay_out(self, recipient: str, delta_quote: int, delta_base: int) -> None:
        if delta_quote > 0:
            self.ledger.transfer(self.quote_asset, self.address, recipient, delta_quote)
        if delta_base > 0:
            self.ledger.transfer(self.base_asset, self.address, recipient, delta_base)

    # -------------------------------------------------------------------------
    # Валидация
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_non_negative(**amounts: int) -> None:
        for name, value in amounts.items():
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def _validate_calibration(strike: int, volatility: int, fee: int) -> None:
        """
        Raises:
            InvalidCalibration: если параметр вне допустимого диапазона
        """
        if strike <= 0:
            raise InvalidCalibration(f"strike must be positive, got {strike}")
        if not MIN_VOLATILITY_BPS <= volatility <= MAX_VOLATILITY_BPS:
            raise InvalidCalibration(
                f"volatility must be in [{MIN_VOLATILITY_BPS}, {MAX_VOLATILITY_BPS}] bps, "
                f"got {volatility}"
            )
        if not 0 <= fee <= MAX_FEE_BPS:
            raise InvalidCalibration(f"fee must be in [0, {MAX_FEE_BPS}] bps, got {fee}")

    # -------------------------------------------------------------------------
    # Время
    # -------------------------------------------------------------------------

    def _accrue(self, pool_id: str, now: int) -> int:
        last_accrual = self.registry.accrue(pool_id, now)
        self._emit(
            AccrueTimeEvent(
                engine_id=self.engine_id,
                timestamp=now,
                pool_id=pool_id,
                last_accrual=last_accrual,
            )
        )
        return last_accrual

    def accrue_time(self, pool_id: str) -> int:
        """Продвижение last_accrual пула к min(now, maturity).

        Returns:
            Новый last_accrual (монотонно не убывает, не превышает maturity)

        Raises:
            Uninitialized: если пул не создавался
        """
        with self._unit_of_work("accrue_time"):
            last_accrual = self._accrue(pool_id, self.clock.now())
        return last_accrual

    # -------------------------------------------------------------------------
    # Пулы
    # -------------------------------------------------------------------------

    def create_pool(
        self,
        owner: str,
        strike: int,
        volatility: int,
        maturity: int,
        fee: int,
        initial_quote: int,
        initial_liquidity: int,
        use_margin: bool = False,
        callback: Optional[SettlementCallback] = None,
    ) -> CreateResult:
        """Создание пула.

        Резерв base выводится из quote через solve_complementary_amount так,
        чтобы пул стартовал на кривой (I ≈ 0).

        Args:
            owner: создатель (получает ликвидность и платит резервы)
            strike: страйк (WAD, base за 1 quote)
            volatility: годовая волатильность (bps)
            maturity: время экспирации (unix, секунды)
            fee: комиссия свопа (bps)
            initial_quote: начальный резерв quote (нативные единицы)
            initial_liquidity: начальная ликвидность (включая burned минимум)
            use_margin: списать резервы с маржи owner вместо callback
            callback: платёжный callback

        Raises:
            InvalidCalibration: параметры вне диапазона
            ZeroLiquidity: initial_liquidity <= min_liquidity
            DuplicatePool: пул с такой калибровкой уже есть
            PoolExpired: maturity уже наступила
            BalanceShortfall / InsufficientMargin: резервы не оплачены
        """
        with self._unit_of_work("create_pool"):
            self._require_non_negative(
                initial_quote=initial_quote, initial_liquidity=initial_liquidity
            )
            self._validate_calibration(strike, volatility, fee)
            if initial_liquidity <= self.min_liquidity:
                raise ZeroLiquidity(
                    f"initial_liquidity must exceed {self.min_liquidity}, "
                    f"got {initial_liquidity}"
                )

            quote_per_l = mul_div_down(
                scale_up(initial_quote, self.quote_scale), WAD, initial_liquidity
            )
            if not 0 < quote_per_l < WAD:
                raise InvalidCalibration(
                    f"quote per liquidity must be in (0, 1), got {quote_per_l / WAD:.18f}"
                )

            pool_id = derive_pool_id(self.engine_id, strike, volatility, maturity, fee)
            # DuplicatePool до проверки времени: повторное создание всегда дубликат
            if pool_id in self.registry:
                raise DuplicatePool(f"Pool {pool_id} already exists")

            now = self.clock.now()
            if now >= maturity:
                raise PoolExpired(f"maturity {maturity} is not after now {now}")

            base_per_l = solve_complementary_amount(
                quote_per_l, strike, volatility, maturity - now, solving_for_base=True
            )
            initial_base = scale_down_up(
                mul_div_up(base_per_l, initial_liquidity, WAD), self.base_scale
            )
            if initial_base == 0:
                raise InvalidCalibration("calibration yields a zero base reserve")

            self.registry.create(
                pool_id,
                Calibration(
                    strike=strike,
                    volatility=volatility,
                    maturity=maturity,
                    last_accrual=now,
                    fee=fee,
                ),
                ReserveState(
                    reserve_quote=initial_quote,
                    reserve_base=initial_base,
                    liquidity_supply=initial_liquidity,
                    last_accrual=now,
                    last_update=now,
                ),
            )
            owner_liquidity = initial_liquidity - self.min_liquidity
            self.reserves.credit_position(owner, pool_id, owner_liquidity)

            self._collect(
                owner, initial_quote, initial_base, use_margin, callback, "create_pool"
            )

            self._emit(
                CreateEvent(
                    engine_id=self.engine_id,
                    timestamp=now,
                    owner=owner,
                    pool_id=pool_id,
                    strike=strike,
                    volatility=volatility,
                    maturity=maturity,
                    fee=fee,
                    delta_quote=initial_quote,
                    delta_base=initial_base,
                    delta_liquidity=owner_liquidity,
                )
            )

        return CreateResult(
            pool_id=pool_id,
            delta_quote=initial_quote,
            delta_base=initial_base,
            delta_liquidity=owner_liquidity,
            burned_liquidity=self.min_liquidity,
        )

    # -------------------------------------------------------------------------
    # Маржа
    # -------------------------------------------------------------------------

    def deposit(
        self,
        owner: str,
        delta_quote: int,
        delta_base: int,
        callback: Optional[SettlementCallback] = None,
    ) -> MarginBalance:
        """Зачисление на маржу после доставки средств callback.

        Raises:
            ZeroInput: обе суммы нулевые
            BalanceShortfall: callback не доставил средства
        """
        with self._unit_of_work("deposit"):
            self._require_non_negative(delta_quote=delta_quote, delta_base=delta_base)
            if delta_quote == 0 and delta_base == 0:
                raise ZeroInput("deposit requires a non-zero amount")

            self._settle_external(owner, delta_quote, delta_base, callback, "deposit")
            balance = self.margins.credit(owner, delta_quote, delta_base)

            self._emit(
                DepositEvent(
                    engine_id=self.engine_id,
                    timestamp=self.clock.now(),
                    owner=owner,
                    delta_quote=delta_quote,
                    delta_base=delta_base,
                )
            )
        return balance

    def withdraw(
        self,
        owner: str,
        delta_quote: int,
        delta_base: int,
        recipient: Optional[str] = None,
    ) -> MarginBalance:
        """Списание с маржи и внешний перевод получателю.

        Raises:
            ZeroInput: обе суммы нулевые
            InsufficientMargin: баланса не хватает
        """
        recipient = recipient or owner
        with self._unit_of_work("withdraw"):
            self._require_non_negative(delta_quote=delta_quote, delta_base=delta_base)
            if delta_quote == 0 and delta_base == 0:
                raise ZeroInput("withdraw requires a non-zero amount")

            balance = self.margins.debit(owner, delta_quote, delta_base)
            self._pay_out(recipient, delta_quote, delta_base)

            self._emit(
                WithdrawEvent(
                    engine_id=self.engine_id,
                    timestamp=self.clock.now(),
                    owner=owner,
                    recipient=recipient,
                    delta_quote=delta_quote,
                    delta_base=delta_base,
                )
            )
        return balance

    # -------------------------------------------------------------------------
    # Ликвидность
    # -------------------------------------------------------------------------

    def allocate(
        self,
        pool_id: str,
        owner: str,
        delta_quote: int,
        delta_base: int,
        use_margin: bool = False,
        callback: Optional[SettlementCallback] = None,
    ) -> int:
        """Добавление ликвидности.

        Непропорциональный излишек остаётся в пуле как пожертвование.

        Returns:
            Начисленная ликвидность

        Raises:
            ZeroInput / Uninitialized / ZeroLiquidity
            BalanceShortfall / InsufficientMargin
        """
        with self._unit_of_work("allocate"):
            self._require_non_negative(delta_quote=delta_quote, delta_base=delta_base)
            now = self.clock.now()
            delta_liquidity = self.reserves.allocate(
                pool_id, owner, delta_quote, delta_base, now
            )
            self._collect(owner, delta_quote, delta_base, use_margin, callback, "allocate")

            self._emit(
                AllocateEvent(
                    engine_id=self.engine_id,
                    timestamp=now,
                    owner=owner,
                    pool_id=pool_id,
                    delta_quote=delta_quote,
                    delta_base=delta_base,
                    delta_liquidity=delta_liquidity,
                    from_margin=use_margin,
                )
            )
        return delta_liquidity

    def remove(self, pool_id: str, owner: str, delta_liquidity: int) -> Tuple[int, int]:
        """Изъятие ликвидности с зачислением выручки на маржу owner.

        Returns:
            (delta_quote, delta_base)

        Raises:
            ZeroLiquidity / Uninitialized / InsufficientLiquidity
        """
        with self._unit_of_work("remove"):
            now = self.clock.now()
            delta_quote, delta_base = self.reserves.remove(
                pool_id, owner, delta_liquidity, now
            )
            self.margins.credit(owner, delta_quote, delta_base)

            self._emit(
                RemoveEvent(
                    engine_id=self.engine_id,
                    timestamp=now,
                    owner=owner,
                    pool_id=pool_id,
                    delta_quote=delta_quote,
                    delta_base=delta_base,
                    delta_liquidity=delta_liquidity,
                )
            )
        return delta_quote, delta_base

    # -------------------------------------------------------------------------
    # Своп
    # -------------------------------------------------------------------------

    def _invariant_at(
        self,
        calibration: Calibration,
        reserve_quote: int,
        reserve_base: int,
        liquidity: int,
    ) -> int:
        quote_per_l, base_per_l = self.registry.per_liquidity(
            reserve_quote, reserve_base, liquidity
        )
        return invariant(
            base_per_l,
            quote_per_l,
            calibration.strike,
            calibration.volatility,
            calibration.tau,
        )

    def swap(
        self,
        pool_id: str,
        owner: str,
        quote_for_base: bool,
        delta_in: int,
        delta_out: int,
        use_margin_in: bool = False,
        use_margin_out: bool = False,
        recipient: Optional[str] = None,
        callback: Optional[SettlementCallback] = None,
    ) -> SwapEvent:
        """Своп против резервов пула.

        Args:
            pool_id: пул
            owner: плательщик входа
            quote_for_base: True — вход quote, выход base
            delta_in: сумма входа (до комиссии)
            delta_out: запрошенная сумма выхода
            use_margin_in: списать вход с маржи owner
            use_margin_out: зачислить выход на маржу recipient
            recipient: получатель выхода (по умолчанию owner)
            callback: платёжный callback для входа

        Returns:
            SwapEvent с полной детализацией

        Raises:
            ZeroInput / ZeroOutput / Uninitialized / PoolExpired
            InvariantViolation / InsufficientMargin / BalanceShortfall
            FixedPointError: delta_out больше резерва
        """
        recipient = recipient or owner
        with self._unit_of_work("swap"):
            self._require_non_negative(delta_in=delta_in, delta_out=delta_out)
            if delta_in == 0:
                raise ZeroInput("swap requires delta_in > 0")
            if delta_out == 0:
                raise ZeroOutput("swap requires delta_out > 0")

            now = self.clock.now()
            last_accrual = self._accrue(pool_id, now)
            if now > last_accrual + self.config.grace_period:
                raise PoolExpired(
                    f"pool {pool_id[:12]} frozen: now {now} > "
                    f"{last_accrual} + grace {self.config.grace_period}"
                )

            calibration = self.registry.calibration(pool_id)
            reserve = self.registry.reserve(pool_id)
            invariant_before = self._invariant_at(
                calibration,
                reserve.reserve_quote,
                reserve.reserve_base,
                reserve.liquidity_supply,
            )

            delta_in_effective = mul_div_down(delta_in, calibration.gamma, BPS)
            if delta_in_effective == 0:
                raise ZeroInput(f"swap input {delta_in} is zero after fee {calibration.fee} bps")
            if quote_for_base:
                adjusted_quote = checked_add(reserve.reserve_quote, delta_in_effective)
                adjusted_base = checked_sub(reserve.reserve_base, delta_out, "reserve_base")
            else:
                adjusted_base = checked_add(reserve.reserve_base, delta_in_effective)
                adjusted_quote = checked_sub(reserve.reserve_quote, delta_out, "reserve_quote")

            invariant_after = self._invariant_at(
                calibration, adjusted_quote, adjusted_base, reserve.liquidity_supply
            )
            logger.debug(
                f"Swap {pool_id[:12]}: I_before={invariant_before} "
                f"I_after={invariant_after} tau={calibration.tau}"
            )
            if invariant_after < invariant_before - self.tolerance_for(calibration):
                raise InvariantViolation(invariant_before, invariant_after)

            self.reserves.swap(pool_id, quote_for_base, delta_in, delta_out, now)

            if quote_for_base:
                out_quote, out_base, in_quote, in_base = 0, delta_out, delta_in, 0
            else:
                out_quote, out_base, in_quote, in_base = delta_out, 0, 0, delta_in

            if use_margin_out:
                self.margins.credit(recipient, out_quote, out_base)
            else:
                self._pay_out(recipient, out_quote, out_base)

            self._collect(owner, in_quote, in_base, use_margin_in, callback, "swap")

            event = SwapEvent(
                engine_id=self.engine_id,
                timestamp=now,
                owner=owner,
                recipient=recipient,
                pool_id=pool_id,
                quote_for_base=quote_for_base,
                delta_in=delta_in,
                delta_in_effective=delta_in_effective,
                delta_out=delta_out,
                from_margin=use_margin_in,
                to_margin=use_margin_out,
                invariant_before=invariant_before,
                invariant_after=invariant_after,
                last_accrual=last_accrual,
            )
            self._emit(event)
        return event

    # -------------------------------------------------------------------------
    # Запросы (read-only, без guard)
    # -------------------------------------------------------------------------

    def query_invariant(self, pool_id: str) -> int:
        """Текущий инвариант пула (WAD) при сохранённом last_accrual."""
        return self.registry.invariant_of(pool_id)

    def spot_price(self, pool_id: str) -> int:
        """Маржинальная цена quote в base (WAD)."""
        return self.registry.spot_price_of(pool_id)

    def calibration_of(self, pool_id: str) -> Calibration:
        return self.registry.calibration(pool_id)

    def reserve_of(self, pool_id: str) -> ReserveState:
        return self.registry.reserve(pool_id)

    def position_of(self, owner: str, pool_id: str) -> LiquidityPosition:
        return self.reserves.position(owner, pool_id)

    def margin_of(self, owner: str) -> MarginBalance:
        return self.margins.balance_of(owner)

    def pool_phase(self, pool_id: str) -> PhaseResult:
        calibration = self.registry.calibration(pool_id) if pool_id in self.registry else None
        return self.lifecycle.evaluate(calibration, self.clock.now())

    def snapshot(self, pool_id: str) -> Dict[str, Any]:
        """JSON-совместимый снапшот пула (контракт pool_snapshot)."""
        data = {
            "engine_id": self.engine_id,
            "pool_id": pool_id,
            "phase": self.pool_phase(pool_id).phase.value,
            "timestamp": self.clock.now(),
            "invariant": self.query_invariant(pool_id),
            "calibration": self.registry.calibration(pool_id).model_dump(mode="json"),
            "reserve": self.registry.reserve(pool_id).model_dump(mode="json"),
        }
        if self.config.validate_contracts:
            validate_pool_snapshot(data)
        return data
