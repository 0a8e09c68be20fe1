"""
Settlement — граница с внешним реестром активов и платёжными callback.

AssetLedger — непрозрачный реестр, который движок дебетует/кредитует.
Он участвует в той же единице работы: snapshot()/restore() позволяют
откатить внешние переводы вместе с состоянием движка.

SettlementCallback — код вызывающего, который доставляет средства движку
во время операции. Считается недоверенным: может пытаться повторно войти
в движок (блокируется ReentrancyGuard) и может не доплатить
(проверяется балансом после возврата).
"""

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Tuple, runtime_checkable


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class AssetLedger(Protocol):
    """Внешний реестр балансов активов."""

    def balance_of(self, asset: str, holder: str) -> int:
        """Баланс holder в asset (0, если записи нет)."""
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """Перевод amount от sender к recipient."""
        ...

    def snapshot(self) -> Any:
        """Непрозрачный снимок состояния для отката."""
        ...

    def restore(self, snapshot: Any) -> None:
        """Откат к снимку."""
        ...


@dataclass(frozen=True)
class SettlementRequest:
    """Что должен доставить callback до возврата управления."""

    operation: str
    payer: str
    pay_to: str
    quote_asset: str
    base_asset: str
    quote_owed: int
    base_owed: int


class SettlementCallback(Protocol):
    """Платёжный callback вызывающего."""

    def settle(self, request: SettlementRequest) -> None:
        ...


# =============================================================================
# IN-MEMORY LEDGER
# =============================================================================


class LedgerTransferError(ValueError):
    """Перевод невозможен (недостаточный баланс или некорректная сумма)."""

    pass


class InMemoryAssetLedger:
    """
    Реестр балансов в памяти.

    Используется симуляциями и тестами как внешний реестр.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[str, str], int] = {}

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get((asset, holder), 0)

    def mint(self, asset: str, holder: str, amount: int) -> None:
        """Выпуск amount на баланс holder."""
        if amount < 0:
            raise LedgerTransferError(f"mint amount must be non-negative, got {amount}")
        self._balances[(asset, holder)] = self.balance_of(asset, holder) + amount

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """
        Перевод.

        Raises:
            LedgerTransferError: при отрицательной сумме или нехватке баланса
        """
        if amount < 0:
            raise LedgerTransferError(f"transfer amount must be non-negative, got {amount}")
        available = self.balance_of(asset, sender)
        if amount > available:
            raise LedgerTransferError(
                f"{sender} has {available} {asset}, cannot transfer {amount}"
            )
        self._balances[(asset, sender)] = available - amount
        self._balances[(asset, recipient)] = self.balance_of(asset, recipient) + amount

    def snapshot(self) -> Dict[Tuple[str, str], int]:
        return dict(self._balances)

    def restore(self, snapshot: Dict[Tuple[str, str], int]) -> None:
        self._balances = dict(snapshot)


class PayFromAccount:
    """
    Простейший callback: платит запрошенные суммы со счёта payer во внешнем
    реестре.
    """

    def __init__(self, ledger: AssetLedger):
        self.ledger = ledger

    def settle(self, request: SettlementRequest) -> None:
        if request.quote_owed > 0:
            self.ledger.transfer(
                request.quote_asset, request.payer, request.pay_to, request.quote_owed
            )
        if request.base_owed > 0:
            self.ledger.transfer(
                request.base_asset, request.payer, request.pay_to, request.base_owed
            )
