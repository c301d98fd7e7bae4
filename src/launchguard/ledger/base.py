"""
Ledger interface — внешний коллаборатор бухгалтерии балансов и allowance

Guard и permit не владеют балансами: они читают и пишут их только
через этот интерфейс. Реализация обязана проверять все условия до
первой записи (операция либо применяется полностью, либо не применяется).
"""

from typing import Protocol

from launchguard.core.domain.identity import Identity


class Ledger(Protocol):
    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def set_allowance(self, owner: str, spender: str, value: int) -> None:
        """Запись allowance без событий; LedgerError для нулевых адресов."""
        ...

    def move(self, sender: str, receiver: str, amount: int) -> None:
        """Перевод баланса; LedgerError при нехватке средств/нулевом адресе."""
        ...

    def spend_allowance(self, owner: str, spender: str, amount: int) -> int:
        """Списание allowance; возвращает остаток (MAX_UINT256 не уменьшается)."""
        ...

    def check_transfer_from(
        self, spender: Identity, source: Identity, receiver: Identity, amount: int
    ) -> None:
        """Проверка transfer_from без записи; LedgerError при нарушении."""
        ...
