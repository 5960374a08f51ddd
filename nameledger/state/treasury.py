"""
nameledger.state.treasury — account balances and the accumulated fee balance.

Implements the value side of paid operations: the caller's payment is taken
from their account, the fee is added to the ledger's accumulated balance and
the overpayment goes straight back to the caller, all as journaled writes in
the caller's transaction. If anything later in that transaction fails, the
whole exchange is rolled back, so a failed call never charges anything.

Semantics
---------
- Ensure the caller's account holds ≥ payment; otherwise `InsufficientFunds`.
- Debit caller by `payment`, credit caller by `payment - fee` (refund),
  credit the accumulated balance by `fee`. Net effect on the caller: −fee.
- `withdraw_to(admin)` moves the entire accumulated balance to `admin`'s
  account and resets it to zero; a zero balance moves zero.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InsufficientFunds, InvalidInput
from .store import LedgerStore


@dataclass(frozen=True)
class Settlement:
    payment: int
    fee: int
    refund: int


class Treasury:
    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def balance_of(self, identity: str) -> int:
        return int(self._store.get("accounts", identity, 0))

    def collected(self) -> int:
        return int(self._store.meta("balance"))

    # ------------------------------------------------------------------
    # Writes (must run inside a store transaction)
    # ------------------------------------------------------------------

    def _set_balance(self, identity: str, value: int) -> None:
        self._store.put("accounts", identity, int(value))

    def credit(self, identity: str, amount: int) -> int:
        if not identity:
            raise InvalidInput("account identity must be non-empty")
        if amount < 0:
            raise InvalidInput("credit amount must be ≥ 0", amount=amount)
        new = self.balance_of(identity) + int(amount)
        self._set_balance(identity, new)
        return new

    def debit(self, identity: str, amount: int) -> int:
        if amount < 0:
            raise InvalidInput("debit amount must be ≥ 0", amount=amount)
        cur = self.balance_of(identity)
        if cur < amount:
            raise InsufficientFunds(account=identity, balance=cur, required=int(amount))
        self._set_balance(identity, cur - int(amount))
        return cur - int(amount)

    def settle(self, payer: str, payment: int, fee: int) -> Settlement:
        """
        Take `payment` from `payer`, keep `fee`, refund the rest.
        Callers have already checked `payment >= fee`.
        """
        self.debit(payer, payment)
        refund = int(payment) - int(fee)
        if refund:
            self.credit(payer, refund)
        self._store.set_meta("balance", self.collected() + int(fee))
        return Settlement(payment=int(payment), fee=int(fee), refund=refund)

    def withdraw_to(self, identity: str) -> int:
        amount = self.collected()
        self._store.set_meta("balance", 0)
        if amount:
            self.credit(identity, amount)
        return amount


__all__ = ["Settlement", "Treasury"]
