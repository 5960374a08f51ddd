"""
nameledger.services.registrar — registration, renewal, transfer, lookups.

Every mutating method runs as one store transaction: all precondition checks
happen first, then the ledger writes, the payment settlement and the
notification. Any failure raises a typed `LedgerError` and leaves the store
exactly as it was, including the caller's account (nothing is charged).

Operations
----------
- is_available(name, tld) -> bool
- quote(name, tld, term_years) -> fee
- register(caller, name, tld, term_years, metadata, payment) -> record_id
- renew(caller, record_id, term_years, payment) -> new expiry
- transfer(caller, record_id, new_owner) -> None
- get_record(record_id) -> Record
- resolve(name, tld) -> metadata
- records_of(owner) -> [record_id]
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..clock import SECONDS_PER_YEAR, Clock, SystemClock
from ..errors import Expired, Inactive, InsufficientPayment, InvalidInput, NameTaken, NotOwner
from ..ledger import RegistryLedger
from ..pricing import PricingEngine, check_name, check_term
from ..state.store import LedgerStore
from ..state.treasury import Treasury
from ..tld_catalog import TldCatalog
from ..types.events import OWNERSHIP_TRANSFERRED, REGISTERED, RENEWED
from ..types.record import NULL_IDENTITY, Record

log = logging.getLogger(__name__)


def _check_identity(identity: str, what: str) -> None:
    if not isinstance(identity, str) or identity == NULL_IDENTITY:
        raise InvalidInput(f"{what} must be a non-empty identity")


def _check_payment(payment: int) -> None:
    if isinstance(payment, bool) or not isinstance(payment, int) or payment < 0:
        raise InvalidInput("payment must be a non-negative integer", payment=payment)


class RegistrarService:
    def __init__(self, store: LedgerStore, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self.ledger = RegistryLedger(store)
        self.catalog = TldCatalog(store)
        self.pricing = PricingEngine(store)
        self.treasury = Treasury(store)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_available(self, name: str, tld: str) -> bool:
        with self._store.reading():
            return self.ledger.is_available(name, tld)

    def quote(self, name: str, tld: str, term_years: int) -> int:
        with self._store.reading():
            return self.pricing.compute_fee(name, tld, term_years)

    def get_record(self, record_id: int) -> Record:
        with self._store.reading():
            return self.ledger.get(record_id)

    def resolve(self, name: str, tld: str) -> str:
        with self._store.reading():
            return self.ledger.get_by_name(name, tld).metadata

    def records_of(self, owner: str) -> List[int]:
        with self._store.reading():
            return self.ledger.records_of(owner)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def register(
        self,
        caller: str,
        name: str,
        tld: str,
        term_years: int,
        metadata: str = "",
        payment: int = 0,
    ) -> int:
        """
        Register (name, tld) to `caller` for `term_years`.

        Raises InvalidInput, UnsupportedTld, InvalidTerm, NameTaken,
        InsufficientPayment or InsufficientFunds; on success returns the new
        record id and emits Registered.
        """
        _check_identity(caller, "caller")
        check_name(name)
        _check_payment(payment)
        with self._store.transaction():
            self.catalog.multiplier(tld)
            check_term(term_years)
            if not self.ledger.is_available(name, tld):
                raise NameTaken(name=name, tld=tld)
            fee = self.pricing.compute_fee(name, tld, term_years)
            if payment < fee:
                raise InsufficientPayment(payment=payment, fee=fee)

            now = self._clock.now()
            rec = self.ledger.create(
                name=name,
                tld=tld,
                owner=caller,
                expires_at=now + term_years * SECONDS_PER_YEAR,
                metadata=metadata or "",
            )
            settled = self.treasury.settle(caller, payment, fee)
            self._store.emit(REGISTERED, record_id=rec.record_id, name=name, tld=tld, owner=caller)

        log.info(
            "registered",
            extra={
                "record_id": rec.record_id,
                "fqdn": rec.fqdn,
                "owner": caller,
                "fee": settled.fee,
                "refund": settled.refund,
                "expires_at": rec.expires_at,
            },
        )
        return rec.record_id

    def renew(self, caller: str, record_id: int, term_years: int, payment: int = 0) -> int:
        """
        Extend a record's expiry by `term_years` from its current expiry (not
        from now). Only the owner may renew; an expired record can still be
        renewed. Returns the new expiry and emits Renewed.
        """
        _check_payment(payment)
        with self._store.transaction():
            rec = self.ledger.get(record_id)
            if caller != rec.owner:
                raise NotOwner(record_id=rec.record_id, caller=caller)
            check_term(term_years)
            if not rec.active:
                raise Inactive(record_id=rec.record_id)
            fee = self.pricing.compute_fee(rec.name, rec.tld, term_years)
            if payment < fee:
                raise InsufficientPayment(payment=payment, fee=fee)

            updated = self.ledger.extend(rec.record_id, term_years * SECONDS_PER_YEAR)
            settled = self.treasury.settle(caller, payment, fee)
            self._store.emit(RENEWED, record_id=rec.record_id, new_expiry=updated.expires_at)

        log.info(
            "renewed",
            extra={
                "record_id": rec.record_id,
                "fee": settled.fee,
                "refund": settled.refund,
                "expires_at": updated.expires_at,
            },
        )
        return updated.expires_at

    def transfer(self, caller: str, record_id: int, new_owner: str) -> None:
        """
        Move ownership to `new_owner`. Only the current owner may transfer, and
        only while the record is active and unexpired.
        """
        with self._store.transaction():
            rec = self.ledger.get(record_id)
            if caller != rec.owner:
                raise NotOwner(record_id=rec.record_id, caller=caller)
            _check_identity(new_owner, "new owner")
            if not rec.active:
                raise Inactive(record_id=rec.record_id)
            now = self._clock.now()
            if rec.is_expired(now):
                raise Expired(record_id=rec.record_id, expires_at=rec.expires_at, now=now)

            self.ledger.set_owner(rec.record_id, new_owner)
            self._store.emit(
                OWNERSHIP_TRANSFERRED,
                record_id=rec.record_id,
                old_owner=rec.owner,
                new_owner=new_owner,
            )

        log.info(
            "ownership transferred",
            extra={"record_id": rec.record_id, "old_owner": rec.owner, "new_owner": new_owner},
        )


__all__ = ["RegistrarService"]
