"""
Export service: reference data -> per-voucher transformation -> document.

Orchestrates alias table loading, the VoucherPipeline and document assembly.
Uses structured logging (LogContext, get_logger("export.*")).

Failure policy:
    - Alias tables are loaded before any voucher is touched; a malformed
      table raises MalformedAliasTableError and the run never starts.
    - Classification, account lookup and party resolution errors are caught
      per voucher and recorded as a failed VoucherOutcome; the run goes on.
    - ConsistencyViolationError is a bug and propagates.

Vouchers are independent, so with workers > 1 they are mapped over a thread
pool. Outcomes and the document always follow input order.
"""

from __future__ import annotations

import contextvars
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

from finance_export.config import ExportProfile
from finance_export.domain.assembler import assemble_document
from finance_export.domain.pipeline import VoucherPipeline
from finance_export.domain.types import (
    Account,
    AccountDirectory,
    ExportDocument,
    LedgerMaster,
    RawVoucher,
    Voucher,
)
from finance_export.exceptions import (
    AccountDirectoryError,
    ClassificationError,
    FinanceExportError,
    MalformedAliasTableError,
    PartyResolutionError,
)
from finance_export.logging_config import LogContext, get_logger
from finance_export.mapping.alias_table import AliasTable

logger = get_logger("export.service")

_T = TypeVar("_T")

# Errors scoped to a single voucher or account
RECORD_ERRORS = (ClassificationError, AccountDirectoryError, PartyResolutionError)


# -----------------------------------------------------------------------------
# Result types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ExportFailure:
    """User-facing description of one failed record."""

    index: int
    error_code: str
    message: str
    date: str | None = None
    voucher_no: str | None = None
    account_id: str | None = None

    def describe(self) -> str:
        if self.account_id is not None:
            where = f"account {self.account_id}"
        else:
            where = f"voucher dated {self.date}"
            if self.voucher_no:
                where += f" no. {self.voucher_no}"
        return f"#{self.index + 1} {where}: {self.error_code} ({self.message})"


@dataclass(frozen=True)
class VoucherOutcome:
    """Tagged result for one input voucher: exactly one of voucher / error is set."""

    index: int
    raw: RawVoucher
    voucher: Voucher | None = None
    error: FinanceExportError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def record(self) -> Voucher | None:
        return self.voucher

    def failure(self) -> ExportFailure:
        assert self.error is not None
        return ExportFailure(
            index=self.index,
            error_code=self.error.code,
            message=str(self.error),
            date=self.raw.date,
            voucher_no=self.raw.voucher_no,
        )


@dataclass(frozen=True)
class LedgerOutcome:
    """Tagged result for one account of a ledger master export."""

    index: int
    account: Account
    ledger: LedgerMaster | None = None
    error: FinanceExportError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def record(self) -> LedgerMaster | None:
        return self.ledger

    def failure(self) -> ExportFailure:
        assert self.error is not None
        return ExportFailure(
            index=self.index,
            error_code=self.error.code,
            message=str(self.error),
            account_id=self.account.id,
        )


@dataclass(frozen=True)
class RunSummary:
    """Counts of succeeded / failed records plus one entry per failure."""

    total: int
    succeeded: int
    failed: int
    failures: tuple[ExportFailure, ...] = ()
    skipped: int = 0

    @classmethod
    def from_outcomes(
        cls,
        outcomes: Sequence[VoucherOutcome | LedgerOutcome],
        skipped: int = 0,
    ) -> "RunSummary":
        failures = tuple(o.failure() for o in outcomes if not o.succeeded)
        return cls(
            total=len(outcomes) + skipped,
            succeeded=len(outcomes) - len(failures),
            failed=len(failures),
            failures=failures,
            skipped=skipped,
        )

    def as_lines(self) -> list[str]:
        line = f"Exported {self.succeeded} of {self.total} records; {self.failed} failed"
        if self.skipped:
            line += f"; {self.skipped} skipped"
        return [line, *(f.describe() for f in self.failures)]


@dataclass(frozen=True)
class ExportRunResult:
    """Everything one run produced."""

    run_id: str
    document: ExportDocument
    outcomes: tuple[VoucherOutcome | LedgerOutcome, ...]
    summary: RunSummary

    @property
    def has_failures(self) -> bool:
        return self.summary.failed > 0


# -----------------------------------------------------------------------------
# Reference data loading
# -----------------------------------------------------------------------------


def load_alias_table(path: Path | None, kind: str) -> AliasTable:
    """Load one alias table, or an empty one when no path is configured."""
    if path is None:
        return AliasTable.empty()
    try:
        table = AliasTable.load(path)
    except MalformedAliasTableError:
        logger.error("alias_table_malformed", exc_info=True, extra={"kind": kind, "path": str(path)})
        raise
    logger.info("alias_table_loaded", extra={"kind": kind, "path": str(path), "entries": len(table)})
    return table


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------


class ExportService:
    """Runs vouchers (or accounts) through one run's VoucherPipeline."""

    def __init__(self, pipeline: VoucherPipeline, workers: int = 1):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self._pipeline = pipeline
        self._workers = workers

    @classmethod
    def from_reference_data(
        cls,
        accounts: Iterable[Account],
        account_aliases: AliasTable | None = None,
        voucher_type_aliases: AliasTable | None = None,
        account_type_aliases: AliasTable | None = None,
        workers: int = 1,
    ) -> "ExportService":
        pipeline = VoucherPipeline(
            AccountDirectory(accounts),
            account_aliases=account_aliases,
            voucher_type_aliases=voucher_type_aliases,
            account_type_aliases=account_type_aliases,
        )
        return cls(pipeline, workers=workers)

    @classmethod
    def from_profile(cls, profile: ExportProfile, accounts: Iterable[Account]) -> "ExportService":
        """Load the profile's alias tables (fatal if malformed) and build the service."""
        return cls.from_reference_data(
            accounts,
            account_aliases=load_alias_table(profile.account_aliases, "account"),
            voucher_type_aliases=load_alias_table(profile.voucher_type_aliases, "voucher_type"),
            account_type_aliases=load_alias_table(profile.account_type_aliases, "account_type"),
            workers=profile.workers,
        )

    @property
    def pipeline(self) -> VoucherPipeline:
        return self._pipeline

    def _map(self, fn: Callable[[int, Any], _T], items: Sequence[Any]) -> list[_T]:
        """Apply fn(index, item) to every item; results in input order."""
        if self._workers == 1 or len(items) < 2:
            return [fn(i, item) for i, item in enumerate(items)]
        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            # Each task runs in a copy of the caller's context so log fields carry over
            futures = [
                executor.submit(contextvars.copy_context().run, fn, i, item)
                for i, item in enumerate(items)
            ]
            return [f.result() for f in futures]

    def transform_voucher(self, index: int, raw: RawVoucher) -> VoucherOutcome:
        with LogContext.bind(voucher_no=raw.voucher_no, voucher_date=raw.date):
            if raw.leg_total != Decimal("0"):
                logger.warning("voucher_unbalanced", extra={"index": index, "leg_total": raw.leg_total})
            try:
                voucher = self._pipeline.transform(raw)
            except RECORD_ERRORS as e:
                logger.warning(
                    "voucher_failed",
                    extra={"index": index, "error_code": e.code, "error": str(e)},
                )
                return VoucherOutcome(index=index, raw=raw, error=e)
            logger.debug("voucher_transformed", extra={"index": index, "entries": len(voucher.ledger_entries)})
            return VoucherOutcome(index=index, raw=raw, voucher=voucher)

    def transform_account(self, index: int, account: Account) -> LedgerOutcome:
        try:
            ledger = self._pipeline.ledger_master(account)
        except RECORD_ERRORS as e:
            logger.warning(
                "ledger_failed",
                extra={"index": index, "account_id": account.id, "error_code": e.code, "error": str(e)},
            )
            return LedgerOutcome(index=index, account=account, error=e)
        return LedgerOutcome(index=index, account=account, ledger=ledger)

    def _finish(
        self,
        run_id: str,
        outcomes: list[VoucherOutcome] | list[LedgerOutcome],
        skipped: int = 0,
    ) -> ExportRunResult:
        document = assemble_document(o.record for o in outcomes if o.succeeded)
        summary = RunSummary.from_outcomes(outcomes, skipped=skipped)
        logger.info(
            "export_run_completed",
            extra={
                "total": summary.total,
                "succeeded": summary.succeeded,
                "failed": summary.failed,
                "skipped": summary.skipped,
            },
        )
        return ExportRunResult(
            run_id=run_id,
            document=document,
            outcomes=tuple(outcomes),
            summary=summary,
        )

    def export_vouchers(self, raw_vouchers: Iterable[RawVoucher]) -> ExportRunResult:
        """Transform every voucher; failed vouchers are reported, not fatal."""
        run_id = str(uuid4())
        items = list(raw_vouchers)
        with LogContext.bind(correlation_id=run_id, producer="export"):
            logger.info(
                "export_run_started",
                extra={"kind": "vouchers", "vouchers": len(items), "workers": self._workers},
            )
            outcomes = self._map(self.transform_voucher, items)
            return self._finish(run_id, outcomes)

    def export_ledgers(self, accounts: Iterable[Account] | None = None) -> ExportRunResult:
        """Ledger masters for accounts (default: the whole directory).

        Accounts without an account type code are skipped with a warning.
        """
        run_id = str(uuid4())
        source = list(accounts) if accounts is not None else list(self._pipeline.directory)
        items = [a for a in source if a.account_type_code]
        with LogContext.bind(correlation_id=run_id, producer="export"):
            logger.info("export_run_started", extra={"kind": "ledgers", "accounts": len(source)})
            for account in source:
                if not account.account_type_code:
                    logger.warning("ledger_skipped", extra={"account_id": account.id, "reason": "no account type"})
            outcomes = self._map(self.transform_account, items)
            return self._finish(run_id, outcomes, skipped=len(source) - len(items))
