"""
Voucher export for the accounting product's XML import.

Turns the operational store's vouchers and accounts into an import document:
alias tables rename accounts, voucher types and ledger groups; each voucher's
legs become ledger entries; a party ledger is chosen per voucher type; the
accepted vouchers are wrapped in one document envelope.

Layers:
    domain/      pure types, classifiers, party resolution, assembly
    mapping/     alias tables and source record conversion
    adapters/    CSV / XLSX / JSON readers
    models/      SQLAlchemy models of the store's tables
    selectors/   read-only store queries
    services/    export runs, per-voucher outcomes, run summary
"""
