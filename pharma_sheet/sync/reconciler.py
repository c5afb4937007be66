"""Reconcile the four sheet kinds of one warehouse against the database.

A pass runs medication, house, brand and blister-date phases in that order on
one session. Any error rolls back every phase; the caller sees either all of
the sheet applied or none of it.
"""

import logging
import time
from contextlib import contextmanager
from datetime import date, datetime, timezone

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError

from pharma_sheet.config import get_settings
from pharma_sheet.core.constants import (
    KIND_BLISTER_DATE,
    KIND_BRAND,
    KIND_HOUSE,
    KIND_MEDICATION,
    SYNC_KIND_ORDER,
)
from pharma_sheet.core.errors import (
    ConflictError,
    NotFoundError,
    SyncError,
    TransientStoreError,
)
from pharma_sheet.models.blister_date_history import MedicineBlisterDateHistory
from pharma_sheet.models.medicine import Medicine
from pharma_sheet.models.medicine_brand import MedicineBrand
from pharma_sheet.models.medicine_house import MedicineHouse
from pharma_sheet.models.warehouse import Warehouse
from pharma_sheet.models.warehouse_sheet import WarehouseSheet
from pharma_sheet.sync.diff_engine import Classification, changed_fields, classify
from pharma_sheet.sync.identity import dedupe_by_external_id, display_id, external_id, format_key
from pharma_sheet.sync.metadata import KindCounter, build_sync_metadata, summarize_metadata
from pharma_sheet.sync.normalizer import ROW_NORMALIZERS
from pharma_sheet.sync.snapshot import (
    load_blister_date_snapshot,
    load_brand_ids,
    load_brand_snapshot,
    load_house_snapshot,
    load_medication_snapshot,
)

logger = logging.getLogger(__name__)

_WAREHOUSE_SCOPED_KINDS = (KIND_HOUSE, KIND_BLISTER_DATE)


class _Deadline:
    def __init__(self, seconds):
        self.seconds = seconds
        self.expires_at = time.monotonic() + seconds if seconds and seconds > 0 else None

    def check(self, kind=None, key=None):
        if self.expires_at is not None and time.monotonic() > self.expires_at:
            raise TransientStoreError(
                f"sync deadline of {self.seconds:g}s exceeded",
                kind=kind,
                key=key,
            )


@contextmanager
def store_errors(kind=None, key=None):
    """Translate SQLAlchemy failures into sync error kinds."""
    try:
        yield
    except IntegrityError as exc:
        raise ConflictError(f"constraint violated: {exc.orig}", kind=kind, key=key) from exc
    except OperationalError as exc:
        raise TransientStoreError(f"database unavailable: {exc.orig}", kind=kind, key=key) from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise TransientStoreError("database connection lost", kind=kind, key=key) from exc
        raise


def ensure_warehouse(db, warehouse_id, create=False, name=None):
    warehouse = db.get(Warehouse, warehouse_id)
    if warehouse is not None:
        return warehouse
    if not create:
        raise NotFoundError("warehouse not found", key=warehouse_id)
    warehouse = Warehouse(warehouse_id=warehouse_id, name=name or warehouse_id)
    db.add(warehouse)
    with store_errors(key=warehouse_id):
        db.flush()
    logger.info("Created warehouse %s", warehouse_id, extra={"warehouse_id": warehouse_id})
    return warehouse


def upsert_warehouse_sheet(db, warehouse_id, rows, synced_at=None):
    synced_at = synced_at or datetime.now(timezone.utc)
    registration = db.get(WarehouseSheet, warehouse_id)
    if registration is None:
        registration = WarehouseSheet(warehouse_id=warehouse_id)
        db.add(registration)
    registration.spreadsheet_title = rows.title or ""
    registration.source = rows.source or ""
    registration.medicine_sheet_name = rows.sheet_names.get(KIND_MEDICATION, "")
    registration.medicine_brand_sheet_name = rows.sheet_names.get(KIND_BRAND, "")
    registration.medicine_house_sheet_name = rows.sheet_names.get(KIND_HOUSE, "")
    registration.medicine_blister_date_history_sheet_name = rows.sheet_names.get(
        KIND_BLISTER_DATE, ""
    )
    registration.latest_synced_at = synced_at
    with store_errors(key=warehouse_id):
        db.flush()
    return registration


class SyncRun:
    """State of one reconciliation pass over a warehouse's sheet rows."""

    def __init__(self, db, warehouse_id, rows, *, prune_missing=False, timeout_seconds=None):
        self.db = db
        self.warehouse_id = warehouse_id
        self.rows = rows
        self.prune_missing = prune_missing
        self.deadline = _Deadline(timeout_seconds)
        self.counters = {
            kind: KindCounter(sheet_name=rows.sheet_names.get(kind, ""))
            for kind in SYNC_KIND_ORDER
        }
        self.records = {
            kind: [ROW_NORMALIZERS[kind](row) for row in rows.rows_for(kind)]
            for kind in SYNC_KIND_ORDER
        }
        self.known_medications = set()

    def classify_kind(self, kind, snapshot):
        """Count every row of ``kind`` and return the records still to apply.

        Returns ``(record, current, classification)`` for each surviving key.
        Invalid rows, rows of another warehouse and collapsed duplicates are
        counted here and dropped.
        """
        counter = self.counters[kind]
        candidates = []
        for record in self.records[kind]:
            if record.invalid:
                counter.add(Classification.INVALID)
                logger.debug(
                    "Invalid %s row: %s",
                    kind,
                    "; ".join(record.errors),
                    extra={"kind": kind, "key": display_id(record)},
                )
                continue
            if kind in _WAREHOUSE_SCOPED_KINDS and record.warehouse_id != self.warehouse_id:
                counter.add_skipped()
                continue
            candidates.append(record)

        survivors, collapsed = dedupe_by_external_id(candidates)
        if collapsed:
            counter.add_skipped(collapsed)

        classified = []
        for record in survivors:
            current = snapshot.get(external_id(record))
            classification = classify(record, current)
            counter.add(classification)
            classified.append((record, current, classification))
        return classified

    def _require_medication(self, kind, record):
        if record.medication_id not in self.known_medications:
            raise NotFoundError(
                f"medication {record.medication_id} does not exist",
                kind=kind,
                key=display_id(record),
            )

    def _flush(self, kind, key):
        with store_errors(kind=kind, key=key):
            self.db.flush()

    def _log_change(self, kind, record, current, classification):
        key = display_id(record)
        if classification is Classification.NEW:
            logger.debug("New %s", kind, extra={"kind": kind, "key": key})
        else:
            logger.debug(
                "Updated %s fields: %s",
                kind,
                ", ".join(changed_fields(record, current)),
                extra={"kind": kind, "key": key},
            )

    def sync_medications(self):
        kind = KIND_MEDICATION
        snapshot = load_medication_snapshot(self.db)
        self.known_medications = set(snapshot)
        for record, current, classification in self.classify_kind(kind, snapshot):
            key = display_id(record)
            self.deadline.check(kind, key)
            self.known_medications.add(record.medication_id)
            if classification is Classification.UNCHANGED:
                continue
            self._log_change(kind, record, current, classification)
            if classification is Classification.NEW:
                self.db.add(
                    Medicine(
                        medication_id=record.medication_id,
                        medical_name=record.medical_name,
                    )
                )
            elif classification is Classification.UPDATED:
                current.medical_name = record.medical_name
            self._flush(kind, key)

    def sync_houses(self):
        kind = KIND_HOUSE
        snapshot = load_house_snapshot(self.db, self.warehouse_id)
        for record, current, classification in self.classify_kind(kind, snapshot):
            key = display_id(record)
            self.deadline.check(kind, key)
            self._require_medication(kind, record)
            if classification is Classification.UNCHANGED:
                continue
            self._log_change(kind, record, current, classification)
            if classification is Classification.NEW:
                self.db.add(
                    MedicineHouse(
                        warehouse_id=record.warehouse_id,
                        medication_id=record.medication_id,
                        house_id=record.house_id,
                        locker=record.locker,
                        floor=record.floor,
                        no=record.no,
                        address=record.address,
                        label=record.label,
                    )
                )
            elif classification is Classification.UPDATED:
                current.house_id = record.house_id
                current.locker = record.locker
                current.floor = record.floor
                current.no = record.no
                current.address = record.address
                current.label = record.label
            self._flush(kind, key)

        if self.prune_missing:
            self.prune_houses(snapshot)

    def prune_houses(self, snapshot):
        """Delete houses of this warehouse that no sheet row mentions any more."""
        kind = KIND_HOUSE
        # Invalid rows still protect their house from deletion.
        sheet_keys = {
            external_id(record)
            for record in self.records[kind]
            if record.warehouse_id == self.warehouse_id
        }
        for match_key, house in snapshot.items():
            if match_key in sheet_keys:
                continue
            key = format_key(match_key)
            self.deadline.check(kind, key)
            self.db.delete(house)
            self.counters[kind].deleted += 1
            logger.debug("Deleted %s", kind, extra={"kind": kind, "key": key})
            self._flush(kind, key)

    def sync_brands(self):
        kind = KIND_BRAND
        snapshot = load_brand_snapshot(self.db)
        for record, current, classification in self.classify_kind(kind, snapshot):
            key = display_id(record)
            self.deadline.check(kind, key)
            self._require_medication(kind, record)
            if classification is Classification.UNCHANGED:
                continue
            self._log_change(kind, record, current, classification)
            if classification is Classification.NEW:
                self.db.add(
                    MedicineBrand(
                        medication_id=record.medication_id,
                        trade_id=record.trade_id,
                        trade_name=record.trade_name,
                        blister_image_url=record.blister_file_id,
                        tablet_image_url=record.tablet_file_id,
                        box_image_url=record.box_file_id,
                    )
                )
            elif classification is Classification.UPDATED:
                current.trade_id = record.trade_id
                current.trade_name = record.trade_name
                current.blister_image_url = record.blister_file_id
                current.tablet_image_url = record.tablet_file_id
                current.box_image_url = record.box_file_id
            self._flush(kind, key)

    def sync_blister_dates(self):
        kind = KIND_BLISTER_DATE
        snapshot = load_blister_date_snapshot(self.db, self.warehouse_id)
        classified = self.classify_kind(kind, snapshot)
        brand_ids = load_brand_ids(self.db) if classified else {}
        for record, current, classification in classified:
            key = display_id(record)
            self.deadline.check(kind, key)
            self._require_medication(kind, record)
            # History is append-only; a key already stored is left alone.
            if classification is not Classification.NEW:
                continue
            brand_id = None
            if record.trade_id:
                brand_id = brand_ids.get((record.medication_id, record.trade_id))
            self.db.add(
                MedicineBlisterDateHistory(
                    warehouse_id=record.warehouse_id,
                    medication_id=record.medication_id,
                    brand_id=brand_id,
                    trade_id=record.trade_id,
                    blister_change_date=record.blister_change_date,
                )
            )
            self._log_change(kind, record, current, classification)
            self._flush(kind, key)

    def execute(self):
        self.sync_medications()
        self.sync_houses()
        self.sync_brands()
        self.sync_blister_dates()
        for kind in SYNC_KIND_ORDER:
            counter = self.counters[kind]
            logger.info(
                "Synced %s: %d total, %d new, %d updated, %d skipped, %d invalid, %d deleted",
                kind,
                counter.total,
                counter.new,
                counter.updated,
                counter.skipped,
                counter.invalid,
                counter.deleted,
                extra={"warehouse_id": self.warehouse_id, "kind": kind},
            )
        return self.counters

    def preview(self):
        """Classify every kind against stored state without writing."""
        self.classify_kind(KIND_MEDICATION, load_medication_snapshot(self.db))
        house_snapshot = load_house_snapshot(self.db, self.warehouse_id)
        self.classify_kind(KIND_HOUSE, house_snapshot)
        if self.prune_missing:
            sheet_keys = {
                external_id(record)
                for record in self.records[KIND_HOUSE]
                if record.warehouse_id == self.warehouse_id
            }
            self.counters[KIND_HOUSE].deleted = len(set(house_snapshot) - sheet_keys)
        self.classify_kind(KIND_BRAND, load_brand_snapshot(self.db))
        self.classify_kind(
            KIND_BLISTER_DATE,
            load_blister_date_snapshot(self.db, self.warehouse_id),
        )
        return self.counters


def _resolve_options(prune_missing, timeout_seconds):
    settings = get_settings()
    if prune_missing is None:
        prune_missing = settings.SYNC_PRUNE_MISSING
    if timeout_seconds is None:
        timeout_seconds = settings.SYNC_TIMEOUT_SECONDS
    return settings, prune_missing, timeout_seconds


def reconcile(db, warehouse_id, rows, *, dry_run=False, prune_missing=None, timeout_seconds=None):
    """Apply ``rows`` to ``warehouse_id`` in one transaction.

    Returns the per-kind counts as ``SyncMedicineMetadata``. Raises a
    :class:`~pharma_sheet.core.errors.SyncError` subclass after rolling back
    when the pass cannot complete. ``dry_run`` classifies and writes inside
    the transaction, then rolls it back.
    """
    settings, prune_missing, timeout_seconds = _resolve_options(prune_missing, timeout_seconds)
    log_extra = {"warehouse_id": warehouse_id}
    logger.info(
        "Starting sync of %s (dry_run=%s, prune_missing=%s)",
        rows.title or rows.source or "sheet",
        dry_run,
        prune_missing,
        extra=log_extra,
    )
    try:
        ensure_warehouse(db, warehouse_id, create=settings.SYNC_CREATE_MISSING_WAREHOUSE)
        run = SyncRun(
            db,
            warehouse_id,
            rows,
            prune_missing=prune_missing,
            timeout_seconds=timeout_seconds,
        )
        counters = run.execute()
        if dry_run:
            db.rollback()
        else:
            upsert_warehouse_sheet(db, warehouse_id, rows)
            with store_errors():
                db.commit()
    except SyncError:
        db.rollback()
        logger.exception("Sync aborted; all changes rolled back", extra=log_extra)
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    metadata = build_sync_metadata(rows.title, counters, synced_on=date.today())
    logger.info("Sync finished: %s", summarize_metadata(metadata), extra=log_extra)
    return metadata


def summarize(db, warehouse_id, rows, *, prune_missing=None):
    """Counts ``reconcile`` would report, computed without any write."""
    settings, prune_missing, _ = _resolve_options(prune_missing, None)
    if db.get(Warehouse, warehouse_id) is None and not settings.SYNC_CREATE_MISSING_WAREHOUSE:
        raise NotFoundError("warehouse not found", key=warehouse_id)
    run = SyncRun(db, warehouse_id, rows, prune_missing=prune_missing)
    counters = run.preview()
    return build_sync_metadata(rows.title, counters, synced_on=date.today())


__all__ = [
    "SyncRun",
    "ensure_warehouse",
    "reconcile",
    "store_errors",
    "summarize",
    "upsert_warehouse_sheet",
]
