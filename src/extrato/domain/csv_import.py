"""CSV import domain service."""

import hashlib
import logging
from typing import BinaryIO, Optional

from extrato.database.base import Database
from extrato.domain.account import AccountService
from extrato.domain.classification import ClassificationService
from extrato.domain.entities import (
    ActorContext,
    ImportBatch,
    ImportResult,
    ParsedRow,
    Transaction,
)
from extrato.domain.errors import (
    DuplicateImportError,
    NotFoundError,
    ValidationError,
    batch_not_found,
    duplicate_import,
    row_error,
)
from extrato.utils.date_parser import get_period_range
from extrato.utils.file_reader import as_stream, compute_checksum, detect_encoding, iter_csv_rows
from extrato.utils.row_parser import parse_csv_row

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "BRL"


def row_fingerprint(row: ParsedRow) -> str:
    """Fingerprint a parsed row by its date, normalized document and amount.

    Two rows with the same fingerprint are the same statement line, whichever
    upload they came from.
    """
    key = f"{row.date.isoformat()}|{row.document}|{row.amount:.2f}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class CSVImportService:
    """Service for importing bank statement CSV files.

    A file is imported into exactly one batch for an account and period. The
    batch and all of its rows are written in a single unit of work: a bad row
    anywhere in the file leaves nothing behind.
    """

    def __init__(self, db: Database, currency: str = DEFAULT_CURRENCY):
        """Initialize CSV import service.

        Args:
            db: Database instance
            currency: Currency code stored on imported transactions
        """
        self.db = db
        self.currency = currency
        self.account_service = AccountService(db)

    def import_file(
        self,
        ctx: ActorContext,
        account_id: int,
        source: bytes | BinaryIO,
        period_month: int,
        period_year: int,
        classify: bool = False,
        has_header: bool = True,
    ) -> ImportResult:
        """Import a statement file for an account and period.

        Args:
            ctx: Acting user
            account_id: Account the statement belongs to
            source: Raw file bytes or a binary file object
            period_month: Statement month (1-12)
            period_year: Statement year
            classify: Run the rule engine on the account after the import commits
            has_header: Whether the first non-blank row is a header

        Returns:
            ImportResult with the committed batch and row counters

        Raises:
            ValidationError: If the period is invalid or any row fails to parse
            NotFoundError: If the account does not exist
            DuplicateImportError: If this file was already imported for the
                account and period
        """
        start_date, end_date = get_period_range(period_month, period_year)
        self.account_service.require_account(account_id)

        stream = as_stream(source)
        checksum = compute_checksum(stream)
        encoding = detect_encoding(stream)

        existing = self.db.find_import_batch(account_id, checksum, period_month, period_year)
        if existing is not None:
            logger.warning(
                "Duplicate import rejected",
                extra={"account_id": account_id, "batch_id": existing.id, "actor": ctx.actor},
            )
            raise DuplicateImportError(
                duplicate_import(existing.id, account_id, period_month, period_year),
                batch_id=existing.id,
                uploaded_at=existing.uploaded_at,
            )

        logger.info(
            "Import started",
            extra={
                "account_id": account_id,
                "period": f"{period_month:02d}/{period_year}",
                "encoding": encoding.value,
                "checksum": checksum,
                "actor": ctx.actor,
            },
        )

        parsed = inserted = skipped = out_of_period = 0
        with self.db.unit_of_work():
            batch_id = self.db.create_import_batch(
                account_id=account_id,
                uploaded_by=ctx.actor,
                file_checksum=checksum,
                period_month=period_month,
                period_year=period_year,
                encoding=encoding,
            )

            for line_num, cells in iter_csv_rows(stream, encoding, has_header=has_header):
                try:
                    row = parse_csv_row(cells)
                except ValidationError as e:
                    logger.warning(
                        "Import aborted on invalid row",
                        extra={"account_id": account_id, "row": line_num, "error": str(e)},
                    )
                    raise ValidationError(row_error(line_num, e)) from e
                parsed += 1

                if not start_date <= row.date <= end_date:
                    out_of_period += 1

                transaction_id = self.db.insert_transaction(
                    account_id=account_id,
                    batch_id=batch_id,
                    date=row.date,
                    document_raw=row.document_raw,
                    document=row.document,
                    amount=row.amount,
                    currency=self.currency,
                    row_hash=row_fingerprint(row),
                )
                if transaction_id is None:
                    skipped += 1
                    logger.debug(
                        "Row already imported, skipping",
                        extra={"account_id": account_id, "row": line_num},
                    )
                else:
                    inserted += 1

            self.db.finalize_import_batch(batch_id, row_count=parsed)

        if out_of_period:
            logger.warning(
                "Rows dated outside the import period",
                extra={"batch_id": batch_id, "out_of_period": out_of_period},
            )
        logger.info(
            "Import finished",
            extra={
                "batch_id": batch_id,
                "row_count": parsed,
                "inserted": inserted,
                "skipped": skipped,
                "actor": ctx.actor,
            },
        )

        classification = None
        if classify:
            classification = ClassificationService(self.db).classify_pending(
                ctx, account_id=account_id
            )

        return ImportResult(
            batch=self.require_batch(batch_id),
            inserted=inserted,
            skipped=skipped,
            out_of_period=out_of_period,
            classification=classification,
        )

    def get_batch(self, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID."""
        return self.db.get_import_batch(batch_id)

    def require_batch(self, batch_id: int) -> ImportBatch:
        """Get import batch by ID or raise NotFoundError."""
        batch = self.db.get_import_batch(batch_id)
        if batch is None:
            raise NotFoundError(batch_not_found(batch_id))
        return batch

    def list_batches(self, account_id: Optional[int] = None) -> list[ImportBatch]:
        """List import batches, newest first."""
        return self.db.list_import_batches(account_id=account_id)

    def list_batch_transactions(
        self, batch_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> list[Transaction]:
        """List the transactions first inserted by a batch.

        Rows skipped as already present belong to the batch that inserted them.

        Raises:
            NotFoundError: If the batch does not exist
        """
        self.require_batch(batch_id)
        return self.db.list_transactions(batch_id=batch_id, limit=limit, offset=offset)
