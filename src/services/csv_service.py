"""
CSV Import / Export for job listings.

Import:
    - Header row required; columns title, company, location and job_type
      must be present on the first data row or the whole file is rejected
    - Every row is validated with CsvJobRow; invalid rows are skipped and
      reported with their line number
    - Valid rows are inserted in one batch with source="csv_import"

Export:
    - Columns id,title,company,location,job_type,posted_at (date only)
    - Suggested filename job-listings-YYYY-MM-DD.csv
"""

import csv
import io
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from src.common.error_handling import JobValidationError
from src.common.repositories.base import JobRepositoryInterface
from src.common.types import CsvJobRow, Job

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("title", "company", "location", "job_type")
EXPORT_COLUMNS = ("id", "title", "company", "location", "job_type", "posted_at")


@dataclass
class ImportReport:
    """Outcome of a CSV import."""
    inserted: int = 0
    skipped: List[Tuple[int, str]] = field(default_factory=list)  # (line number, reason)

    @property
    def total_rows(self) -> int:
        return self.inserted + len(self.skipped)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inserted": self.inserted,
            "skipped": [{"line": line, "reason": reason} for line, reason in self.skipped],
            "total_rows": self.total_rows,
        }


def _row_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "row"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def parse_csv(text: str) -> List[Tuple[int, Dict[str, str]]]:
    """
    Parse CSV text into (line number, row) pairs.

    Header names and values are stripped; blank lines are skipped. Line
    numbers count the header as line 1.
    """
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        return []
    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]

    rows = []
    for raw in reader:
        row = {key: (value or "").strip() for key, value in raw.items() if key}
        if not any(row.values()):
            continue
        rows.append((reader.line_num, row))
    return rows


def import_jobs_csv(
    text: str,
    repository: JobRepositoryInterface,
    now: Optional[datetime] = None,
) -> ImportReport:
    """
    Validate and insert jobs from CSV text.

    Raises:
        JobValidationError: If the file is empty or lacks required columns
        RemoteStoreError: If the batch insert fails
    """
    rows = parse_csv(text)
    if not rows:
        raise JobValidationError({"file": "CSV file contains no job rows"})

    _, first = rows[0]
    missing = [name for name in REQUIRED_COLUMNS if not first.get(name)]
    if missing:
        raise JobValidationError({"file": f"Missing required fields: {', '.join(missing)}"})

    posted_at = now or datetime.utcnow()
    report = ImportReport()
    documents = []
    for line, row in rows:
        try:
            parsed = CsvJobRow.model_validate(row)
        except ValidationError as e:
            report.skipped.append((line, _row_error(e)))
            continue
        job = Job(
            id=str(uuid.uuid4()),
            posted_at=posted_at,
            source="csv_import",
            **parsed.model_dump(),
        )
        documents.append(job.to_document())

    if documents:
        repository.insert_many(documents)
    report.inserted = len(documents)

    logger.info(f"CSV import: {report.inserted} inserted, {len(report.skipped)} skipped")
    for line, reason in report.skipped:
        logger.debug(f"CSV import skipped line {line}: {reason}")
    return report


def export_jobs_csv(jobs: Iterable[Job]) -> str:
    """Render jobs as CSV text with the export columns."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for job in jobs:
        writer.writerow([
            job.id,
            job.title,
            job.company,
            job.location,
            job.job_type.value,
            job.posted_at.date().isoformat(),
        ])
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"job-listings-{today.isoformat()}.csv"
