from collections import Counter
from datetime import timedelta

from market_dashboard.config import setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import FinancialCalendarRepository
from market_dashboard.utils import VALID_PURPOSES, now_ist, parse_calendar_date, prepare_calendar_entries

calendar_repo = FinancialCalendarRepository()
logger = setup_logger(name="FinancialCalendarService")

MAX_REPORTED_MESSAGES = 20


class FinancialCalendarService:
    """Corporate event calendar uploaded from the exchange's CSV export"""

    @staticmethod
    def purposes():
        return list(VALID_PURPOSES)

    @staticmethod
    def upload(rows):
        """
        Validate, split and store uploaded calendar rows.

        Returns:
            dict: Upload report with the stored count and the first
            errors and warnings

        Raises:
            ValidationError: rows is not a list, or nothing valid remains
        """
        if not isinstance(rows, list):
            raise ValidationError("Data must be an array of calendar entries")

        symbols = {
            str(row.get("Symbol")).strip().upper()
            for row in rows if isinstance(row, dict) and row.get("Symbol")
        }
        entries, errors, warnings = prepare_calendar_entries(rows, calendar_repo.get_existing_keys(symbols))
        if not entries:
            raise ValidationError(
                "No valid entries found after processing",
                details={
                    "details": errors[:MAX_REPORTED_MESSAGES],
                    "warnings": warnings[:MAX_REPORTED_MESSAGES],
                    "validPurposes": list(VALID_PURPOSES),
                },
            )

        for entry in entries:
            entry["event_day"] = parse_calendar_date(entry["event_date"])
        uploaded, failures = calendar_repo.bulk_insert(entries)
        if not uploaded and failures:
            raise UpstreamError("Failed to upload financial calendar data", details={"details": failures})
        errors.extend(failures)

        logger.info(
            f"Financial calendar upload: {uploaded}/{len(rows)} stored, "
            f"{len(errors)} errors, {len(warnings)} warnings"
        )
        return {
            "message": f"Successfully uploaded {uploaded} financial calendar entries",
            "uploaded": uploaded,
            "totalInput": len(rows),
            "errors": errors[:MAX_REPORTED_MESSAGES] or None,
            "warnings": warnings[:MAX_REPORTED_MESSAGES] or None,
            "summary": {
                "totalProcessed": uploaded,
                "totalErrors": len(errors),
                "totalWarnings": len(warnings),
                "splitEntries": len([w for w in warnings if "split" in w]),
            },
        }

    @staticmethod
    def search(filters):
        start, end = filters.get("start_date"), filters.get("end_date")
        if (start is None) != (end is None):
            # A one-sided range is ignored
            filters = {k: v for k, v in filters.items() if k not in ("start_date", "end_date")}
        return calendar_repo.search(filters)

    @staticmethod
    def stats(today=None):
        """
        Totals over the whole calendar.

        upcomingResults counts events on or after today; thisWeekResults
        those within the next seven days.
        """
        today = today or now_ist().date()
        next_week = today + timedelta(days=7)
        entries = calendar_repo.get_all()

        upcoming = [e for e in entries if e.event_day and e.event_day >= today]
        return {
            "totalCompanies": len({e.company for e in entries}),
            "upcomingResults": len(upcoming),
            "thisWeekResults": len([e for e in upcoming if e.event_day <= next_week]),
            "totalEntries": len(entries),
            "purposeBreakdown": dict(Counter(e.purpose for e in entries)),
        }

    @staticmethod
    def list():
        return calendar_repo.get_list()

    @staticmethod
    def delete(entry_id):
        entry = calendar_repo.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError("Financial calendar entry not found")
        if calendar_repo.delete(entry) is None:
            raise UpstreamError("Failed to delete financial calendar entry")
        logger.info(f"Deleted calendar entry {entry_id}")
