from market_dashboard.config import PreopenConfig, StoreConfig, ReferenceData, setup_logger
from market_dashboard.errors import UpstreamError, ValidationError
from market_dashboard.repositories import IntradayAnalysisRepository, PreopenRepository, StockRepository
from market_dashboard.utils import (average_group_volumes, market_summary, rollup_groups, select_latest,
                                    shift_date_key, today_ist, utc_now)
from .preopen_service import PreopenService, resolve_date
from .reference_data_service import build_reference_data

analysis_repo = IntradayAnalysisRepository()
preopen_repo = PreopenRepository()
stock_repo = StockRepository()
logger = setup_logger(name="IntradayAnalysisService")


def _require_date(date):
    if not date:
        raise ValidationError("Date is required")
    return resolve_date(date)


class IntradayAnalysisService:
    """
    Sector and industry advance/decline rollup for one trading day.

    The reference membership is handed in at construction; when it is empty
    the groups are derived from the stock master instead.
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    @staticmethod
    def _taxonomy(reference):
        taxonomy = {}
        for group in reference.sectors:
            for stock in group.stocks:
                taxonomy.setdefault(stock.symbol, {})["sector"] = group.name
        for group in reference.industries:
            for stock in group.stocks:
                taxonomy.setdefault(stock.symbol, {})["industry"] = group.name
        return taxonomy

    def _resolve_reference(self, master_dicts):
        if self.reference is not None and not self.reference.is_empty:
            return self.reference
        logger.info("Reference data empty, deriving groups from stock master")
        return build_reference_data(master_dicts)

    @staticmethod
    def _window_snapshots(end_date):
        """Latest snapshot per date within the trailing window ending at end_date"""
        start_date = shift_date_key(end_date, -PreopenConfig.average_window_days)
        by_date = {}
        for snapshot in preopen_repo.get_between(start_date, end_date):
            by_date.setdefault(snapshot.date, []).append(snapshot)
        dates = sorted(by_date, reverse=True)[:PreopenConfig.average_window_days]
        return start_date, [select_latest(by_date[d]) for d in dates]

    def preopen_average(self, end_date, reference=None):
        """
        Average daily pre-open volume per sector and industry over the 20
        days ending at end_date.
        """
        end_date = _require_date(end_date)
        if reference is None:
            reference = self._resolve_reference([s.to_dict() for s in stock_repo.get_all()])
        start_date, snapshots = self._window_snapshots(end_date)
        averages = average_group_volumes(
            [s.securities or [] for s in snapshots],
            self._taxonomy(reference),
        )
        days = averages["daysAnalyzed"]
        return {
            "sectorAverages": {k: {"avgVolume": v, "dayCount": days} for k, v in averages["sectorAverages"].items()},
            "industryAverages": {k: {"avgVolume": v, "dayCount": days} for k, v in averages["industryAverages"].items()},
            "periodStart": start_date,
            "periodEnd": end_date,
            "daysAnalyzed": days,
        }

    def run_analysis(self, date):
        """
        Compute and persist the rollup for a date, overwriting any earlier run.

        Constituent change comes from the day's latest pre-open snapshot,
        falling back to the stock master and then to zero.
        """
        date = _require_date(date)
        snapshot = PreopenService.find_latest(date)
        preopen_map = {s.get("symbol"): s for s in (snapshot.securities if snapshot else []) or []}
        master_dicts = [s.to_dict() for s in stock_repo.get_all()]
        master_map = {s["symbol"]: s for s in master_dicts}
        reference = self._resolve_reference(master_dicts)

        averages = self.preopen_average(date, reference=reference)
        sector_baseline = {k: v["avgVolume"] for k, v in averages["sectorAverages"].items()}
        industry_baseline = {k: v["avgVolume"] for k, v in averages["industryAverages"].items()}

        sector_analysis = rollup_groups(reference.sectors, preopen_map, master_map, sector_baseline)
        industry_analysis = rollup_groups(reference.industries, preopen_map, master_map, industry_baseline)
        summary = market_summary(reference.sectors, reference.industries, preopen_map, master_map)
        summary.update({
            "hasPreopenData": snapshot is not None,
            "averageDaysAnalyzed": averages["daysAnalyzed"],
        })

        analysis = analysis_repo.upsert(date, {
            "timestamp": utc_now().isoformat() + "Z",
            "sector_analysis": sector_analysis,
            "industry_analysis": industry_analysis,
            "summary": summary,
            "preopen_snapshot_id": snapshot.id if snapshot else None,
            "reference_source": reference.source,
        })
        if analysis is None:
            raise UpstreamError("Failed to save intraday analysis")
        logger.info(
            f"Intraday analysis for {date}: {len(sector_analysis)} sectors, {len(industry_analysis)} industries, "
            f"ADR {summary['marketADR']:.2f}"
        )
        return analysis.to_dict()

    @staticmethod
    def load(date):
        """Stored analysis for a date, or None"""
        date = _require_date(date)
        analysis = analysis_repo.get_by_date(date)
        return analysis.to_dict() if analysis else None

    @staticmethod
    def preopen_by_date(date):
        date = _require_date(date)
        snapshot = PreopenService.find_latest(date)
        if snapshot is None:
            return None
        return {
            "id": snapshot.id,
            "date": snapshot.date,
            "timestamp": snapshot.timestamp,
            "source": snapshot.source,
            "totalStocks": snapshot.total_stocks,
            "data": snapshot.securities or [],
        }

    @staticmethod
    def available_dates():
        return analysis_repo.get_available_dates()

    @staticmethod
    def cleanup(days_to_keep=StoreConfig.default_days_to_keep):
        if days_to_keep is None or days_to_keep < 0:
            raise ValidationError("daysToKeep must be a non-negative integer")
        cutoff = shift_date_key(today_ist(), -days_to_keep)
        deleted = analysis_repo.delete_before(cutoff)
        if deleted == -1:
            raise UpstreamError("Failed to clean up intraday analysis")
        logger.info(f"Deleted {deleted} intraday analyses older than {cutoff}")
        return {"deletedCount": deleted, "cutoffDate": cutoff}
