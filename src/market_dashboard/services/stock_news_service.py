import time

import pandas as pd
from flask import current_app

from market_dashboard.config import AIConfig, GapConfig, StoreConfig, setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import StockNewsRepository, StockRepository
from market_dashboard.schemas import StockNewsSchema
from market_dashboard.utils import (GAP_BUCKETS, GAP_TYPE_LABELS, classify_gaps, compute_breadth, cutoff_datetime,
                                    gap_stock_prompt, market_prompt, news_record, parse_numeric, round2,
                                    sector_prompt, utc_now)
from .preopen_service import PreopenService, resolve_date

news_repo = StockNewsRepository()
stock_repo = StockRepository()
logger = setup_logger(name="StockNewsService")
news_schema = StockNewsSchema()


def _grok():
    return current_app.extensions["grok_adaptor"]


def _timestamp():
    return utc_now().isoformat() + "Z"


def _require_configured(adaptor):
    if not adaptor.is_configured:
        raise ValidationError("API key not configured")


class StockNewsService:
    """
    AI news analysis for gap stocks, sectors and the overall market.

    GAP_ANALYSIS items are cached per (symbol, date); the provider is only
    called when no item exists yet.
    """

    def __init__(self, adaptor=None, delay_seconds=None):
        self.adaptor = adaptor or _grok()
        if delay_seconds is None:
            delay_seconds = current_app.config.get("AI_REQUEST_DELAY_SECONDS", AIConfig.inter_request_delay_seconds)
        self.delay_seconds = delay_seconds

    def _store(self, record):
        news = news_repo.insert(record)
        if news is None:
            raise UpstreamError(f"Failed to store {record['type']} news")
        return news

    def _gap_news(self, symbol, gap_percent, gap_type, date, company_name=None, sector=None):
        """
        Cached GAP_ANALYSIS item for the stock, fetching it when missing.

        Returns:
            tuple: (StockNewsModel, cached flag)
        """
        existing = news_repo.get_gap_news(symbol, date)
        if existing is not None:
            logger.info(f"Using cached gap news for {symbol} on {date}")
            return existing, True

        company_name = company_name or symbol
        sector = sector or "Unknown"
        prompt = gap_stock_prompt(symbol, gap_percent, gap_type or "", company_name, sector, date)
        ai_response = self.adaptor.analyze(prompt)
        news = self._store(news_record(
            "GAP_ANALYSIS", ai_response, date, _timestamp(),
            symbol=symbol, company_name=company_name, sector=sector,
            gap_percent=gap_percent, gap_type=gap_type,
        ))
        logger.info(f"Gap news fetched for {symbol}: {news.headline}")
        return news, False

    def fetch_stock_news(self, request_data):
        symbol = request_data.get("symbol")
        gap_percent = request_data.get("gap_percent")
        date = request_data.get("date")
        if not symbol or not gap_percent or not date:
            raise ValidationError("Symbol, gapPercent, and date are required")
        _require_configured(self.adaptor)

        news, cached = self._gap_news(
            symbol, gap_percent, request_data.get("gap_type"), resolve_date(date),
            company_name=request_data.get("company_name"), sector=request_data.get("sector"),
        )
        return {"data": news_schema.dump(news), "cached": cached}

    def require_ai(self):
        _require_configured(self.adaptor)

    def validate_batch(self, stocks):
        if not stocks:
            raise ValidationError("Stocks array is required")
        _require_configured(self.adaptor)

    def gap_news_batch(self, channel, stocks, date):
        """
        Producer for the batch fetch stream.

        Emits start, then progress plus stock_complete or stock_error per
        stock, then complete with the per-stock results.
        """
        date = resolve_date(date)
        total = len(stocks)
        results = []
        start = time.time()
        channel.emit({"type": "start", "message": f"Starting news fetch for {total} gap stocks...", "total": total})

        for index, stock in enumerate(stocks, start=1):
            if channel.cancelled:
                logger.info(f"Batch news fetch cancelled after {index - 1}/{total} stocks")
                return
            symbol = stock["symbol"]
            channel.emit({
                "type": "progress",
                "message": f"Fetching news for {symbol} ({index}/{total})...",
                "current": index,
                "total": total,
                "symbol": symbol,
            })
            try:
                news, cached = self._gap_news(
                    symbol, stock["gap"], stock.get("gap_type"), date,
                    company_name=stock.get("company_name"), sector=stock.get("sector"),
                )
            except UpstreamError as e:
                logger.error(f"Error fetching news for {symbol}: {e.message}")
                results.append({"symbol": symbol, "success": False, "error": e.message})
                channel.emit({
                    "type": "stock_error",
                    "symbol": symbol,
                    "message": f"Error fetching news for {symbol}: {e.message}",
                })
                continue

            results.append({"symbol": symbol, "success": True, "cached": cached, "data": news_schema.dump(news)})
            event = {"type": "stock_complete", "symbol": symbol, "status": "cached" if cached else "fetched"}
            if cached:
                event["message"] = f"News already available for {symbol}"
            else:
                event["message"] = f"News fetched for {symbol}"
                event["headline"] = news.headline
            channel.emit(event)

            if not cached and index < total and not channel.cancelled:
                time.sleep(self.delay_seconds)

        successful = len([r for r in results if r["success"]])
        duration = int(time.time() - start)
        channel.emit({
            "type": "complete",
            "message": f"News fetch completed! {successful}/{total} successful",
            "results": results,
            "duration": f"{duration}s",
            "summary": {
                "total": total,
                "successful": successful,
                "cached": len([r for r in results if r.get("cached")]),
                "errors": total - successful,
            },
        })
        logger.info(f"Batch news fetch completed: {successful}/{total} successful in {duration}s")

    @staticmethod
    def leading_sectors(securities, count=AIConfig.sector_leader_count):
        """
        Sectors with the largest absolute average pre-open change.

        Sector membership comes from the stock master; unmapped securities
        are ignored.

        Returns:
            list: [{"sector", "avgChange", "leaders": [symbols by |change|]}]
        """
        sectors = {stock.symbol: stock.sector for stock in stock_repo.get_all() if stock.sector}
        rows = [
            {"symbol": s.get("symbol"), "sector": sectors[s.get("symbol")], "change": parse_numeric(s.get("pChange"))}
            for s in securities if s.get("symbol") in sectors
        ]
        if not rows:
            return []

        df = pd.DataFrame(rows)
        df["absChange"] = df["change"].abs()
        averages = df.groupby("sector")["change"].mean()
        ranked = averages.reindex(averages.abs().sort_values(ascending=False).index).head(count)

        leaders = []
        for sector, avg_change in ranked.items():
            members = df[df["sector"] == sector].sort_values("absChange", ascending=False).head(3)
            leaders.append({
                "sector": sector,
                "avgChange": round2(float(avg_change)),
                "leaders": members["symbol"].tolist(),
            })
        return leaders

    def morning_news_analysis(self, channel, date):
        """
        Producer for the morning analysis stream.

        Runs the market summary, a gap analysis per gap stock and the sector
        leader analyses in that order. Every event carries a progress value
        between 0 and 100.
        """
        date = resolve_date(date)
        snapshot = PreopenService.find_latest(date)
        if snapshot is None:
            channel.emit({"type": "error", "progress": 100, "error": f"No preopen data found for {date}"})
            return

        securities = snapshot.securities or []
        gaps = classify_gaps(securities, limit=GapConfig.news_top_n)
        gap_stocks = [(bucket, entry) for bucket in GAP_BUCKETS for entry in gaps[bucket]]
        sectors = self.leading_sectors(securities)
        companies = {s.symbol: s for s in stock_repo.get_by_symbols([e["symbol"] for _, e in gap_stocks])}

        total_steps = 1 + len(gap_stocks) + len(sectors)
        done = 0
        stored = {"MARKET_ANALYSIS": 0, "GAP_ANALYSIS": 0, "SECTOR_LEADER": 0}
        failed = 0

        def progress():
            return int(done * 100 / total_steps)

        channel.emit({
            "type": "start",
            "progress": 0,
            "date": date,
            "gapStocks": len(gap_stocks),
            "sectors": len(sectors),
            "message": f"Starting morning analysis for {date}",
        })

        if channel.cancelled:
            return
        try:
            ai_response = self.adaptor.analyze(market_prompt(date, compute_breadth(securities), gaps["summary"]))
            news = self._store(news_record("MARKET_ANALYSIS", ai_response, date, _timestamp()))
            stored["MARKET_ANALYSIS"] += 1
            done += 1
            channel.emit({"type": "market_complete", "progress": progress(), "data": news_schema.dump(news)})
        except UpstreamError as e:
            failed += 1
            done += 1
            channel.emit({"type": "market_error", "progress": progress(), "error": e.message})

        for bucket, entry in gap_stocks:
            if channel.cancelled:
                logger.info(f"Morning analysis for {date} cancelled at {progress()}%")
                return
            symbol = entry["symbol"]
            stock = companies.get(symbol)
            try:
                news, cached = self._gap_news(
                    symbol, entry["gap"], GAP_TYPE_LABELS[bucket], date,
                    company_name=stock.company_name if stock else None,
                    sector=stock.sector if stock else None,
                )
                if not cached:
                    stored["GAP_ANALYSIS"] += 1
                done += 1
                channel.emit({
                    "type": "gap_complete",
                    "progress": progress(),
                    "symbol": symbol,
                    "status": "cached" if cached else "fetched",
                    "data": news_schema.dump(news),
                })
                if not cached and not channel.cancelled:
                    time.sleep(self.delay_seconds)
            except UpstreamError as e:
                failed += 1
                done += 1
                channel.emit({"type": "gap_error", "progress": progress(), "symbol": symbol, "error": e.message})

        for sector in sectors:
            if channel.cancelled:
                logger.info(f"Morning analysis for {date} cancelled at {progress()}%")
                return
            try:
                ai_response = self.adaptor.analyze(
                    sector_prompt(date, sector["sector"], sector["avgChange"], sector["leaders"])
                )
                news = self._store(news_record(
                    "SECTOR_LEADER", ai_response, date, _timestamp(), sector=sector["sector"]
                ))
                stored["SECTOR_LEADER"] += 1
                done += 1
                channel.emit({
                    "type": "sector_complete",
                    "progress": progress(),
                    "sector": sector["sector"],
                    "data": news_schema.dump(news),
                })
            except UpstreamError as e:
                failed += 1
                done += 1
                channel.emit({"type": "sector_error", "progress": progress(), "sector": sector["sector"],
                              "error": e.message})

        channel.emit({
            "type": "complete",
            "progress": 100,
            "date": date,
            "summary": {**stored, "errors": failed, "gapSummary": gaps["summary"]},
        })
        logger.info(f"Morning analysis for {date} completed: {stored}, {failed} errors")

    @staticmethod
    def search(filters):
        return news_repo.search(filters)

    @staticmethod
    def gap_news(symbol, date):
        news = news_repo.get_gap_news(symbol, date)
        if news is None:
            raise NotFoundError(f"No gap news found for {symbol} on {date}")
        return news

    @staticmethod
    def gap_news_by_date(date):
        return news_repo.get_by_date(resolve_date(date), news_type="GAP_ANALYSIS")

    @staticmethod
    def cleanup(days_to_keep=StoreConfig.default_days_to_keep):
        cutoff = cutoff_datetime(days_to_keep)
        deleted = news_repo.delete_created_before(cutoff)
        if deleted == -1:
            raise UpstreamError("Failed to clean up stock news")
        logger.info(f"Deleted {deleted} news items created before {cutoff.isoformat()}")
        return {"deletedCount": deleted, "cutoffDate": cutoff.isoformat() + "Z"}

    def test_ai(self):
        _require_configured(self.adaptor)
        return self.adaptor.test_connection()
