"""
News Utilities

Prompt text for the AI provider and normalization of its replies into
stock news records.
"""
from typing import Dict, List, Optional

from .numeric_utils import parse_numeric

NEWS_TYPES = ("MARKET_ANALYSIS", "GAP_ANALYSIS", "SECTOR_LEADER")
NEWS_CATEGORIES = ("EARNINGS", "ORDERS", "MANAGEMENT", "REGULATORY", "BLOCK_DEAL", "SECTOR", "TECHNICAL", "NO_NEWS")
SENTIMENTS = ("Bullish", "Bearish", "Neutral")

GAP_TYPE_LABELS = {
    "strongGapUp": "Strong Gap Up",
    "moderateGapUp": "Moderate Gap Up",
    "moderateGapDown": "Moderate Gap Down",
    "strongGapDown": "Strong Gap Down",
}

_RESPONSE_FORMAT = """Format as JSON:
{
  "headline": "Brief news headline if found, otherwise 'No specific news identified'",
  "reason": "Specific reason in 1-2 sentences",
  "newsCategory": "EARNINGS/ORDERS/MANAGEMENT/REGULATORY/BLOCK_DEAL/SECTOR/TECHNICAL/NO_NEWS",
  "sentiment": "Bullish/Bearish/Neutral",
  "confidence": "High/Medium/Low",
  "priceAction": "Continue/Reversal/Monitor",
  "details": "Additional context if any"
}"""


def gap_stock_prompt(symbol: str, gap_percent: float, gap_type: str,
                     company_name: str, sector: str, date: str) -> str:
    sign = "+" if gap_percent > 0 else ""
    return f"""
Analyze why this Indian stock is gapping in preopen trading on {date}:

Stock: {symbol} ({company_name})
Gap: {sign}{gap_percent}% ({gap_type})
Sector: {sector}

Search for specific news from past 24 hours that could explain this gap:

1. EARNINGS/RESULTS: Quarterly results, guidance updates
2. ORDERS: Major order wins/losses (>Rs 100 Cr)
3. MANAGEMENT: Management changes, appointments
4. REGULATORY: SEBI actions, regulatory approvals/penalties
5. BLOCK_DEALS: Large block/bulk transactions (>Rs 50 Cr)
6. SECTOR NEWS: Sector-specific developments affecting this stock
7. TECHNICAL: Major breakouts/breakdowns with fundamental backing

IMPORTANT: Only provide reasons based on actual verifiable news. If no specific news found, state "No specific news identified" and explain likely technical/sector reasons.

{_RESPONSE_FORMAT}"""


def market_prompt(date: str, breadth: Dict, gap_summary: Dict) -> str:
    return f"""
Summarize the Indian equity market setup for the session on {date}.

Pre-open breadth: {breadth.get('advances', 0)} advances, {breadth.get('declines', 0)} declines, {breadth.get('unchanged', 0)} unchanged.
Gap distribution: {gap_summary.get('strongGapUpCount', 0)} strong gap ups, {gap_summary.get('moderateGapUpCount', 0)} moderate gap ups, {gap_summary.get('moderateGapDownCount', 0)} moderate gap downs, {gap_summary.get('strongGapDownCount', 0)} strong gap downs.

Cover overnight global cues, domestic macro news and any index-level events from the past 24 hours.

{_RESPONSE_FORMAT}"""


def sector_prompt(date: str, sector: str, avg_change: float, leaders: List[str]) -> str:
    sign = "+" if avg_change > 0 else ""
    return f"""
Explain the pre-open move of the {sector} sector in Indian markets on {date}.

Average pre-open change: {sign}{avg_change}%
Leading stocks: {', '.join(leaders) if leaders else 'n/a'}

Identify sector-specific news from the past 24 hours behind the move.

{_RESPONSE_FORMAT}"""


def _pick(value, allowed, default):
    return value if value in allowed else default


def news_record(news_type: str, ai_response: Dict, date: str, timestamp: str,
                symbol: Optional[str] = None, company_name: Optional[str] = None,
                sector: Optional[str] = None, gap_percent: Optional[float] = None,
                gap_type: Optional[str] = None) -> Dict:
    """Column mapping for a StockNewsModel row built from an AI reply"""
    return {
        "type": news_type,
        "symbol": symbol.upper() if symbol else None,
        "company_name": company_name or symbol,
        "sector": sector,
        "date": date,
        "gap_percent": parse_numeric(gap_percent, default=None),
        "gap_type": gap_type,
        "headline": ai_response.get("headline") or "No specific news found",
        "reason": ai_response.get("reason") or "Technical gap or sector movement",
        "details": ai_response.get("details"),
        "news_category": _pick(ai_response.get("newsCategory"), NEWS_CATEGORIES, "NO_NEWS"),
        "sentiment": _pick(ai_response.get("sentiment"), SENTIMENTS, "Neutral"),
        "confidence": ai_response.get("confidence") or "Medium",
        "price_action": ai_response.get("priceAction") or "Monitor",
        "source": "Grok AI",
        "status": "ACTIVE",
        "timestamp": timestamp,
    }
