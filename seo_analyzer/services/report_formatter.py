"""
seo_analyzer/services/report_formatter.py
Shapes upstream and local results into the version 8 report envelope.

The workflow behind the webhook has changed its output over time, so each
field is read from its current key first and then from older aliases.
"""
import math
import re
from collections import Counter
from typing import Any, Dict, List, Optional

from ..models import (
    AnalysisResponse, AnalyzeRequest, CompetitorAnalysis, ContentGaps,
    HeuristicReport, Importance, KeywordOpportunities, LeadInfo, Priority, RequestInfo, SEOReport,
)
from ..utils.clock import now_iso
from .seo_scorer import component_breakdown

REPORT_VERSION = 8

_BLOB_STOP_WORDS = frozenset(
    "and the that this with from your our their have for not are was were been being "
    "will would should could can may might must shall".split()
)
_NON_WORD = re.compile(r"[^\w\s]")


def unwrap_payload(data: Any) -> Dict[str, Any]:
    """Some workflow versions answer with a one-element array."""
    if isinstance(data, list):
        data = data[0] if data else {}
    return data if isinstance(data, dict) else {}


NUMBER = (int, float)


def _accepts(value: Any, kind: Any) -> bool:
    # bool is an int subclass; a flag is never a score or a count
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return isinstance(value, kind)


def _parse_number(text: str) -> Any:
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def _first(data: Dict[str, Any], *paths: str, default: Any = None, kind: Any = object) -> Any:
    """
    Return the first truthy value of type `kind` among dotted `paths`, else
    `default`. Values of the wrong type are skipped like missing ones.
    """
    for path in paths:
        value: Any = data
        for part in path.split("."):
            value = value.get(part) if isinstance(value, dict) else None
            if value is None:
                break
        if kind is NUMBER and isinstance(value, str):
            value = _parse_number(value)
        if value and _accepts(value, kind):
            return value
    return default


def keywords_from_text(text: str, limit: int = 15) -> List[Dict[str, Any]]:
    words = [
        w for w in _NON_WORD.sub(" ", text.lower()).split()
        if len(w) > 4 and not w.isdigit() and w not in _BLOB_STOP_WORDS
    ]
    return [{"word": w, "count": c} for w, c in Counter(words).most_common(limit)]


def normalize_current_keywords(value: Any) -> List[Any]:
    """
    Older workflow versions put the whole scraped page text into
    current_keywords[0].word instead of a keyword list.
    Detect that and extract real keywords from the text.
    """
    if not isinstance(value, list) or not value:
        return value if isinstance(value, list) else []
    first = value[0]
    if isinstance(first, dict) and isinstance(first.get("word"), str) and len(first["word"].split()) > 1:
        return keywords_from_text(first["word"])
    return value


def format_webhook_report(
    body: AnalyzeRequest,
    data: Any,
    now: Optional[str] = None,
    include_detailed: bool = True,
) -> AnalysisResponse:
    now = now or now_iso()
    d = unwrap_payload(data)

    seo_report = SEOReport(
        analysis_date=_first(d, "analysis_date", default=now, kind=str),
        seo_score=_first(d, "seo_score", "score", default=0, kind=NUMBER),
        current_keywords=normalize_current_keywords(_first(d, "current_keywords", "keywords", default=[], kind=list)),
        keyword_opportunities=KeywordOpportunities(
            total_found=_first(d, "keyword_opportunities.total_found", "total_keywords", default=0, kind=NUMBER),
            priority_keywords=_first(d, "keyword_opportunities.priority_keywords", "priority_keywords", default=[], kind=list),
            long_tail_opportunities=_first(
                d, "keyword_opportunities.long_tail_opportunities", "long_tail_keywords", default=[], kind=list
            ),
        ),
        content_gaps=ContentGaps(
            missing_topics=_first(d, "content_gaps.missing_topics", "missing_topics", default=[], kind=list),
            gap_count=_first(d, "content_gaps.gap_count", "gap_count", default=0, kind=NUMBER),
            coverage_score=_first(d, "content_gaps.coverage_score", "coverage", default=0, kind=NUMBER),
        ),
        competitor_analysis=CompetitorAnalysis(
            competitors_found=_first(d, "competitor_analysis.competitors_found", "competitors_count", default=0, kind=NUMBER),
            competitor_domains=_first(d, "competitor_analysis.competitor_domains", "competitors", default=[], kind=list),
        ),
        recommendations=_first(d, "recommendations", "suggested_improvements", default=[], kind=list),
        next_steps=_first(d, "next_steps", "action_items", default=[], kind=list),
    )

    return AnalysisResponse(
        version=REPORT_VERSION,
        timestamp=now,
        request_info=RequestInfo(
            website_url=body.websiteUrl, main_topic=body.mainTopic, email=body.email or None,
        ),
        seo_report=seo_report,
        lead_info=LeadInfo(email=body.email or "", analysis_date=now),
        detailed_analysis=_first(d, "detailed_analysis", kind=dict) if include_detailed else None,
    )


def _long_tail(topic: str) -> List[str]:
    topic = topic.strip().lower()
    if not topic:
        return []
    return [
        f"how to get started with {topic}",
        f"best {topic} strategies",
        f"{topic} for small businesses",
        f"common {topic} mistakes to avoid",
    ]


def detailed_analysis(report: HeuristicReport) -> Dict[str, Any]:
    return {
        "title": {"text": report.page.title, "length": report.title_length, **report.title.model_dump()},
        "meta_description": {
            "text": report.page.meta_description,
            "length": report.meta_length,
            **report.meta_description.model_dump(),
        },
        "content": {
            "word_count": report.word_count,
            "reading_time_minutes": report.reading_time_minutes,
            **report.content.model_dump(),
        },
        "headings": {"count": len(report.page.headings), "items": report.page.headings, "bonus": report.heading_bonus},
        "keywords": {**report.keywords.model_dump(), "top": [k.model_dump(mode="json") for k in report.top_keywords]},
        "score_breakdown": component_breakdown(report),
        "overall_score": report.overall_score,
        "grade": report.grade,
        "recommendations": [r.model_dump(mode="json") for r in report.recommendations],
    }


def format_heuristic_report(
    body: AnalyzeRequest,
    report: HeuristicReport,
    now: Optional[str] = None,
    include_detailed: bool = True,
) -> AnalysisResponse:
    now = now or now_iso()
    gaps = [r.category for r in report.recommendations]
    priority = [k.word for k in report.top_keywords if k.importance in (Importance.HIGH, Importance.MEDIUM)]

    seo_report = SEOReport(
        analysis_date=now,
        seo_score=report.overall_score,
        current_keywords=[k.model_dump(mode="json") for k in report.top_keywords],
        keyword_opportunities=KeywordOpportunities(
            total_found=len(report.top_keywords),
            priority_keywords=priority,
            long_tail_opportunities=_long_tail(report.topic),
        ),
        content_gaps=ContentGaps(
            missing_topics=gaps,
            gap_count=len(gaps),
            coverage_score=round(report.content.score * 100 / report.content.max_score),
        ),
        competitor_analysis=CompetitorAnalysis(),
        recommendations=[r.recommendation for r in report.recommendations],
        next_steps=[r.recommendation for r in report.recommendations if r.priority == Priority.HIGH],
    )

    return AnalysisResponse(
        version=REPORT_VERSION,
        timestamp=now,
        request_info=RequestInfo(
            website_url=body.websiteUrl, main_topic=body.mainTopic, email=body.email or None,
        ),
        seo_report=seo_report,
        lead_info=LeadInfo(email=body.email or "", analysis_date=now),
        detailed_analysis=detailed_analysis(report) if include_detailed else None,
    )
