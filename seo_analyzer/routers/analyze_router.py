"""
seo_analyzer/routers/analyze_router.py
Analysis endpoints: webhook proxy, local heuristic report and raw scoring.
"""
from fastapi import APIRouter
from loguru import logger

from ..config import get_settings
from ..exceptions import WebhookError
from ..models import AnalysisResponse, AnalyzeRequest, ErrorResponse, HeuristicReport, ScoreRequest
from ..services.report_formatter import format_heuristic_report, format_webhook_report
from ..services.seo_scorer import score_topic
from ..services.webhook_client import post_to_webhook
from ..utils.validation import check_submission

router = APIRouter(prefix="/api", tags=["Analysis"])

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _local_report(req: AnalyzeRequest) -> AnalysisResponse:
    report = score_topic(req.mainTopic)
    return format_heuristic_report(
        req, report, include_detailed=get_settings().include_detailed_analysis,
    )


@router.post("/analyze", response_model=AnalysisResponse, responses=_ERRORS)
async def analyze(req: AnalyzeRequest):
    """
    Forward the submission to the automation workflow and return its report
    in the version 8 envelope. Falls back to the local heuristic report when
    the workflow fails and LOCAL_FALLBACK is enabled.
    """
    check_submission(req.websiteUrl, req.mainTopic, req.email)
    settings = get_settings()
    logger.info("Analysis requested for {} (topic={!r})", req.websiteUrl, req.mainTopic)

    try:
        data = await post_to_webhook(req.model_dump(exclude_none=True))
    except WebhookError as e:
        if not settings.local_fallback:
            logger.error("Analysis failed for {}: {}", req.websiteUrl, e.details)
            raise
        logger.warning("Webhook failed for {} ({}), serving local report", req.websiteUrl, e.details)
        return _local_report(req)

    return format_webhook_report(req, data, include_detailed=settings.include_detailed_analysis)


@router.post("/analyze/local", response_model=AnalysisResponse, responses=_ERRORS)
async def analyze_local(req: AnalyzeRequest):
    """Heuristic report built from the topic alone; the workflow is not contacted."""
    check_submission(req.websiteUrl, req.mainTopic, req.email)
    logger.info("Local analysis for {} (topic={!r})", req.websiteUrl, req.mainTopic)
    return _local_report(req)


@router.post("/score", response_model=HeuristicReport)
async def score(req: ScoreRequest):
    return score_topic(req.topic)
