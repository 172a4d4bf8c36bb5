from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Union
from enum import Enum


class Importance(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ─── Request Models ────────────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    # Optional at parse time: missing fields get the 400 envelope, not a 422
    websiteUrl: Optional[str] = Field(None, description="Website to analyze")
    mainTopic: Optional[str] = Field(None, description="What the website is primarily about")
    email: Optional[str] = Field(None, description="Optional address for the detailed report")

    model_config = {
        "json_schema_extra": {
            "example": {
                "websiteUrl": "https://example.com",
                "mainTopic": "digital marketing",
                "email": "you@example.com",
            }
        }
    }


class ScoreRequest(BaseModel):
    topic: str = Field("", description="Topic to synthesize and score")


# ─── Heuristic Scorer Models ───────────────────────────────────────────────────

class KeywordEntry(BaseModel):
    word: str
    count: int
    importance: Importance


class Recommendation(BaseModel):
    priority: Priority
    category: str
    issue: str
    recommendation: str


class ComponentScore(BaseModel):
    score: int
    max_score: int
    status: str


class SynthesizedPage(BaseModel):
    title: str = ""
    meta_description: str = ""
    content: str = ""
    headings: List[str] = []


class HeuristicReport(BaseModel):
    topic: str
    page: SynthesizedPage
    title_length: int
    meta_length: int
    word_count: int
    reading_time_minutes: int
    title: ComponentScore
    meta_description: ComponentScore
    content: ComponentScore
    keywords: ComponentScore
    heading_bonus: int
    overall_score: int
    grade: str
    top_keywords: List[KeywordEntry] = []
    recommendations: List[Recommendation] = []


# ─── Report Envelope (version 8) ───────────────────────────────────────────────

class RequestInfo(BaseModel):
    website_url: str
    main_topic: str
    email: Optional[str] = None


class KeywordOpportunities(BaseModel):
    total_found: Union[int, float] = 0
    priority_keywords: List[Any] = []
    long_tail_opportunities: List[Any] = []


class ContentGaps(BaseModel):
    missing_topics: List[Any] = []
    gap_count: Union[int, float] = 0
    coverage_score: Union[int, float] = 0


class CompetitorAnalysis(BaseModel):
    competitors_found: Union[int, float] = 0
    competitor_domains: List[Any] = []


class SEOReport(BaseModel):
    analysis_date: str
    seo_score: Union[int, float] = 0
    current_keywords: List[Any] = []
    keyword_opportunities: KeywordOpportunities = KeywordOpportunities()
    content_gaps: ContentGaps = ContentGaps()
    competitor_analysis: CompetitorAnalysis = CompetitorAnalysis()
    recommendations: List[Any] = []
    next_steps: List[Any] = []


class LeadInfo(BaseModel):
    email: str = ""
    analysis_date: str


class AnalysisResponse(BaseModel):
    version: int = 8
    timestamp: str
    request_info: RequestInfo
    seo_report: SEOReport
    lead_info: LeadInfo
    detailed_analysis: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    timestamp: str
