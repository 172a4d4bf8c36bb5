"""
seo_analyzer/services/seo_scorer.py
Local heuristic SEO scorer.

Builds placeholder page content from a topic string and grades it against
fixed band tables: title length, meta description length, word count and
keyword frequency, plus a flat bonus when the page has headings.
Pure and deterministic, no I/O.
"""
import math
import re
from collections import Counter
from typing import Dict, List, Optional, Tuple

from ..models import (
    ComponentScore, HeuristicReport, Importance, KeywordEntry,
    Priority, Recommendation, SynthesizedPage,
)

WORDS_PER_MINUTE = 200
HEADING_BONUS = 10
MAX_SCORE = 100
MAX_KEYWORDS = 15
MIN_KEYWORD_COUNT = 2
MIN_KEYWORD_LEN = 4
MAX_KEYWORD_LEN = 19

# (low, high, points, status); high=None means unbounded
TITLE_BANDS: List[Tuple[int, Optional[int], int, str]] = [
    (30, 60, 25, "Excellent"),
    (20, 29, 15, "Good"),
    (61, None, 10, "Too Long"),
]
META_BANDS: List[Tuple[int, Optional[int], int, str]] = [
    (120, 160, 25, "Excellent"),
    (100, 119, 15, "Good"),
    (161, None, 10, "Too Long"),
]
SHORT = (5, "Too Short")
MISSING = (0, "Missing")

# (min word count, points, status), first match wins
CONTENT_BANDS: List[Tuple[int, int, str]] = [
    (1000, 25, "Excellent"),
    (500, 18, "Good"),
    (300, 12, "Fair"),
    (1, 5, "Thin"),
]

# (min keyword count, points, status)
KEYWORD_BANDS: List[Tuple[int, int, str]] = [
    (10, 15, "Rich"),
    (5, 10, "Moderate"),
    (1, 5, "Sparse"),
]

GRADES: List[Tuple[int, str]] = [(90, "A+"), (80, "A"), (70, "B"), (60, "C"), (50, "D")]

STOP_WORDS = frozenset("""
    a about above after again against all also am an and any are as at be because been
    before being below between both but by can could did does doing down during each
    every few for from further had has have having he her here hers herself him himself
    his how into is it its itself just like made make many may might more most much must
    myself need no nor not now of off on once only or other our ours ourselves out over
    own same shall she should some such than that the their theirs them themselves then
    there these they this those through to too under until up upon very was we well were
    what when where which while who whom why will with within without would you your
    yours yourself yourselves
""".split())

_PUNCT = re.compile(r"[^\w\s]")

# Body paragraphs for the synthesized page; {topic} is the stripped topic
_PARAGRAPHS = [
    "Welcome to our guide on {topic}. Whether you are just getting started or "
    "already have experience, this page explains what {topic} means, why it "
    "matters for your business and how to get measurable results from it.",
    "{topic} has become a core part of modern online strategy. Businesses that "
    "invest in {topic} usually see better engagement, stronger brand awareness "
    "and steady growth in organic traffic over time.",
    "The benefits of {topic} include clearer communication with customers, "
    "better decisions based on data and a competitive advantage in crowded "
    "markets. Small teams can start with simple steps and expand later.",
    "To get started with {topic}, define your goals, research your audience and "
    "review what competitors are doing. Track progress with simple metrics and "
    "adjust the plan every month.",
    "Common mistakes with {topic} include chasing short term wins, ignoring "
    "analytics and publishing content without a plan. Avoiding these mistakes "
    "keeps your {topic} efforts focused on long term value.",
]


def synthesize_page(topic: str) -> SynthesizedPage:
    """Fabricate placeholder title, meta description, body text and headings."""
    topic = (topic or "").strip()
    if not topic:
        return SynthesizedPage()

    heading_topic = topic.title()
    title = f"{heading_topic} - Complete Guide and Best Practices"
    meta = (
        f"Discover everything you need to know about {topic}. Expert tips, proven "
        f"strategies and practical advice to help you succeed with {topic}."
    )
    headings = [
        heading_topic,
        f"What is {topic}?",
        f"Benefits of {topic}",
        f"How to get started with {topic}",
        f"Common {topic} mistakes",
    ]
    content = "\n\n".join(p.format(topic=topic) for p in _PARAGRAPHS)
    return SynthesizedPage(title=title, meta_description=meta, content=content, headings=headings)


def count_words(text: str) -> int:
    return len(text.split())


def reading_time(word_count: int) -> int:
    """Minutes at 200 words/minute, rounded up."""
    return math.ceil(word_count / WORDS_PER_MINUTE)


def _length_score(length: int, bands) -> ComponentScore:
    if length == 0:
        points, status = MISSING
    else:
        points, status = SHORT
        for low, high, band_points, band_status in bands:
            if length >= low and (high is None or length <= high):
                points, status = band_points, band_status
                break
    return ComponentScore(score=points, max_score=25, status=status)


def score_title(title: str) -> ComponentScore:
    return _length_score(len(title), TITLE_BANDS)


def score_meta(meta: str) -> ComponentScore:
    return _length_score(len(meta), META_BANDS)


def score_content(word_count: int) -> ComponentScore:
    for minimum, points, status in CONTENT_BANDS:
        if word_count >= minimum:
            return ComponentScore(score=points, max_score=25, status=status)
    return ComponentScore(score=0, max_score=25, status="Missing")


def importance(count: int) -> Importance:
    if count > 5:
        return Importance.HIGH
    if count > 3:
        return Importance.MEDIUM
    return Importance.LOW


def extract_keywords(text: str) -> List[KeywordEntry]:
    """
    Most frequent meaningful words in `text`.
    Stop words are dropped; only words of 4–19 characters seen at least twice
    are kept. Ties keep first-seen order.
    """
    words = _PUNCT.sub(" ", text.lower()).split()
    counts = Counter(
        w for w in words
        if w not in STOP_WORDS and MIN_KEYWORD_LEN <= len(w) <= MAX_KEYWORD_LEN
    )
    top = [(w, c) for w, c in counts.most_common() if c >= MIN_KEYWORD_COUNT][:MAX_KEYWORDS]
    return [KeywordEntry(word=w, count=c, importance=importance(c)) for w, c in top]


def score_keywords(keywords: List[KeywordEntry]) -> ComponentScore:
    for minimum, points, status in KEYWORD_BANDS:
        if len(keywords) >= minimum:
            return ComponentScore(score=points, max_score=15, status=status)
    return ComponentScore(score=0, max_score=15, status="Missing")


def grade_for(score: int) -> str:
    for threshold, grade in GRADES:
        if score >= threshold:
            return grade
    return "F"


def _priority(component: ComponentScore) -> Priority:
    return Priority.HIGH if component.score <= 5 else Priority.MEDIUM


def build_recommendations(
    title: ComponentScore,
    meta: ComponentScore,
    content: ComponentScore,
    keywords: ComponentScore,
    has_headings: bool,
) -> List[Recommendation]:
    recs: List[Recommendation] = []

    if title.score < 25:
        recs.append(Recommendation(
            priority=_priority(title),
            category="Title",
            issue=f"Title tag is {title.status.lower()}",
            recommendation="Write a descriptive title between 30 and 60 characters that includes your main topic.",
        ))
    if meta.score < 25:
        recs.append(Recommendation(
            priority=_priority(meta),
            category="Meta Description",
            issue=f"Meta description is {meta.status.lower()}",
            recommendation="Keep the meta description between 120 and 160 characters and summarize the page value.",
        ))
    if content.score < 18:
        recs.append(Recommendation(
            priority=_priority(content),
            category="Content",
            issue="Page content is too short",
            recommendation="Expand the page to at least 500 words of useful, original content.",
        ))
    if keywords.score < 10:
        recs.append(Recommendation(
            priority=_priority(keywords),
            category="Keywords",
            issue="Few recurring keywords",
            recommendation="Use your main topic and related terms naturally and consistently throughout the page.",
        ))
    if not has_headings:
        recs.append(Recommendation(
            priority=Priority.MEDIUM,
            category="Headings",
            issue="No headings found",
            recommendation="Structure the page with an H1 and descriptive H2 subheadings.",
        ))
    return recs


def analyze_page(page: SynthesizedPage, topic: str = "") -> HeuristicReport:
    """Score a page in a single pass and derive grade and recommendations."""
    word_count = count_words(page.content)
    title = score_title(page.title)
    meta = score_meta(page.meta_description)
    content = score_content(word_count)
    keywords = extract_keywords(" ".join([page.title, page.meta_description, page.content]))
    keyword_score = score_keywords(keywords)
    bonus = HEADING_BONUS if page.headings else 0

    total = title.score + meta.score + content.score + keyword_score.score + bonus
    overall = max(0, min(MAX_SCORE, total))

    return HeuristicReport(
        topic=topic,
        page=page,
        title_length=len(page.title),
        meta_length=len(page.meta_description),
        word_count=word_count,
        reading_time_minutes=reading_time(word_count),
        title=title,
        meta_description=meta,
        content=content,
        keywords=keyword_score,
        heading_bonus=bonus,
        overall_score=overall,
        grade=grade_for(overall),
        top_keywords=keywords,
        recommendations=build_recommendations(title, meta, content, keyword_score, bool(page.headings)),
    )


def score_topic(topic: str) -> HeuristicReport:
    """Convenience entry point: synthesize a page for `topic` and score it."""
    topic = (topic or "").strip()
    return analyze_page(synthesize_page(topic), topic)


def component_breakdown(report: HeuristicReport) -> Dict[str, int]:
    return {
        "title": report.title.score,
        "meta_description": report.meta_description.score,
        "content": report.content.score,
        "keywords": report.keywords.score,
        "headings": report.heading_bonus,
    }
