"""
Unit tests for the report formatter, the webhook client and form validation.
"""
import asyncio
import re
import httpx
import pytest
from unittest.mock import patch

from seo_analyzer.exceptions import InvalidFieldError, MissingFieldsError, WebhookError, WebhookResponseError
from seo_analyzer.models import AnalyzeRequest
from seo_analyzer.services import webhook_client
from seo_analyzer.services.report_formatter import (
    format_heuristic_report, format_webhook_report, keywords_from_text,
    normalize_current_keywords, unwrap_payload,
)
from seo_analyzer.services.seo_scorer import score_topic
from seo_analyzer.utils.clock import now_iso
from seo_analyzer.utils.validation import check_submission, validate_email, validate_url

NOW = "2024-06-01T12:00:00Z"
ISO_MILLIS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def make_request(**kwargs) -> AnalyzeRequest:
    data = {"websiteUrl": "https://example.com", "mainTopic": "home brewing", "email": None}
    data.update(kwargs)
    return AnalyzeRequest(**data)


# ─── Validation ────────────────────────────────────────────────────────────────

class TestValidation:

    @pytest.mark.parametrize("url", ["https://example.com", "http://sub.example.org/path?q=1", "ftp://files.example.com"])
    def test_valid_urls(self, url):
        assert validate_url(url) is True

    @pytest.mark.parametrize("url", ["example.com", "https://", "", "just words"])
    def test_invalid_urls(self, url):
        assert validate_url(url) is False

    @pytest.mark.parametrize("email", ["", None, "a@b.co", "first.last@example.com"])
    def test_valid_emails(self, email):
        assert validate_email(email) is True

    @pytest.mark.parametrize("email", ["plain", "a@b", "a b@c.com", "@example.com"])
    def test_invalid_emails(self, email):
        assert validate_email(email) is False

    def test_required_fields_checked_first(self):
        with pytest.raises(MissingFieldsError):
            check_submission("not a url", "", "bad")

    def test_url_checked_before_email(self):
        with pytest.raises(InvalidFieldError, match="valid website URL"):
            check_submission("not a url", "topic", "bad")

    def test_valid_submission_passes(self):
        check_submission("https://example.com", "topic", None)


# ─── Report formatter ──────────────────────────────────────────────────────────

class TestUnwrapPayload:

    def test_object_passes_through(self):
        assert unwrap_payload({"a": 1}) == {"a": 1}

    def test_array_takes_first(self):
        assert unwrap_payload([{"a": 1}, {"a": 2}]) == {"a": 1}

    @pytest.mark.parametrize("value", [[], None, "text", 42, ["x"]])
    def test_unusable_values_become_empty(self, value):
        assert unwrap_payload(value) == {}


class TestCurrentKeywords:

    def test_regular_list_is_kept(self):
        value = [{"word": "garden", "count": 4}]
        assert normalize_current_keywords(value) == value

    def test_text_blob_is_reextracted(self):
        blob = "Organic gardens need compost. Compost feeds gardens, and gardens love compost 2024 2024 2024."
        result = normalize_current_keywords([{"word": blob}])
        assert result[0] == {"word": "gardens", "count": 3}
        assert {"word": "compost", "count": 3} in result
        assert all(k["word"] != "2024" for k in result)

    def test_blob_extraction_caps_at_fifteen(self):
        text = " ".join(f"keyword{chr(97 + i)}" for i in range(30))
        assert len(keywords_from_text(text)) == 15

    def test_non_list_becomes_empty(self):
        assert normalize_current_keywords("marketing") == []


class TestFormatWebhookReport:

    def test_nested_keys_win_over_aliases(self):
        data = {"seo_score": 80, "score": 10, "content_gaps": {"gap_count": 3}, "gap_count": 9}
        env = format_webhook_report(make_request(), data, now=NOW)
        assert env.seo_report.seo_score == 80
        assert env.seo_report.content_gaps.gap_count == 3

    def test_falsy_values_fall_through(self):
        data = {"seo_score": 0, "score": 42, "recommendations": [], "suggested_improvements": ["x"]}
        env = format_webhook_report(make_request(), data, now=NOW)
        assert env.seo_report.seo_score == 42
        assert env.seo_report.recommendations == ["x"]

    def test_defaults(self):
        env = format_webhook_report(make_request(), {}, now=NOW)
        assert env.version == 8
        assert env.timestamp == NOW
        assert env.seo_report.analysis_date == NOW
        assert env.seo_report.keyword_opportunities.total_found == 0
        assert env.seo_report.competitor_analysis.competitor_domains == []
        assert env.lead_info.analysis_date == NOW
        assert env.detailed_analysis is None

    def test_detailed_analysis_suppressed(self):
        env = format_webhook_report(make_request(), {"detailed_analysis": {"a": 1}}, now=NOW, include_detailed=False)
        assert env.detailed_analysis is None

    def test_wrong_type_falls_through_to_alias(self):
        data = {"content_gaps": {"gap_count": "many"}, "gap_count": 3, "keywords": "seo", "current_keywords": {}}
        env = format_webhook_report(make_request(), data, now=NOW)
        assert env.seo_report.content_gaps.gap_count == 3
        assert env.seo_report.current_keywords == []

    def test_non_finite_numbers_are_defaulted(self):
        env = format_webhook_report(make_request(), {"seo_score": "nan", "score": float("inf")}, now=NOW)
        assert env.seo_report.seo_score == 0

    def test_generated_timestamps_use_milliseconds(self):
        env = format_webhook_report(make_request(), {})
        assert ISO_MILLIS.match(env.timestamp)
        assert env.seo_report.analysis_date == env.timestamp
        assert ISO_MILLIS.match(now_iso())


class TestFormatHeuristicReport:

    def test_envelope_mirrors_scorer(self):
        report = score_topic("home brewing")
        env = format_heuristic_report(make_request(email="me@example.com"), report, now=NOW)
        assert env.seo_report.seo_score == report.overall_score
        assert env.seo_report.keyword_opportunities.total_found == len(report.top_keywords)
        assert env.seo_report.content_gaps.gap_count == len(report.recommendations)
        assert env.seo_report.keyword_opportunities.long_tail_opportunities[0] == "how to get started with home brewing"
        assert env.lead_info.email == "me@example.com"
        assert env.detailed_analysis["grade"] == report.grade
        assert env.detailed_analysis["score_breakdown"]["headings"] == 10

    def test_next_steps_are_high_priority_only(self):
        report = score_topic("")
        env = format_heuristic_report(make_request(mainTopic=""), report, now=NOW)
        high = [r.recommendation for r in report.recommendations if r.priority.value == "high"]
        assert env.seo_report.next_steps == high
        assert env.seo_report.keyword_opportunities.long_tail_opportunities == []
        assert env.seo_report.content_gaps.coverage_score == 0


# ─── Webhook client ────────────────────────────────────────────────────────────

def _mock_transport(handler):
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    return patch.object(webhook_client.httpx, "AsyncClient", side_effect=factory)


class TestWebhookClient:

    def test_posts_json_and_returns_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json=[{"seo_score": 70}])

        with _mock_transport(handler):
            data = asyncio.run(webhook_client.post_to_webhook({"websiteUrl": "https://example.com"}))

        assert data == [{"seo_score": 70}]
        assert seen["method"] == "POST"
        assert seen["url"] == webhook_client.settings.webhook_url
        assert b"https://example.com" in seen["body"]

    def test_non_2xx_raises(self):
        with _mock_transport(lambda request: httpx.Response(404)):
            with pytest.raises(WebhookError) as exc:
                asyncio.run(webhook_client.post_to_webhook({}))
        assert exc.value.details == "Webhook responded with status: 404 Not Found"

    def test_invalid_json_raises(self):
        with _mock_transport(lambda request: httpx.Response(200, text="<html>oops</html>")):
            with pytest.raises(WebhookResponseError):
                asyncio.run(webhook_client.post_to_webhook({}))

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _mock_transport(handler):
            with pytest.raises(WebhookError, match="Failed to process SEO analysis"):
                asyncio.run(webhook_client.post_to_webhook({}))
