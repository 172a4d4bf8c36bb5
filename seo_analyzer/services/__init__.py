from .seo_scorer import score_topic, analyze_page, synthesize_page
from .report_formatter import format_webhook_report, format_heuristic_report
from .webhook_client import post_to_webhook
