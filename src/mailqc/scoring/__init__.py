"""Rule-based email scoring engine."""

from .clarity import analyze_clarity
from .grammar import check_grammar, check_grammar_async
from .orchestrator import calculate_overall_score, score_content, score_email, score_email_async
from .structure import analyze_structure
from .templates import analyze_template_consistency, identify_template
from .tone import analyze_tone

__all__ = [
    "analyze_clarity",
    "analyze_structure",
    "analyze_template_consistency",
    "analyze_tone",
    "calculate_overall_score",
    "check_grammar",
    "check_grammar_async",
    "identify_template",
    "score_content",
    "score_email",
    "score_email_async",
]
