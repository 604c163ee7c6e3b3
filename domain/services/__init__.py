"""
Domain services.

These services implement the answer engine while depending only on domain
models and ports so that infrastructure and caller layers can remain thin.
"""

from .agent_tools import (  # noqa: F401
    AGENT_TOOLS,
    PHONE_SENTINEL,
    AgentTool,
    ToolArgumentError,
    ToolNotFoundError,
    ToolRegistry,
)
from .answer_agent import AgentRun, AnswerAgent
from .answer_cache import AnswerCache
from .answer_validator import AnswerValidator
from .checkbox_analyzer import CheckboxAnalyzer
from .data_retriever import DataRetriever
from .rate_limiter import RateLimiter
from .reasoning_parser import parse_option_analysis, parse_reasoning
from .rule_based_answerer import RuleBasedAnswerer, is_answerable_question

__all__ = [
    "AGENT_TOOLS",
    "PHONE_SENTINEL",
    "AgentTool",
    "ToolArgumentError",
    "ToolNotFoundError",
    "ToolRegistry",
    "AgentRun",
    "AnswerAgent",
    "AnswerCache",
    "AnswerValidator",
    "CheckboxAnalyzer",
    "DataRetriever",
    "RateLimiter",
    "parse_reasoning",
    "parse_option_analysis",
    "RuleBasedAnswerer",
    "is_answerable_question",
]
