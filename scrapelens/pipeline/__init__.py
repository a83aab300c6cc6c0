"""Pipeline package — the scrape → extract → cache orchestrator."""

from scrapelens.pipeline.orchestrator import (
    PipelineResult,
    PipelineRun,
    PipelineState,
    ScrapePipeline,
)
from scrapelens.pipeline.validation import parse_fields, validate_request

__all__ = [
    "ScrapePipeline",
    "PipelineRun",
    "PipelineResult",
    "PipelineState",
    "parse_fields",
    "validate_request",
]
