"""
Request/response boundary of the dependency analysis engine
"""

from migrationgraph.api.handler import handle_analyze_request
from migrationgraph.api.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse

__all__ = ["handle_analyze_request", "AnalyzeRequest", "AnalyzeResponse", "ErrorResponse"]
