"""
Request/response entry point for dependency analysis
"""

import logging
from typing import Any, Dict, Optional

import pydantic

from migrationgraph.analysis.orchestrator import analyze
from migrationgraph.api.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from migrationgraph.config import Config, get_config
from migrationgraph.core.models import AnalysisInputError, ComponentLoadError, ValidationError
from migrationgraph.io.base import ComponentLoaderBase

logger = logging.getLogger(__name__)


def handle_analyze_request(
    payload: Dict[str, Any],
    loader: ComponentLoaderBase,
    config: Optional[Config] = None
) -> Dict[str, Any]:
    """
    Validate a request, load the organization's graph and analyze it

    Args:
        payload: {"organizationId": str, "componentIds": [str, ...]}
        loader: Source of the organization's component graph
        config: Configuration (global one if None)

    Returns:
        Serialized AnalyzeResponse, or ErrorResponse with error type
        `invalid_request`, `load_error` or `input_error`
    """
    config = config or get_config()

    try:
        request = AnalyzeRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.warning(f"Invalid analysis request: {e.error_count()} error(s)")
        return ErrorResponse.build("invalid_request", str(e)).model_dump(by_alias=True)

    if len(request.component_ids) > config.max_selection_size:
        message = (f"Selection of {len(request.component_ids)} components exceeds the limit "
                   f"of {config.max_selection_size}")
        return ErrorResponse.build("invalid_request", message).model_dump(by_alias=True)

    logger.info(f"Analyzing {len(request.component_ids)} components for org {request.organization_id}")

    try:
        graph = loader.load_graph(request.organization_id)
    except (ComponentLoadError, ValidationError) as e:
        logger.error(f"Error loading components for {request.organization_id}: {e}")
        return ErrorResponse.build("load_error", str(e)).model_dump(by_alias=True)

    if len(graph) > config.max_graph_size:
        message = (f"Organization has {len(graph)} components, above the limit "
                   f"of {config.max_graph_size}")
        return ErrorResponse.build("invalid_request", message).model_dump(by_alias=True)

    allow_partial = request.allow_partial or config.allow_partial_selection
    try:
        result = analyze(request.component_ids, graph, allow_partial=allow_partial)
    except AnalysisInputError as e:
        logger.warning(f"Analysis input error: {e}")
        return ErrorResponse.build("input_error", str(e), e.missing_ids).model_dump(by_alias=True)

    response = AnalyzeResponse.model_validate({"success": True, **result.to_dict()})
    return response.model_dump(by_alias=True)
