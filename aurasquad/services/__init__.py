"""Service layer — squad state, analytics, query dispatch and advice."""

from .advisor import SquadAdvisor
from .analytics import (
    AnalyticsMetrics,
    AnalyticsService,
    CategoryCount,
    TokenFlow,
    TrendPoint,
    UserEngagement,
)
from .query_processor import (
    QueryAnalysis,
    QueryBranch,
    QueryProcessor,
    QueryRequest,
    SquadResponse,
)
from .squad_service import SquadService
from .templates import SQUAD_TEMPLATES, SquadRole, SquadTemplate, SquadType, get_template

__all__ = [
    "SquadAdvisor",
    "AnalyticsMetrics", "AnalyticsService", "CategoryCount", "TokenFlow",
    "TrendPoint", "UserEngagement",
    "QueryAnalysis", "QueryBranch", "QueryProcessor", "QueryRequest", "SquadResponse",
    "SquadService",
    "SQUAD_TEMPLATES", "SquadRole", "SquadTemplate", "SquadType", "get_template",
]
