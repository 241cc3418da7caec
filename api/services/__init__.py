"""
API Services - Aggregation, formatting and data access for the reporting API.

The aggregators (normalizer, revenue, trends, distribution, comparison,
gaming, attendance, expenses, export formatting) are pure functions over
already-fetched records. ReportingRepository owns every backend call and ReportingService
wires the two together for the routers.
"""

from .breakdown_calculator import BreakdownStats, calculate_percentage, compute_breakdown, safe_rate
from .export_cache import ExportCache
from .extractors import extract_affiliation, extract_year, is_internal
from .normalizer import day_key_of, normalize_registration, normalize_registrations
from .reporting_repository import ReportingRepository
from .reporting_service import ReportingService
from .revenue import Revenue
from .safety import total_function

__all__ = [
    # Repository
    "ReportingRepository",
    # Services
    "ReportingService",
    "ExportCache",
    # Normalization
    "normalize_registration",
    "normalize_registrations",
    "day_key_of",
    # Breakdown calculator
    "BreakdownStats",
    "compute_breakdown",
    "safe_rate",
    "calculate_percentage",
    # Extractors
    "extract_affiliation",
    "extract_year",
    "is_internal",
    # Revenue
    "Revenue",
    "total_function",
]
