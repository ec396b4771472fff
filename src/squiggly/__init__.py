"""squiggly: field-selection filter nodes, matching engine and transforms."""

from squiggly.config import SquigglyConfig, apply_config, load_config
from squiggly.environment import (
    Environment,
    EnvironmentPolicy,
    get_active_policy,
    set_active_policy,
)
from squiggly.errors import (
    ConfigLoadError,
    ExpressionError,
    FilterLoadError,
    FunctionInvocationError,
    FunctionResolutionError,
    InvalidNameError,
    SquigglyError,
)
from squiggly.filter_logger import configure_logging
from squiggly.functions import FunctionRegistry, default_registry, squiggly_function
from squiggly.loader import load_filter, parse_filter_document
from squiggly.matching import MatchOutcome, MatchResult, match_field, should_include
from squiggly.names import (
    AnyDeepName,
    AnyShallowName,
    ExactName,
    PatternName,
    VariableName,
    parse_name,
)
from squiggly.nodes import EMPTY, ROOT, FilterNode, FunctionNode
from squiggly.pipeline import FieldDecision, apply_functions, invoke, process_field
from squiggly.validator import (
    Diagnostic,
    Severity,
    ValidationResult,
    load_and_validate_filter,
    validate_filter,
)

__all__ = [
    "AnyDeepName",
    "AnyShallowName",
    "apply_config",
    "apply_functions",
    "ConfigLoadError",
    "configure_logging",
    "default_registry",
    "Diagnostic",
    "EMPTY",
    "Environment",
    "EnvironmentPolicy",
    "ExactName",
    "ExpressionError",
    "FieldDecision",
    "FilterLoadError",
    "FilterNode",
    "FunctionInvocationError",
    "FunctionNode",
    "FunctionRegistry",
    "FunctionResolutionError",
    "get_active_policy",
    "InvalidNameError",
    "invoke",
    "load_and_validate_filter",
    "load_config",
    "load_filter",
    "match_field",
    "MatchOutcome",
    "MatchResult",
    "parse_filter_document",
    "parse_name",
    "PatternName",
    "process_field",
    "ROOT",
    "set_active_policy",
    "Severity",
    "should_include",
    "squiggly_function",
    "SquigglyConfig",
    "SquigglyError",
    "validate_filter",
    "ValidationResult",
    "VariableName",
]
