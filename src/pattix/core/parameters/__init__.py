from .meta import ParamMeta
from .patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
    validate_flow_parameters,
    validate_spirograph_parameters,
    validate_tree_parameters,
)

__all__ = [
    "FlowFieldParameters",
    "ParamMeta",
    "SpirographParameters",
    "TreeParameters",
    "validate_flow_parameters",
    "validate_spirograph_parameters",
    "validate_tree_parameters",
]
