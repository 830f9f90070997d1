"""Local host layer: configuration, state, planning and applying changes."""

from .apply import Applier, ApplyResult, destroy, import_resource
from .configuration import Configuration, DataConfig, ResourceConfig, resolve
from .drift import AttributeChange, detect_drift, requires_replace
from .plan import Action, Change, Plan, Planner
from .state import ResourceState, State

__all__ = [
    "Action",
    "Applier",
    "ApplyResult",
    "AttributeChange",
    "Change",
    "Configuration",
    "DataConfig",
    "Plan",
    "Planner",
    "ResourceConfig",
    "ResourceState",
    "State",
    "destroy",
    "detect_drift",
    "import_resource",
    "requires_replace",
    "resolve",
]
