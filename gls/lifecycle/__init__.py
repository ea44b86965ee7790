"""Install/update lifecycle: argument checks, staging and the run state machine."""

from .context import LifecycleContext, RunKind
from .controller import LifecycleController, Phase
from .errors import LifecycleError, LifecycleStateError
from .staging import StagingArea, StagingError

__all__ = [
    "LifecycleContext",
    "LifecycleController",
    "LifecycleError",
    "LifecycleStateError",
    "Phase",
    "RunKind",
    "StagingArea",
    "StagingError",
]
