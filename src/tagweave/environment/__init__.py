"""Environment: errors, document settings and stock fragments.

Only the exceptions are re-exported here; ``settings`` and ``fragments``
depend on the template package and are imported from their modules.
"""

from tagweave.environment.exceptions import (
    BasedTemplateError,
    DeferredError,
    ErrorCode,
    StreamConsumedError,
    TemplateError,
    TemplateRuntimeError,
    TemplateValueError,
    UnresolvedTemplateError,
)

__all__ = [
    "BasedTemplateError",
    "DeferredError",
    "ErrorCode",
    "StreamConsumedError",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateValueError",
    "UnresolvedTemplateError",
]
