"""Exception types raised by the core.

All of them derive from ViewerError so the session layer can report any
failure uniformly while leaving the current image untouched.
"""


class ViewerError(Exception):
    """Base class for recoverable viewer failures."""


class ValidationError(ViewerError, ValueError):
    """Malformed or out-of-range user input (sizes, radii, steps)."""


class ImageLoadError(ViewerError, RuntimeError):
    """File missing, unreadable, undecodable or truncated."""


class ExportError(ViewerError, OSError):
    """Writing an export file failed."""


class SelectionError(ViewerError):
    """Empty or out-of-bounds selection for an operation that needs one."""


class NoImageError(ViewerError):
    """Operation requires a loaded image."""


class PluginError(ViewerError):
    """Filter plugin could not be loaded or faulted while running."""
