"""
Contract-aligned session registry usecases.

The ordering engine only reads sessions; these are the thin registration and
lookup functions the CLI and HTTP layers call to manage them.
"""

from . import session_add  # noqa: I001
from . import session_show  # noqa: I001  # Depends on session_add
from . import session_update  # noqa: I001  # Depends on session_add
