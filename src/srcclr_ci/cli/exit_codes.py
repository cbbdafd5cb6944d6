"""Exit codes returned by the launcher itself.

When the agent runs, its own exit code is propagated unchanged.
"""

from srcclr_ci.core.errors import EXIT_LAUNCHER_FAILURE

EXIT_SUCCESS = 0
EXIT_FAILURE = EXIT_LAUNCHER_FAILURE
EXIT_INTERRUPTED = 130
