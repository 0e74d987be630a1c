# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_THRESHOLD = 2  # Coverage is below the configured minimum
EXIT_DATAERR = 65  # Input data was invalid (e.g., malformed LCOV)
EXIT_NOINPUT = 66  # Input file not found (e.g., lcov.info missing)
EXIT_UNAVAILABLE = 69  # GitHub API or genhtml unavailable
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad event payload)
