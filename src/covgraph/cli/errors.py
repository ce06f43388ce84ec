"""Process exit codes of the ``covgraph`` command, following ``<sysexits.h>``."""

EXIT_OK = 0
EXIT_GENERIC = 1  # unreadable report (permissions, I/O)
EXIT_DATAERR = 65  # malformed XML or attribute in the report
EXIT_NOINPUT = 66  # report file does not exist
EXIT_CONFIG = 78  # --config file does not exist

__all__ = ["EXIT_CONFIG", "EXIT_DATAERR", "EXIT_GENERIC", "EXIT_NOINPUT", "EXIT_OK"]
