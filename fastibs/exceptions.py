class FastIBSError(Exception):
    """Base exception for the package"""
    pass

class ConfigError(FastIBSError):
    """Raised when run parameters are inconsistent (window size, k-mer length, threads)"""
    pass

class KmerIndexError(FastIBSError):
    """Raised when a k-mer index is missing, unreadable or malformed"""
    pass

class ParseError(FastIBSError):
    """Raised when a sequence file is empty or of an unknown format"""
    pass

class OutputError(FastIBSError):
    """Raised when an output file cannot be written"""
    pass

class TaskError(FastIBSError):
    """Raised after a parallel run when one or more tasks failed"""

    def __init__(self, failures):
        self.failures = list(failures)
        first = self.failures[0] if self.failures else None
        message = f"{len(self.failures)} task(s) failed"
        if first is not None:
            message += f"; first failure at task {first.index}: {first.error}"
        super().__init__(message)
