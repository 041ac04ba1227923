"""crawlcost - Exceptions"""


class CrawlCostError(Exception):
    """Base class for crawlcost errors"""


class ConfigError(CrawlCostError):
    """Invalid pricing or signature configuration"""


class StorageError(CrawlCostError):
    """The log store failed to insert or query records"""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"log store {operation} failed: {cause}")
        self.operation = operation
        self.cause = cause
