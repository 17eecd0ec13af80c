"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class SnapshotTooLargeError(DomainException):
    """Snapshot has more transactions than one assessment accepts"""

    def __init__(self, transaction_count: int, limit: int):
        super().__init__(f"Snapshot has {transaction_count} transactions, limit is {limit}")
        self.transaction_count = transaction_count
        self.limit = limit
