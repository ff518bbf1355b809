"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecordStoreError(DomainException):
    """Record store call failed or the store is unavailable"""

    def __init__(self, message: str, table: str = "", operation: str = ""):
        super().__init__(message)
        self.table = table
        self.operation = operation


class BillNotFoundError(DomainException):
    """No bill exists with the requested id"""

    pass


class NotAnInstallmentBillError(DomainException):
    """Immediate payments require a bill with total_owed set"""

    pass
