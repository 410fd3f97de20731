from fastapi import HTTPException, status


class StorageError(Exception):
    """The database could not complete an operation"""

    def __init__(self, message: str = "Storage error"):
        super().__init__(message)
        self.message = message


def not_found(detail: str = "Book not found"):
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
