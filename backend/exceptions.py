import logging

from fastapi import status
from fastapi.requests import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# ---------------------------
# Store (file persistence)
# ---------------------------

class StoreError(Exception):
    """Base class for all mood store errors."""
    pass

class StoreLoadError(StoreError):
    """Raised when the backing file cannot be read or parsed."""
    pass

class StoreWriteError(StoreError):
    """Raised when persisting the collection to disk fails."""
    pass

class DuplicateIdError(StoreError):
    """Raised when an explicit id is live or was already handed out."""

    def __init__(self, entry_id: int):
        super().__init__(f"Mood entry id {entry_id} is already in use or was used before")
        self.entry_id = entry_id

class EntryNotFoundError(StoreError):
    """Raised when no entry matches the requested id."""

    def __init__(self, entry_id: int):
        super().__init__(f"Mood entry {entry_id} not found")
        self.entry_id = entry_id

# ---------------------------
# Decoding
# ---------------------------

class TagDecodeError(ValueError):
    """Raised when a tag does not name any member of the target enum."""

    def __init__(self, enum_name: str, tag: str):
        super().__init__(f"'{tag}' is not a valid {enum_name}")
        self.enum_name = enum_name
        self.tag = tag


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def register_exception_handlers(app):
    @app.exception_handler(EntryNotFoundError)
    async def not_found_handler(request: Request, exc: EntryNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StoreWriteError)
    async def write_error_handler(request: Request, exc: StoreWriteError):
        logger.error(f"Store write failed: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Failed to save mood journal"},
        )
