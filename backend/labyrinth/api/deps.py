"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from labyrinth.config import Settings, get_settings

# Type aliases for cleaner route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
