from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Session from the factory the application was built with"""
    async with request.app.state.session_factory() as session:
        yield session
