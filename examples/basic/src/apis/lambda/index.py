"""Health check."""


async def default() -> dict:
    return {"status": "healthy"}
