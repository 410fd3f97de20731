from starlette.requests import Request

FLASH_KEY = "flashes"


def flash(request: Request, message: str, category: str = "info") -> None:
    """Keep a message in the session until the next page render"""
    request.session.setdefault(FLASH_KEY, []).append(
        {"message": message, "category": category}
    )


def pop_flashes(request: Request) -> list[dict]:
    return request.session.pop(FLASH_KEY, [])
