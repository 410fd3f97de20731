from bookcafe.client.api_client import ApiError, BookApiClient
from bookcafe.client.state import ReadingListController

__all__ = ["ApiError", "BookApiClient", "ReadingListController"]
