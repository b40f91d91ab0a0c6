from typing import Any, Dict

from evalproxy.clients.evaluation_client import EvaluationClient
from evalproxy.core.exceptions.exceptions import InvalidCategoryError, UpstreamError
from evalproxy.services.window_store import WindowStore
from evalproxy.utils.log import app_logger


class NumberService:
    """Feeds freshly fetched numbers into the per-category windows."""

    def __init__(self, client: EvaluationClient, store: WindowStore):
        self.client = client
        self.store = store

    def refresh(self, category: str) -> Dict[str, Any]:
        # reject unknown categories before touching the network
        if not self.store.is_valid(category):
            raise InvalidCategoryError(category)

        try:
            fetched = self.client.get_numbers(category)
            app_logger.info("numbers.fetched", category=category, count=len(fetched))
        except UpstreamError as e:
            # a failed round just means no new numbers
            app_logger.warning("numbers.fetch_failed", category=category, exc_type=type(e).__name__, error=str(e))
            fetched = []

        update = self.store.update(category, fetched)
        app_logger.debug("numbers.window_updated", category=category, size=len(update.curr_state), avg=update.avg)

        return {
            "windowPrevState": update.prev_state,
            "windowCurrState": update.curr_state,
            "numbers": fetched,
            "avg": update.avg,
        }
