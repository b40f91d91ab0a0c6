from typing import Any, Dict, List, Tuple

from evalproxy.clients.base_http_client import BaseHTTPClient
from evalproxy.config.settings import settings
from evalproxy.core.exceptions.exceptions import InvalidCategoryError, MalformedResponse
from evalproxy.utils.log import app_logger


# number category -> upstream path
CATEGORY_ENDPOINTS = {
    "p": "primes",
    "f": "fibo",
    "e": "even",
    "r": "rand",
}


class EvaluationClient(BaseHTTPClient):
    """Client for the evaluation service.

    Every fetch checks only the shape of the enclosing field (list or mapping);
    the records inside are passed through untouched.
    """

    def __init__(self, base_url: str = None, api_key: str = None, timeout: float = None, **kwargs):
        super().__init__(
            base_url=base_url or settings.EVALUATION_BASE_URL,
            api_key=api_key if api_key is not None else settings.EVALUATION_API_TOKEN,
            timeout=timeout if timeout is not None else settings.ANALYTICS_TIMEOUT,
            **kwargs,
        )

    def _setup_authentication(self):
        self.session.headers["Authorization"] = f"Bearer {self.api_key}"

    def _get_list(self, endpoint: str, field: str) -> List[Any]:
        payload = self.get(endpoint)
        value = payload.get(field) if isinstance(payload, dict) else None
        if not isinstance(value, list):
            raise MalformedResponse(endpoint, field)
        return value

    def get_numbers(self, category: str) -> List[Any]:
        path = CATEGORY_ENDPOINTS.get(category)
        if path is None:
            raise InvalidCategoryError(category)
        numbers = self._get_list(f"/{path}", "numbers")
        # bool is an int subclass but not a number here
        if not all(isinstance(n, (int, float)) and not isinstance(n, bool) for n in numbers):
            raise MalformedResponse(f"/{path}", "numbers")
        app_logger.debug("evaluation.numbers", category=category, count=len(numbers))
        return numbers

    def get_users(self) -> List[Tuple[str, Any]]:
        """Return users as ordered ``(user_id, name)`` pairs, in upstream order."""
        payload = self.get("/users")
        users = payload.get("users") if isinstance(payload, dict) else None
        if not isinstance(users, dict):
            raise MalformedResponse("/users", "users")
        return [(str(user_id), name) for user_id, name in users.items()]

    def get_user_posts(self, user_id) -> List[Dict[str, Any]]:
        return self._get_list(f"/users/{user_id}/posts", "posts")

    def get_post_comments(self, post_id) -> List[Dict[str, Any]]:
        return self._get_list(f"/posts/{post_id}/comments", "comments")
