from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from evalproxy.clients.evaluation_client import EvaluationClient
from evalproxy.config.settings import settings
from evalproxy.services.cache_store import CacheStore
from evalproxy.utils.log import app_logger


class PostKind(str, Enum):
    LATEST = "latest"
    POPULAR = "popular"


# cache namespaces
USERS = "users"
POSTS = "posts"
COMMENTS = "comments"
TOP_USERS = "top_users"
DERIVED_POSTS = {
    PostKind.LATEST: "latest_posts",
    PostKind.POPULAR: "popular_posts",
}


class AnalyticsService:
    """Top commenters and post rankings over cached evaluation-service data.

    Comment fetches for one user's posts run concurrently on the worker pool;
    users are walked one at a time, in upstream order, so rankings tie-break
    on that order.
    """

    def __init__(
        self,
        client: EvaluationClient,
        cache: CacheStore,
        executor: Optional[ThreadPoolExecutor] = None,
        top_users_limit: int = settings.TOP_USERS_LIMIT,
        latest_posts_limit: int = settings.LATEST_POSTS_LIMIT,
    ):
        self.client = client
        self.cache = cache
        self.executor = executor or ThreadPoolExecutor(max_workers=settings.ANALYTICS_MAX_WORKERS)
        self.top_users_limit = top_users_limit
        self.latest_posts_limit = latest_posts_limit

    # cached fetches

    def get_users(self) -> List[Tuple[str, Any]]:
        return self.cache.get_or_load(USERS, self._loader(USERS, None, self.client.get_users))

    def get_user_posts(self, user_id) -> List[Dict[str, Any]]:
        return self.cache.get_or_load(
            POSTS, self._loader(POSTS, user_id, lambda: self.client.get_user_posts(user_id)), key=str(user_id)
        )

    def get_post_comments(self, post_id) -> List[Dict[str, Any]]:
        return self.cache.get_or_load(
            COMMENTS, self._loader(COMMENTS, post_id, lambda: self.client.get_post_comments(post_id)), key=str(post_id)
        )

    def _loader(self, namespace, key, fetch):
        def load():
            app_logger.debug("cache.miss", namespace=namespace, key=key, in_flight=self.cache.in_flight)
            return fetch()
        return load

    def _comment_counts(self, posts: List[Dict[str, Any]]) -> List[int]:
        comments = self.executor.map(lambda post: self.get_post_comments(post["id"]), posts)
        return [len(c) for c in comments]

    # aggregations

    def compute_top_users(self) -> List[Dict[str, Any]]:
        return self.cache.get_or_load(TOP_USERS, self._rank_users)

    def _rank_users(self) -> List[Dict[str, Any]]:
        ranked = []
        for user_id, name in self.get_users():
            posts = self.get_user_posts(user_id)
            ranked.append({
                "id": user_id,
                "name": name,
                "commentCount": sum(self._comment_counts(posts)),
            })

        # sorted() is stable, so equal counts keep user order
        ranked = sorted(ranked, key=lambda u: u["commentCount"], reverse=True)[:self.top_users_limit]
        app_logger.info("analytics.top_users.computed", users=len(ranked))
        return ranked

    def compute_posts(self, kind: PostKind = PostKind.LATEST) -> List[Dict[str, Any]]:
        kind = PostKind(kind)
        return self.cache.get_or_load(DERIVED_POSTS[kind], lambda: self._rank_posts(kind))

    def _annotated_posts(self) -> List[Dict[str, Any]]:
        users = self.get_users()
        names = dict(users)
        annotated = []
        for user_id, _ in users:
            posts = self.get_user_posts(user_id)
            for post, count in zip(posts, self._comment_counts(posts)):
                annotated.append({
                    **post,
                    "commentCount": count,
                    "userName": names.get(str(post.get("userid"))),
                })
        return annotated

    def _rank_posts(self, kind: PostKind) -> List[Dict[str, Any]]:
        posts = self._annotated_posts()

        if kind is PostKind.POPULAR:
            posts = sorted(posts, key=lambda p: p["commentCount"], reverse=True)
            max_comments = posts[0]["commentCount"] if posts else 0
            # ties at the top are all kept
            result = [p for p in posts if p["commentCount"] == max_comments]
        else:
            # higher ids are newer
            result = sorted(posts, key=lambda p: p["id"], reverse=True)[:self.latest_posts_limit]

        app_logger.info("analytics.posts.computed", kind=kind.value, total=len(posts), returned=len(result))
        return result

    def close(self):
        self.executor.shutdown(wait=False)
