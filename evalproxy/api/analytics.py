from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from evalproxy.core.exceptions.exceptions import UpstreamError
from evalproxy.schemas.analytics import PostsResponse, TopUsersResponse
from evalproxy.schemas.numbers import ErrorResponse
from evalproxy.services.analytics_service import AnalyticsService, PostKind
from evalproxy.utils.log import app_logger

router = APIRouter(tags=["Analytics"])

API_DOCS = {
    "message": "Social Media Analytics API",
    "endpoints": [
        {
            "path": "/api/users/top",
            "method": "GET",
            "description": "Get top 5 users with the most commented posts",
        },
        {
            "path": "/api/posts",
            "method": "GET",
            "query": "type (latest or popular)",
            "description": "Get posts by type. Popular shows posts with most comments, latest shows 5 newest posts",
        },
    ],
}


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


@router.get("/", summary="API documentation")
def index() -> dict:
    return API_DOCS


@router.get(
    "/api/users/top",
    response_model=TopUsersResponse,
    summary="Users whose posts have the most comments",
    responses={500: {"description": "Evaluation service failure", "model": ErrorResponse}},
)
def top_users(service: AnalyticsService = Depends(get_analytics_service)):
    try:
        return {"users": service.compute_top_users()}
    except UpstreamError as e:
        app_logger.error("api.users_top.error", exc_type=type(e).__name__, error=str(e))
    except Exception as e:
        # unusable upstream records (missing ids, bad types) end up here
        app_logger.error("api.users_top.unexpected_error", error=str(e), exc_info=e)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to fetch top users"},
    )


@router.get(
    "/api/posts",
    response_model=PostsResponse,
    summary="Latest or most commented posts",
    responses={500: {"description": "Evaluation service failure", "model": ErrorResponse}},
)
def posts(
    post_type: str = Query("latest", alias="type", description="latest or popular; anything else means latest"),
    service: AnalyticsService = Depends(get_analytics_service),
):
    kind = PostKind.POPULAR if post_type == PostKind.POPULAR.value else PostKind.LATEST
    try:
        return {"posts": service.compute_posts(kind)}
    except UpstreamError as e:
        app_logger.error("api.posts.error", kind=kind.value, exc_type=type(e).__name__, error=str(e))
    except Exception as e:
        app_logger.error("api.posts.unexpected_error", kind=kind.value, error=str(e), exc_info=e)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to fetch posts"},
    )
