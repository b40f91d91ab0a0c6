from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from evalproxy.core.exceptions.exceptions import InvalidCategoryError
from evalproxy.schemas.numbers import ErrorResponse, NumbersResponse
from evalproxy.services.number_service import NumberService
from evalproxy.utils.log import app_logger

router = APIRouter(tags=["Numbers"])


def get_number_service(request: Request) -> NumberService:
    return request.app.state.number_service


@router.get(
    "/numbers/{numberid}",
    response_model=NumbersResponse,
    summary="Fetch numbers for a category and return the sliding-window average",
    responses={400: {"description": "Unknown number category", "model": ErrorResponse}},
)
def get_numbers(numberid: str, service: NumberService = Depends(get_number_service)):
    """Merge freshly fetched numbers into the window for `numberid` (p, f, e or r).

    Upstream failures are not errors here: the window is returned unchanged
    and `numbers` is empty.
    """
    try:
        return service.refresh(numberid)
    except InvalidCategoryError as e:
        app_logger.info("api.numbers.invalid_category", category=numberid)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})
