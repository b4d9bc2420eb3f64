"""
Attraction submission and duplicate lookup endpoints.

POST /add    Validate and cache a submitted attraction
GET  /check  Names of cached attractions similar to ?name=
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from ..errors import CacheReadError, CacheWriteError, ValidationError
from ..models.submission import parse_submission
from ..services.cache_repository import CacheRepository
from ..services.normalizer import to_id
from ..services.title_matcher import find_similar
from .dependencies import get_cache_repository

logger = logging.getLogger(__name__)
router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/add")
async def add_attraction(
    request: Request,
    cache: CacheRepository = Depends(get_cache_repository),
) -> Response:
    """
    Submit an attraction.

    Responds 400 with {"error": ...} when the body is rejected, 500 when
    the cache write fails, and 200 with an empty body on success.
    """
    try:
        raw = parse_submission(await request.body())
    except ValidationError as e:
        logger.info(f"Rejected attraction submission: {e.message}")
        return _error(e.status_code, e.message)

    record = raw.to_record()
    try:
        cache.put_attraction(record)
    except CacheWriteError as e:
        return _error(500, e.message)

    return Response(status_code=200)


@router.get("/check")
async def check_availability(
    name: str = Query(..., description="Attraction name to look up"),
    cache: CacheRepository = Depends(get_cache_repository),
):
    """
    Find cached attractions with a similar name.

    Returns a JSON array of display names whose normalized ids are at
    least Config.MATCH_THRESHOLD similar to the normalized query.
    """
    try:
        titles = cache.read_all_titles()
    except CacheReadError as e:
        logger.error(f"Title lookup failed: {e.message}")
        return _error(500, e.message)

    return find_similar(to_id(name), titles)
