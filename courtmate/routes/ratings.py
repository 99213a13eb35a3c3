"""
Rating conversion routes.
"""

from fastapi import APIRouter, HTTPException, Query, status

from courtmate.features.ratings.conversion import UTR_MAX, UTR_MIN, utr_to_ntrp, utr_to_ntrp_raw
from courtmate.features.scheduling.domain.errors import InvalidParameterError
from courtmate.models.api.rating_response import RatingConversionResponse

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.get("/utr-to-ntrp", response_model=RatingConversionResponse)
async def convert_utr(
    utr: float = Query(..., ge=UTR_MIN, le=UTR_MAX, description="UTR rating (1.00-16.50)"),
):
    """Convert a UTR rating to the equivalent NTRP rating."""
    try:
        return RatingConversionResponse(
            utr=utr, ntrp=utr_to_ntrp(utr), ntrp_unrounded=utr_to_ntrp_raw(utr)
        )
    except InvalidParameterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
