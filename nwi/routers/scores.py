# nwi/routers/scores.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from nwi.api.deps import get_score_resolver
from nwi.api.formats import render
from nwi.core.exceptions import BadFormatError, NotFoundError, UpstreamResolutionError
from nwi.services.scores import ScoreResolver

router = APIRouter()

@router.get("/scores")
async def get_scores(
    address: Optional[str] = Query(None),
    zipcode: Optional[str] = Query(None),
    # Kept as strings: bad paging values fall back to defaults instead of a 422
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    format: str = Query("json"),
    resolver: ScoreResolver = Depends(get_score_resolver),
):
    """
    With `address`: score of the tract containing that address.
    Without it: paginated listing, optionally restricted to a zip code.
    """
    try:
        if address and address.strip():
            payload = await resolver.get_score(address.strip(), format)
        else:
            payload = await resolver.list_scores(zipcode, limit, offset, format)
        return render(payload, format)
    except BadFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamResolutionError as e:
        raise HTTPException(status_code=502, detail=str(e))
