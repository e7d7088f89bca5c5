"""FastAPI web application for breakwatch."""

import logging
import math
from threading import Lock
from typing import List, Optional
from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from breakwatch import config
from breakwatch.errors import DoorNotFoundError, InvalidDateError, UpstreamFetchError
from breakwatch.integrations.verkada import VerkadaClient, order_doors_for_breaks
from breakwatch.models.report import BreakReport, Door
from breakwatch.engine.report import generate_break_report

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="breakwatch API",
    description="Break-room session and anti-passback report for access-controlled doors",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# One client per process so the API token cache is shared across requests
_client: Optional[VerkadaClient] = None
_client_lock = Lock()


class DoorsResponse(BaseModel):
    """Response for door listing."""
    doors: List[Door]


def get_verkada_client() -> VerkadaClient:
    """FastAPI dependency returning the shared Verkada client."""
    global _client
    with _client_lock:
        if _client is None:
            try:
                _client = VerkadaClient()
            except ValueError as e:
                logger.error(f"Verkada client not configured: {e}")
                raise HTTPException(status_code=500, detail=str(e))
        return _client


def parse_min_minutes(value: Optional[str]) -> float:
    """Parse the min_minutes query value, falling back to the default for anything non-numeric."""
    if value is None:
        return config.DEFAULT_MIN_MINUTES
    try:
        parsed = float(value)
    except ValueError:
        return config.DEFAULT_MIN_MINUTES
    if not math.isfinite(parsed):
        return config.DEFAULT_MIN_MINUTES
    return parsed


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/api/doors", response_model=DoorsResponse)
def list_doors(client: VerkadaClient = Depends(get_verkada_client)):
    """List doors for the configured site, break-room doors first."""
    try:
        doors = client.fetch_doors(site_id=config.SITE_ID)
    except UpstreamFetchError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to fetch doors: {e}")
    return DoorsResponse(doors=order_doors_for_breaks(doors))


@app.get("/api/break-report", response_model=BreakReport)
def break_report(
    door_id: Optional[str] = Query(None, description="Door to report on"),
    date: Optional[str] = Query(None, description="Day as YYYY-MM-DD (defaults to today in the door's timezone)"),
    min_minutes: Optional[str] = Query(None, description="Minimum total break minutes (defaults to 45)"),
    client: VerkadaClient = Depends(get_verkada_client),
):
    """Build the break report for one door and one day."""
    if not door_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing door_id")

    threshold = parse_min_minutes(min_minutes)
    try:
        return generate_break_report(client, door_id, date_iso=date, threshold_minutes=threshold)
    except DoorNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidDateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamFetchError as e:
        logger.error(f"Break report for door {door_id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate break report: {e}",
        )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
