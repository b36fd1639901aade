#!/usr/bin/env python3
"""
permitscout JSON API

Serves regions with their statistics, permit point fields, address search,
boundary coverage and the drill session to the map frontend.
"""
import logging
from functools import lru_cache
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from permitscout.config import API_HOST, API_PORT, FRONTEND_ORIGIN
from permitscout.errors import DrillTransitionError
from permitscout.regions import load_region_dataset
from permitscout.runtime import AtlasRuntime

APP_NAME = "permitscout API"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_runtime() -> AtlasRuntime:
    return AtlasRuntime(load_region_dataset())


class DrillRequest(BaseModel):
    level: str
    id: Optional[str] = None


app = FastAPI(title=APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True, "app": APP_NAME}


@app.get("/api/states")
def get_states(runtime: AtlasRuntime = Depends(get_runtime)):
    return runtime.dataset.as_collection(runtime.dataset.get_state_regions())


@app.get("/api/states/{fips}/counties")
def get_state_counties(fips: str, runtime: AtlasRuntime = Depends(get_runtime)):
    if runtime.dataset.find_state(fips) is None:
        raise HTTPException(status_code=404, detail=f"State '{fips}' not found.")
    return runtime.dataset.as_collection(runtime.dataset.counties_in_state(fips))


@app.get("/api/regions/{fips}/permits")
def get_region_permits(fips: str, runtime: AtlasRuntime = Depends(get_runtime)):
    points = runtime.permit_points(fips)
    if points is None:
        raise HTTPException(status_code=404, detail=f"Region '{fips}' not found.")
    return points


@app.get("/api/counties/{fips}/cities")
def get_county_cities(fips: str, runtime: AtlasRuntime = Depends(get_runtime)):
    return runtime.cities.cities_for_county(str(fips).zfill(5))


@app.get("/api/search")
def search(
    q: str = Query(..., description="Free-form US address"),
    runtime: AtlasRuntime = Depends(get_runtime),
):
    return runtime.search(q)


@app.get("/api/boundaries")
def get_boundaries(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
    runtime: AtlasRuntime = Depends(get_runtime),
):
    result = runtime.boundaries_at(lat, lon)
    if result is None:
        raise HTTPException(status_code=400, detail="Invalid coordinates.")
    return result


@app.get("/api/coverage")
def get_coverage(
    q: str = Query(..., description="Free-form US address"),
    runtime: AtlasRuntime = Depends(get_runtime),
):
    result = runtime.coverage_for(q)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No match for '{q}'.")
    return result


@app.get("/api/drill")
def get_drill(runtime: AtlasRuntime = Depends(get_runtime)):
    return runtime.drill.summary()


@app.post("/api/drill")
def post_drill(request: DrillRequest, runtime: AtlasRuntime = Depends(get_runtime)):
    try:
        runtime.drill.drill_to(request.level, request.id)
    except DrillTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return runtime.drill.summary(include_detail=True)


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
