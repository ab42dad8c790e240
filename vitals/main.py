import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vitals.config import settings
from vitals.energy.errors import InputValidationError, UpstreamFetchError
from vitals.energy.router import router as energy_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Smart Vitals Energy", version="0.1.0")
app.include_router(energy_router)


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(UpstreamFetchError)
async def upstream_fetch_handler(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": f"Upstream read failed: {exc.source}"})


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "energy": {
            "target": "/energy/target",
            "stored_target": "/energy/users/{user_id}/target",
            "workout_estimate": "/energy/workouts/estimate",
            "workout_stats": "/energy/workouts/stats",
            "balance": "/energy/balance",
            "insights": "/energy/insights",
            "intake": "/energy/intake",
            "tables": "/energy/tables",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
