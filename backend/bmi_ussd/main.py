# /bmi_ussd/main.py

import os
import time
import uvicorn
import asyncio
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from bmi_ussd.config import strings
from bmi_ussd.config.settings import settings
from bmi_ussd.utils.lifecycle import lifespan
from bmi_ussd.utils.metrics import response_time_histogram
from bmi_ussd.utils.ussd_protocol import END_MARKER
from bmi_ussd.routes import public, ussd

app = FastAPI(
    title="USSD BMI Calculator",
    version="1.0.0",
    description="USSD menu that computes and categorizes Body Mass Index",
    lifespan=lifespan,
    openapi_url=f"/api/{settings.api_version}/openapi.json" if settings.environment != "production" else None,
    docs_url=f"/api/{settings.api_version}/docs" if settings.environment != "production" else None,
    redoc_url=None,
)

@app.middleware("http")
async def performance_middleware(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response_time_histogram.labels(endpoint=request.url.path).observe(process_time)
    response.headers["X-Process-Time"] = str(process_time)
    return response

@app.middleware("http")
async def timeout_middleware(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.request_timeout_seconds)
    except asyncio.TimeoutError:
        # The gateway shows the body to the caller, so answer in its format.
        return PlainTextResponse(f"{END_MARKER} {strings.TEMPLATES['ERROR'][settings.default_language]}", status_code=200)

# --- API Routers ---
app.include_router(public.router)
app.include_router(ussd.router)

# --- Main Entry Point for Uvicorn (for local development) ---
if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "127.0.0.1")

    uvicorn.run(
        "bmi_ussd.main:app",
        host=host,
        port=port,
        reload=True if settings.environment == "development" else False,
        workers=settings.workers if settings.environment == "production" else 1
    )
