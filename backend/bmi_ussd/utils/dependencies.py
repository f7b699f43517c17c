# /bmi_ussd/utils/dependencies.py

import secrets
from typing import Optional
from fastapi import Request, HTTPException

from bmi_ussd.config.settings import settings
from bmi_ussd.services.navigator import SessionNavigator
from bmi_ussd.services.result_log import ResultLog
from bmi_ussd.services.session_store import SessionStore

# Accessors for the collaborators built in the lifespan and kept on app.state.

def get_navigator(request: Request) -> SessionNavigator:
    return request.app.state.navigator

def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store

def get_result_log(request: Request) -> Optional[ResultLog]:
    return request.app.state.result_log

async def verify_metrics_access(request: Request):
    if settings.metrics_api_key:
        provided_key = request.headers.get("X-API-KEY")
        if not (provided_key and secrets.compare_digest(provided_key, settings.metrics_api_key)):
            raise HTTPException(status_code=403, detail="Invalid or missing API key")
