import logging

from fastapi import FastAPI

from quiz_duedate.core.config import LOG_LEVEL
from quiz_duedate.core.logging_middleware import LoggingMiddleware
from quiz_duedate.db.init_db import init_db
from quiz_duedate.routers.events import router as events_router
from quiz_duedate.routers.overrides import router as overrides_router
from quiz_duedate.routers.policies import router as policies_router
from quiz_duedate.routers.privacy import router as privacy_router

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Quiz Due Date")

# Middleware
app.add_middleware(LoggingMiddleware)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(policies_router, tags=["duedate"])
app.include_router(overrides_router, tags=["overrides"])
app.include_router(events_router, tags=["events"])
app.include_router(privacy_router, tags=["privacy"])
