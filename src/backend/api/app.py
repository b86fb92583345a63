from __future__ import annotations

from fastapi import FastAPI

from api.timesheets import router as timesheets_router


def create_app() -> FastAPI:
    app = FastAPI(title="UKRI timesheet compliance")
    app.include_router(timesheets_router)
    return app


app = create_app()
