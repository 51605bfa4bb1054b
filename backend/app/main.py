# Billing back-office backend entrypoint.

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import catalog
from backend.app.api import clients
from backend.app.api import company_profiles
from backend.app.api import documents
from backend.app.api import invoices
from backend.app.api import login
from backend.app.api import quotations
from backend.app.api import reference
from backend.app.api import register
from backend.app.api import subscriptions
from backend.app.api.errors import register_exception_handlers
from backend.app.core.seed import seed_reference_data
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine

logger = logging.getLogger(__name__)

settings = get_settings()
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(company_profiles.router)
app.include_router(clients.router)
app.include_router(invoices.router)
app.include_router(quotations.router)
app.include_router(catalog.router)
app.include_router(documents.router)
app.include_router(subscriptions.router)
app.include_router(reference.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def seed_reference_tables():
    # Tests seed what they need explicitly.
    if not settings.seed_on_startup or os.getenv("PYTEST_CURRENT_TEST"):
        return
    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()
