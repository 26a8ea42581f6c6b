"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from logitrack.config import get_settings
from logitrack.database import engine, create_tables, AsyncSessionLocal
from logitrack.services.seed import seed_defaults
from logitrack.services.storage import Storage
from logitrack.utils.logger import get_logger
from logitrack.api import auth, users, clients, shipments, payments, damages, complaints, tasks, dashboard

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    await create_tables()
    logger.info("Database tables created")

    # Seed default admin and sample clients
    async with AsyncSessionLocal() as session:
        await seed_defaults(Storage(session))

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS; credentials allowed so the session cookie travels with requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(clients.router, prefix="/api/clients", tags=["Clients"])
app.include_router(shipments.router, prefix="/api/shipments", tags=["Shipments"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(damages.router, prefix="/api/damages", tags=["Damages"])
app.include_router(complaints.router, prefix="/api/complaints", tags=["Complaints"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "logitrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
