import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from core.config import settings
from core.database import create_db_and_tables
from routes.auth import router as auth_router
from routes.projects import router as project_router
from routes.issues import router as issues_router
from routes.team_members import router as team_members_router
from routes.clients import router as clients_router
from routes.notifications import router as notifications_router
from routes.companies import router as companies_router
from routes.users import router as users_router
from routes.pricing import router as pricing_router
from routes.contact import router as contact_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =========================================
# 🏁 Lifespan (DB initialization)
# =========================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("✅ Database tables created on startup.")
    yield
    logger.info("✅ Application shutting down.")

# =========================================
#  ✅ FastAPI App
# =========================================
app = FastAPI(
    lifespan=lifespan,
    title="ProjectHub Backend",
    debug=settings.DEBUG,
    docs_url=None if settings.IS_PRODUCTION else "/docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list({settings.FRONTEND_URL, *settings.CORS_ORIGINS}),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================
# 📦 Routers
# =========================================
app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(project_router, prefix="/projects", tags=["Projects"])
app.include_router(issues_router, prefix="/issues", tags=["Issues"])
app.include_router(team_members_router, prefix="/team-members", tags=["Team Members"])
app.include_router(clients_router, prefix="/clients", tags=["Clients"])
app.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
app.include_router(users_router, prefix="/users", tags=["Users"])
app.include_router(companies_router)
app.include_router(pricing_router)
app.include_router(contact_router)


# =========================================
# 🩺 Health Check
# =========================================
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "Backend is running"}


@app.get("/")
def read_root():
    return {"message": "Welcome to ProjectHub Backend!"}
