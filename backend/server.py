from fastapi import FastAPI, APIRouter
from dotenv import load_dotenv
from starlette.middleware.cors import CORSMiddleware
import os
import logging
from pathlib import Path

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

from database import engine, Base
import models  # noqa: F401  (registers tables on Base.metadata)
from routers.public import router as public_router
from routers.viewroom import router as viewroom_router

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="RIFT'26 Venue API", version="1.0.0")
api_router = APIRouter(prefix="/api/v1")

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

api_router.include_router(public_router)
api_router.include_router(viewroom_router)

# Include router and add middleware
app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', '*').split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)
