import sys
import logging
from pathlib import Path

# Add the server directory to Python path
server_dir = str(Path(__file__).parent)
if server_dir not in sys.path:
    sys.path.append(server_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import settings
from controllers.course_controller import router as course_router
from controllers.transaction_controller import router as transaction_router
from controllers.user_clerk_controller import router as user_clerk_router
from controllers.user_course_progress_controller import router as user_course_progress_router

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI()

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": "This is home route"}


app.include_router(course_router, prefix="/courses")
app.include_router(transaction_router, prefix="/transactions")
app.include_router(user_clerk_router, prefix="/users/clerk")
app.include_router(user_course_progress_router, prefix="/users/course-progress")

logger.info(f"Application configured for {settings.ENVIRONMENT}")
