import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

# DynamoDB
DYNAMODB_ENDPOINT = os.getenv("DYNAMODB_ENDPOINT", "http://localhost:8000")
AWS_REGION = os.getenv("AWS_REGION", "us-east-2")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID", "dummyKey123")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY", "dummyKey123")
DYNAMODB_CONNECT_TIMEOUT = float(os.getenv("DYNAMODB_CONNECT_TIMEOUT", "5"))
DYNAMODB_READ_TIMEOUT = float(os.getenv("DYNAMODB_READ_TIMEOUT", "10"))

COURSES_TABLE = "Courses"
TRANSACTIONS_TABLE = "Transactions"
USER_COURSE_PROGRESS_TABLE = "UserCourseProgress"

# Progress updates are retried when another writer got there first
PROGRESS_UPDATE_MAX_ATTEMPTS = int(os.getenv("PROGRESS_UPDATE_MAX_ATTEMPTS", "3"))

# S3 / CloudFront
S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME")
CLOUDFRONT_DOMAIN = os.getenv("CLOUDFRONT_DOMAIN", "")
UPLOAD_URL_EXPIRES_IN = 60

# Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")

# Clerk
CLERK_JWT_PUBLIC_KEY = os.getenv("CLERK_JWT_PUBLIC_KEY")
CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")
CLERK_API_URL = os.getenv("CLERK_API_URL", "https://api.clerk.com/v1")
CLERK_API_TIMEOUT = float(os.getenv("CLERK_API_TIMEOUT", "10"))

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
