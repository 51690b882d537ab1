import logging
from os import getenv
from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("mockinterview")

# Mongo db
MONGO_URI = getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = getenv("MONGO_DB", "mock_interview")
DOCUMENTS_COLLECTION = "documents"
CHATS_COLLECTION = "chats"

# OpenAI
OPENAI_API_KEY = getenv("OPENAI_API_KEY")
LLM_MODEL_NAME = getenv("LLM_MODEL_NAME", "gpt-4o-mini")
LLM_MAX_TOKENS = int(getenv("LLM_MAX_TOKENS", "200"))
LLM_MAX_ATTEMPTS = int(getenv("LLM_MAX_ATTEMPTS", "1"))
EMBEDDING_MODEL_NAME = getenv("EMBEDDING_MODEL_NAME", "text-embedding-3-small")
# text-embedding-3-small returns 1536 floats; 0 disables the length check
EMBEDDING_DIMENSIONS = int(getenv("EMBEDDING_DIMENSIONS") or "1536") or None
REQUEST_TIMEOUT_SECONDS = float(getenv("REQUEST_TIMEOUT_SECONDS", "30"))

# Pipeline
CHUNK_SIZE = int(getenv("CHUNK_SIZE", "500"))  # words
TOP_K = int(getenv("TOP_K", "2"))
QUESTION_COUNT = int(getenv("QUESTION_COUNT", "3"))
MAX_UPLOAD_BYTES = int(getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Cloudinary
CLOUDINARY_CLOUD_NAME = getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = getenv("CLOUDINARY_API_SECRET")
STORAGE_FOLDER = getenv("STORAGE_FOLDER", "ai-interview-prep")

# Api
CORS_ORIGINS = [origin.strip() for origin in getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
