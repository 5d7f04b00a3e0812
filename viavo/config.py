import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "gemini-3-flash-preview")
SYNTHESIS_MODEL: str = os.getenv("SYNTHESIS_MODEL", "gemini-2.5-flash-image")
# Unset means no ceiling on the remote call
GEMINI_TIMEOUT_SECONDS: float | None = (
    float(os.environ["GEMINI_TIMEOUT_SECONDS"]) if os.getenv("GEMINI_TIMEOUT_SECONDS") else None
)

MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
MAX_DIMENSION: int = int(os.getenv("MAX_DIMENSION", "1024"))
JPEG_QUALITY: int = int(os.getenv("JPEG_QUALITY", "80"))

CHEST_WEIGHT: float = float(os.getenv("CHEST_WEIGHT", "1.5"))
WAIST_WEIGHT: float = float(os.getenv("WAIST_WEIGHT", "1.0"))

EXPORT_DIR: str = os.getenv("EXPORT_DIR", "results")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

VALID_PHOTO_TYPES: list[str] = ["face", "body"]
