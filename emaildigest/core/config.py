import os


API_TOKEN = os.getenv("API_TOKEN", "dev-token")
AUDIT_LOG_PATH = os.getenv("AUDIT_LOG_PATH", "data/audit.log")

SERVICE_NAME = os.getenv("SERVICE_NAME", "email-digest")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
