import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
worker_class = "uvicorn.workers.UvicornWorker"

# One worker: the credential context and the speech timeline live in process memory
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
# Video jobs poll for up to interval * attempts (10 min by default)
timeout = 900             # hard kill after N seconds of no response
graceful_timeout = 120    # time to gracefully stop workers
keepalive = 75
threads = 2

# restart a worker after N requests
max_requests = int(os.getenv("MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("MAX_REQUESTS_JITTER", "100"))

# logs to stdout (Cloud Run/GKE capture it)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
