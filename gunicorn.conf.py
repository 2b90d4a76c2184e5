"""
Gunicorn configuration for PriceLens production deployment.

Uses Uvicorn workers for async ASGI support. Each worker process holds
its own in-memory price history cache, so cache hit rates scale down as
workers scale up.
"""

import multiprocessing
import os

# ─── Server Socket ───────────────────────────────────────────
bind = f"0.0.0.0:{os.getenv('PORT', os.getenv('APP_PORT', '8000'))}"

# ─── Worker Processes ────────────────────────────────────────
worker_class = "uvicorn.workers.UvicornWorker"

# Fewer workers than CPU-bound apps: lookups are I/O-bound and every
# worker keeps a separate cache.
workers = min(multiprocessing.cpu_count() + 1, int(os.getenv("WEB_CONCURRENCY", "2")))

threads = 1

# ─── Timeouts ────────────────────────────────────────────────
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))
graceful_timeout = 15
keepalive = 5

# ─── Worker Lifecycle ────────────────────────────────────────
# Restarting a worker drops its cache; keep this high.
max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "10000"))
max_requests_jitter = 500

preload_app = False  # async engines don't fork well

# ─── Logging ─────────────────────────────────────────────────
# structlog renders application logs; LoggingMiddleware covers access logging.
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ─── Server Mechanics ────────────────────────────────────────
forwarded_allow_ips = "*"
