"""Gunicorn configuration file.

The Firebase App is created inside each worker (no preload), so no gRPC or
HTTP connection is shared across a fork.

Environment:
    PORT               listen port (default 3001)
    WEB_CONCURRENCY    worker processes (default 2)
    GUNICORN_THREADS   threads per worker (default 4)
    LOG_LEVEL          gunicorn log level (default info)
"""
import os

wsgi_app = "dailyhug.flask_app:create_app()"

bind = f"0.0.0.0:{os.environ.get('PORT', '3001')}"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
worker_class = "gthread"
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "60"))
preload_app = False

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
# Never log Authorization or integration-key headers
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(L)ss'


def post_fork(server, worker):
    """Called just after a worker has been forked."""
    worker.log.info(f"Worker {worker.pid} forked; Firebase initializes on first app load")
