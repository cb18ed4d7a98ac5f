# Gunicorn configuration for the tagfield demo app
#
# Rate limit counters live in process memory unless RATELIMIT_STORAGE_URI
# points at a shared backend, so each extra worker gets its own budget.
import os

workers = int(os.environ.get("WEB_CONCURRENCY", "1"))
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8080")
timeout = int(os.environ.get("GUNICORN_TIMEOUT_SECONDS", "30"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT_SECONDS", "30"))


def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s).", worker.pid)
