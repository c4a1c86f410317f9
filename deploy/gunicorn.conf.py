# Gunicorn configuration for the Crimson Cipher solver API
# Run from solver-python/: gunicorn -c ../deploy/gunicorn.conf.py server:app

import os

# Bind to localhost - nginx will proxy
bind = os.environ.get('BIND', "127.0.0.1:5000")

# Workers - the DP is CPU-bound and holds the whole memo table in memory
workers = 1

# Threads - health checks stay responsive while a solve holds the lock
threads = 2

worker_class = "gthread"

# Timeout - MAX_SOLVE_WORK in server.py keeps accepted boxes to a few seconds
timeout = 120

keepalive = 5

# Logging - files if the log directory exists, stdout otherwise
if os.path.exists('/var/log/crystal-solver'):
    accesslog = "/var/log/crystal-solver/access.log"
    errorlog = "/var/log/crystal-solver/error.log"
else:
    accesslog = "-"
    errorlog = "-"
loglevel = "info"

proc_name = "crystal-solver"

graceful_timeout = 30

# Recycle the worker now and then; each solve allocates a fresh memo table
max_requests = 1000
max_requests_jitter = 100
