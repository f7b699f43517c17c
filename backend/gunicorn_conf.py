# backend/gunicorn_conf.py

# Gunicorn config file for the USSD callback service

# Basic configuration
bind = "0.0.0.0:8000"
# More than one worker requires SESSION_BACKEND=redis
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"

# USSD gateways wait only a few seconds for a reply
timeout = 15
graceful_timeout = 10

# Settings for running behind a reverse proxy like Nginx
forwarded_allow_ips = "*"

# --- Logging ---
# Send access and error logs to stdout and stderr
accesslog = "-"
errorlog = "-"
# Set the log level
loglevel = "info"
