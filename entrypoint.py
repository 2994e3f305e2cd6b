#!/usr/bin/env python3
"""
Entrypoint script for running Gunicorn in distroless container.
This is needed because distroless doesn't have shell access.
"""
import sys
import os
from pathlib import Path

# Create necessary directories if they don't exist
for directory in ['/app/logs']:
    Path(directory).mkdir(parents=True, exist_ok=True)

import gunicorn.app.wsgiapp as wsgi

if __name__ == '__main__':
    default_args = [
        'gunicorn',
        '--bind', f"0.0.0.0:{os.environ.get('PORT', '8000')}",
        '--workers', os.environ.get('GUNICORN_WORKERS', '4'),
        # Completion requests block for the whole orchestration run
        '--timeout', os.environ.get('GUNICORN_TIMEOUT', '120'),
        '--keep-alive', '2',
        '--max-requests', '1000',
        '--max-requests-jitter', '50',
        '--preload',
        '--access-logfile', '-',
        '--error-logfile', '-',
        '--log-level', os.environ.get('LOG_LEVEL', 'info'),
        '--worker-tmp-dir', '/dev/shm',
        'lab_work_orders.wsgi:application'
    ]

    sys.argv = default_args
    wsgi.run()
