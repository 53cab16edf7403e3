"""
Service context for log lines.

Identifies which process wrote a log line so that logs shipped from several
uvicorn workers (or containers) can be told apart.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'stalk-api')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a random hostname per instance; locally the PID is more useful
    hostname = os.getenv('HOSTNAME') or socket.gethostname()
    instance = hostname[:12] if deploy_env != 'local_dev' else str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
