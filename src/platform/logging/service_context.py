"""
Service identification attached to every log line.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'reservation-service')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a short hostname, local runs fall back to the PID
    instance = os.getenv('HOSTNAME') or socket.gethostname()
    instance = f'{instance[:12]}:{os.getpid()}' if instance else str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
