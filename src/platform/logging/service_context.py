"""
Service context extraction for distributed logging.

Identifies the running instance in every log line: Cloud Run revision,
Kubernetes pod hostname, or the local PID.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'event-catalog')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    if revision := os.getenv('K_REVISION'):
        instance = revision.rsplit('-', 1)[-1]
    elif os.getenv('KUBERNETES_SERVICE_HOST') and (hostname := os.getenv('HOSTNAME')):
        instance = hostname.rsplit('-', 1)[-1][:8]
    else:
        instance = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
