"""
Google Tasks Integration Module

Async client for the Google Tasks REST API (task lists and tasks).

Architecture:
    TasksClient → GoogleTokenProvider (OAuth access token)
    TasksClient → JsonTransport (httpx) → Tasks API

Every TasksClient operation returns a Success or Failure result instead of
raising on request-level errors.
"""

# Lazy imports keep `import gtasks.integrations.google_tasks.results` light
def __getattr__(name):
    if name == 'TasksClient':
        from .client import TasksClient
        return TasksClient
    elif name == 'build_task_body':
        from .client import build_task_body
        return build_task_body
    elif name == 'GoogleTokenProvider':
        from .auth import GoogleTokenProvider
        return GoogleTokenProvider
    elif name == 'JsonTransport':
        from .http import JsonTransport
        return JsonTransport
    elif name == 'TransportResponse':
        from .http import TransportResponse
        return TransportResponse
    elif name in ('Success', 'Failure', 'Result'):
        from . import results
        return getattr(results, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    'TasksClient',
    'build_task_body',
    'GoogleTokenProvider',
    'JsonTransport',
    'TransportResponse',
    'Success',
    'Failure',
    'Result',
]
