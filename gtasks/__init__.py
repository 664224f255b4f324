"""
gtasks - async Google Tasks API client

Usage:
    from gtasks import TasksClient, load_config

    async with TasksClient.from_settings(load_config()) as client:
        result = await client.list_tasklists()
        if result.ok:
            print(result.data)
        else:
            print(result.error)
"""
from .utils.config import TasksSettings, load_config
from .integrations.base_exceptions import (
    IntegrationServiceException,
    AuthenticationException,
    ConfigurationException,
    SelfTestFailedException,
)
from .integrations.google_tasks.results import Success, Failure, Result
from .integrations.google_tasks.auth import GoogleTokenProvider
from .integrations.google_tasks.http import JsonTransport
from .integrations.google_tasks.client import TasksClient, build_task_body

__version__ = "1.0.0"

__all__ = [
    'TasksClient',
    'build_task_body',
    'GoogleTokenProvider',
    'JsonTransport',
    'Success',
    'Failure',
    'Result',
    'TasksSettings',
    'load_config',
    'IntegrationServiceException',
    'AuthenticationException',
    'ConfigurationException',
    'SelfTestFailedException',
]
