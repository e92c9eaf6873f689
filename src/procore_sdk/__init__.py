"""Procore SDK: Procore REST API operations for workflow automation."""

from procore_sdk.auth import (
    AuthProvider,
    BearerTokenAuth,
    OAuth2Auth,
    ProcoreCredentials,
    create_auth_provider,
)
from procore_sdk.dispatcher import OperationDispatcher
from procore_sdk.errors import ApiError, AuthenticationError, ProcoreError, UnsupportedOperationError
from procore_sdk.helpers import camel_to_snake, snake_to_camel, transform_to_snake_case
from procore_sdk.models import (
    ARRAY,
    ArrayShape,
    Environment,
    FilePart,
    RequestDescriptor,
    ResponseShape,
    WrappedShape,
)
from procore_sdk.pagination import PAGE_SIZE, request_all
from procore_sdk.resources import RESOURCES
from procore_sdk.settings import Settings
from procore_sdk.transport import request, upload
from procore_sdk.trigger import TRIGGER_EVENTS, WEBHOOK_EVENT_MAPPING, WebhookTrigger

__all__ = [
    "ARRAY",
    "ApiError",
    "ArrayShape",
    "AuthProvider",
    "AuthenticationError",
    "BearerTokenAuth",
    "Environment",
    "FilePart",
    "OAuth2Auth",
    "OperationDispatcher",
    "PAGE_SIZE",
    "ProcoreCredentials",
    "ProcoreError",
    "RESOURCES",
    "RequestDescriptor",
    "ResponseShape",
    "Settings",
    "TRIGGER_EVENTS",
    "UnsupportedOperationError",
    "WEBHOOK_EVENT_MAPPING",
    "WebhookTrigger",
    "WrappedShape",
    "camel_to_snake",
    "create_auth_provider",
    "request",
    "request_all",
    "snake_to_camel",
    "transform_to_snake_case",
    "upload",
]
