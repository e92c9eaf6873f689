"""Registry of every Procore resource and its operations."""

from __future__ import annotations

from procore_sdk.errors import UnsupportedOperationError
from procore_sdk.operations import Operation, Resource
from procore_sdk.resources.company import COMPANY
from procore_sdk.resources.directory import CORRESPONDENCE, DIRECTORY, SCHEDULE
from procore_sdk.resources.documents import DOCUMENT, DRAWING, PHOTO
from procore_sdk.resources.financials import BUDGET, CHANGE_ORDER, CONTRACT, INVOICE, JOB
from procore_sdk.resources.project import PROJECT
from procore_sdk.resources.project_management import (
    DAILY_LOG,
    INSPECTION,
    MEETING,
    OBSERVATION,
    PUNCH_LIST,
    RFI,
    SUBMITTAL,
)

RESOURCES: dict[str, Resource] = {
    resource.name: resource
    for resource in (
        BUDGET,
        CHANGE_ORDER,
        COMPANY,
        CONTRACT,
        CORRESPONDENCE,
        DAILY_LOG,
        DIRECTORY,
        DOCUMENT,
        DRAWING,
        INSPECTION,
        INVOICE,
        JOB,
        MEETING,
        OBSERVATION,
        PHOTO,
        PROJECT,
        PUNCH_LIST,
        RFI,
        SCHEDULE,
        SUBMITTAL,
    )
}


def get_resource(name: str) -> Resource:
    try:
        return RESOURCES[name]
    except KeyError:
        raise UnsupportedOperationError(f"Resource {name} is not supported") from None


def get_operation(resource: str, operation: str) -> Operation:
    return get_resource(resource).get(operation)


__all__ = ["RESOURCES", "get_operation", "get_resource"]
