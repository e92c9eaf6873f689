"""Project directory, correspondence and schedule."""

from procore_sdk.helpers import parse_id_list
from procore_sdk.operations import (
    Operation,
    Resource,
    create_body,
    delete_op,
    filters_query,
    get_op,
    list_op,
    update_body,
)

_PEOPLE = "/projects/{project_id}/directory/people"
_PERSON = _PEOPLE + "/{contact_id}"

DIRECTORY = Resource(
    "directory",
    "Directory",
    (
        list_op("listContacts", _PEOPLE, query=filters_query, description="List contacts"),
        get_op("getContact", _PERSON, description="Get a contact"),
        Operation(
            "createContact",
            "POST",
            _PEOPLE,
            body=create_body("person", "first_name", "last_name", optional=("email_address",)),
            description="Create a contact",
        ),
        Operation(
            "updateContact", "PATCH", _PERSON, body=update_body("person"), description="Update a contact"
        ),
        delete_op("deleteContact", _PERSON, "contact_id", description="Delete a contact"),
    ),
)


_CORRESPONDENCE = "/projects/{project_id}/correspondence"
_CORRESPONDENCE_ITEM = _CORRESPONDENCE + "/{correspondence_id}"

CORRESPONDENCE = Resource(
    "correspondence",
    "Correspondence",
    (
        list_op(
            "listCorrespondence",
            _CORRESPONDENCE,
            query=filters_query,
            description="List correspondence",
        ),
        get_op("getCorrespondence", _CORRESPONDENCE_ITEM, description="Get a correspondence item"),
        Operation(
            "createCorrespondence",
            "POST",
            _CORRESPONDENCE,
            body=create_body(
                "correspondence",
                "subject",
                "correspondence_type",
                convert={"recipient_ids": parse_id_list, "cc_ids": parse_id_list},
            ),
            description="Create a correspondence item",
        ),
        Operation(
            "updateCorrespondence",
            "PATCH",
            _CORRESPONDENCE_ITEM,
            body=update_body("correspondence"),
            description="Update a correspondence item",
        ),
    ),
)


_SCHEDULE = "/projects/{project_id}/schedule"

SCHEDULE = Resource(
    "schedule",
    "Schedule",
    (
        get_op("getSchedule", _SCHEDULE, description="Get a project schedule"),
        list_op(
            "listScheduleTasks", _SCHEDULE + "/tasks", query=filters_query, description="List tasks"
        ),
        get_op("getScheduleTask", _SCHEDULE + "/tasks/{task_id}", description="Get a task"),
        Operation(
            "updateScheduleTask",
            "PATCH",
            _SCHEDULE + "/tasks/{task_id}",
            body=update_body("task"),
            description="Update a task",
        ),
        list_op("listScheduleMilestones", _SCHEDULE + "/milestones", description="List milestones"),
    ),
)
