"""Project-management tools: RFIs, submittals, punch list, observations,
inspections, daily logs and meetings.

All of these live under ``/projects/{project_id}`` and send the company
scope header.
"""

from procore_sdk.helpers import format_date_short, validate_required
from procore_sdk.operations import (
    Operation,
    Resource,
    create_body,
    delete_op,
    filters_query,
    fixed_body,
    get_op,
    list_op,
    mapped_filters,
    update_body,
)

_RFIS = "/projects/{project_id}/rfis"
_RFI = _RFIS + "/{rfi_id}"

RFI = Resource(
    "rfi",
    "RFI",
    (
        list_op("listRfis", _RFIS, query=filters_query, description="List RFIs"),
        get_op("getRfi", _RFI, description="Get an RFI"),
        Operation(
            "createRfi",
            "POST",
            _RFIS,
            body=create_body("rfi", "subject", "question", optional=("assignee_id",)),
            description="Create an RFI",
        ),
        Operation("updateRfi", "PATCH", _RFI, body=update_body("rfi"), description="Update an RFI"),
        delete_op("deleteRfi", _RFI, "rfi_id", description="Delete an RFI"),
        list_op("getRfiResponses", _RFI + "/responses", description="Get RFI responses"),
        Operation(
            "addRfiResponse",
            "POST",
            _RFI + "/responses",
            body=create_body("response", "body"),
            description="Add a response to an RFI",
        ),
    ),
)


_SUBMITTALS = "/projects/{project_id}/submittals"
_SUBMITTAL = _SUBMITTALS + "/{submittal_id}"

SUBMITTAL = Resource(
    "submittal",
    "Submittal",
    (
        list_op("listSubmittals", _SUBMITTALS, query=filters_query, description="List submittals"),
        get_op("getSubmittal", _SUBMITTAL, description="Get a submittal"),
        Operation(
            "createSubmittal",
            "POST",
            _SUBMITTALS,
            body=create_body("submittal", "title", optional=("specification_section_id",)),
            description="Create a submittal",
        ),
        Operation(
            "updateSubmittal",
            "PATCH",
            _SUBMITTAL,
            body=update_body("submittal"),
            description="Update a submittal",
        ),
        list_op(
            "getSubmittalApprovers", _SUBMITTAL + "/approvers", description="Get submittal approvers"
        ),
        Operation(
            "submitForApproval",
            "POST",
            _SUBMITTAL + "/submit",
            description="Submit a submittal for approval",
        ),
    ),
)


_PUNCH_ITEMS = "/projects/{project_id}/punch_items"
_PUNCH_ITEM = _PUNCH_ITEMS + "/{punch_item_id}"


def _assign_body(params):
    validate_required(params, ["assignee_id"])
    return {"punch_item": {"assignee_id": params["assignee_id"]}}


PUNCH_LIST = Resource(
    "punchList",
    "Punch List",
    (
        list_op("listPunchItems", _PUNCH_ITEMS, query=filters_query, description="List punch items"),
        get_op("getPunchItem", _PUNCH_ITEM, description="Get a punch item"),
        Operation(
            "createPunchItem",
            "POST",
            _PUNCH_ITEMS,
            body=create_body("punch_item", "name"),
            description="Create a punch item",
        ),
        Operation(
            "updatePunchItem",
            "PATCH",
            _PUNCH_ITEM,
            body=update_body("punch_item"),
            description="Update a punch item",
        ),
        delete_op("deletePunchItem", _PUNCH_ITEM, "punch_item_id", description="Delete a punch item"),
        Operation(
            "assignPunchItem", "PATCH", _PUNCH_ITEM, body=_assign_body, description="Assign a punch item"
        ),
        Operation(
            "closePunchItem",
            "PATCH",
            _PUNCH_ITEM,
            body=fixed_body({"punch_item": {"status": "closed"}}),
            description="Close a punch item",
        ),
    ),
)


_OBSERVATIONS = "/projects/{project_id}/observations/items"
_OBSERVATION = _OBSERVATIONS + "/{observation_id}"

OBSERVATION = Resource(
    "observation",
    "Observation",
    (
        list_op(
            "listObservations",
            _OBSERVATIONS,
            query=mapped_filters(
                {
                    "status": "filters[status][]",
                    "type_id": "filters[type_id]",
                    "assignee_id": "filters[assignee_id]",
                    "location_id": "filters[location_id]",
                    "created_after": "filters[created_at][gt]",
                    "created_before": "filters[created_at][lt]",
                }
            ),
            description="List observations",
        ),
        get_op("getObservation", _OBSERVATION, description="Get an observation"),
        Operation(
            "createObservation",
            "POST",
            _OBSERVATIONS,
            body=create_body(
                "observation_item",
                "title",
                "type_id",
                optional=("status",),
                renames={"title": "name"},
            ),
            description="Create an observation",
        ),
        Operation(
            "updateObservation",
            "PATCH",
            _OBSERVATION,
            body=update_body("observation_item", renames={"title": "name"}),
            description="Update an observation",
        ),
        list_op(
            "getObservationTypes",
            "/projects/{project_id}/observations/types",
            description="Get observation types",
        ),
    ),
)


_INSPECTIONS = "/projects/{project_id}/inspections"
_INSPECTION = _INSPECTIONS + "/{inspection_id}"
_CHECKLIST_TEMPLATES = "/projects/{project_id}/checklists/templates"

INSPECTION = Resource(
    "inspection",
    "Inspection",
    (
        list_op(
            "listInspections",
            _INSPECTIONS,
            query=mapped_filters(
                {
                    "status": "filters[status][]",
                    "checklist_id": "filters[checklist_id]",
                    "inspector_id": "filters[inspector_id]",
                    "location_id": "filters[location_id]",
                    "due_date_from": "filters[due_date][gte]",
                    "due_date_to": "filters[due_date][lte]",
                }
            ),
            description="List inspections",
        ),
        get_op("getInspection", _INSPECTION, description="Get an inspection"),
        Operation(
            "createInspection",
            "POST",
            _INSPECTIONS,
            body=create_body("inspection", "title", "checklist_id", renames={"title": "name"}),
            description="Create an inspection",
        ),
        Operation(
            "updateInspection",
            "PATCH",
            _INSPECTION,
            body=update_body("inspection"),
            description="Update an inspection",
        ),
        list_op(
            "getInspectionChecklists", _CHECKLIST_TEMPLATES, description="Get inspection checklists"
        ),
        Operation(
            "createInspectionChecklist",
            "POST",
            _CHECKLIST_TEMPLATES,
            body=create_body("checklist_template", "name"),
            description="Create an inspection checklist",
        ),
    ),
)


_DAILY_LOGS = "/projects/{project_id}/daily_logs"
_DAILY_LOG = _DAILY_LOGS + "/{daily_log_id}"


def _log_date_query(params):
    validate_required(params, ["log_date"])
    return {"log_date": format_date_short(params["log_date"])}


DAILY_LOG = Resource(
    "dailyLog",
    "Daily Log",
    (
        list_op("listDailyLogs", _DAILY_LOGS, query=filters_query, description="List daily logs"),
        get_op("getDailyLog", _DAILY_LOG, description="Get a daily log"),
        Operation(
            "createDailyLog",
            "POST",
            _DAILY_LOGS,
            body=create_body(
                "daily_log",
                "log_date",
                optional=("notes",),
                convert={"log_date": format_date_short},
            ),
            description="Create a daily log",
        ),
        Operation(
            "updateDailyLog",
            "PATCH",
            _DAILY_LOG,
            body=update_body("daily_log"),
            description="Update a daily log",
        ),
        list_op(
            "getWeatherLogs",
            _DAILY_LOGS + "/weather_logs",
            query=_log_date_query,
            description="Get weather logs",
        ),
        list_op(
            "getManpowerLogs",
            _DAILY_LOGS + "/manpower_logs",
            query=_log_date_query,
            description="Get manpower logs",
        ),
    ),
)


_MEETINGS = "/projects/{project_id}/meetings"
_MEETING = _MEETINGS + "/{meeting_id}"

MEETING = Resource(
    "meeting",
    "Meeting",
    (
        list_op("listMeetings", _MEETINGS, query=filters_query, description="List meetings"),
        get_op("getMeeting", _MEETING, description="Get a meeting"),
        Operation(
            "createMeeting",
            "POST",
            _MEETINGS,
            body=create_body("meeting", "title", "start_date"),
            description="Create a meeting",
        ),
        Operation(
            "updateMeeting",
            "PATCH",
            _MEETING,
            body=update_body("meeting"),
            description="Update a meeting",
        ),
        get_op("getMeetingAgenda", _MEETING + "/agenda_items", description="Get meeting agenda"),
        get_op("getMeetingMinutes", _MEETING + "/meeting_minutes", description="Get meeting minutes"),
        get_op("getMeetingAttendees", _MEETING + "/attendees", description="Get meeting attendees"),
    ),
)
