from procore_sdk.helpers import validate_required
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


def _add_user_body(params):
    validate_required(params, ["user_id"])
    return {"user": {"id": params["user_id"]}}


def _removed_user(result, params):
    return {**result, "project_id": params["project_id"]}


PROJECT = Resource(
    "project",
    "Project",
    (
        list_op("listProjects", "/projects", query=filters_query, description="List projects"),
        get_op("getProject", "/projects/{project_id}", description="Get a project"),
        Operation(
            "createProject",
            "POST",
            "/projects",
            body=create_body("project", "name"),
            description="Create a project",
        ),
        Operation(
            "updateProject",
            "PATCH",
            "/projects/{project_id}",
            body=update_body("project"),
            description="Update a project",
        ),
        list_op("getProjectUsers", "/projects/{project_id}/users", description="Get project users"),
        Operation(
            "addProjectUser",
            "POST",
            "/projects/{project_id}/users",
            body=_add_user_body,
            description="Add user to project",
        ),
        delete_op(
            "removeProjectUser",
            "/projects/{project_id}/users/{user_id}",
            "user_id",
            result=_removed_user,
            description="Remove user from project",
        ),
        list_op("getProjectStages", "/projects/{project_id}/stages", description="Get project stages"),
        list_op("getProjectRoles", "/projects/{project_id}/roles", description="Get project roles"),
    ),
)
