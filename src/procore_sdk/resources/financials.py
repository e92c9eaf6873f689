"""Cost codes (jobs), budgets, contracts, change orders and invoices."""

from procore_sdk.helpers import validate_required
from procore_sdk.operations import (
    Operation,
    Resource,
    create_body,
    filters_query,
    fixed_body,
    get_op,
    list_op,
    update_body,
)

_COST_CODES = "/projects/{project_id}/work_breakdown_structure/flat_cost_codes"
_COST_CODE = _COST_CODES + "/{job_id}"
_BUDGET_LINE_ITEMS = "/projects/{project_id}/budget/budget_line_items"


def _cost_code_query(params):
    validate_required(params, ["job_id"])
    return {"filters[cost_code_id]": params["job_id"]}


JOB = Resource(
    "job",
    "Job",
    (
        list_op("listJobs", _COST_CODES, query=filters_query, description="List jobs (cost codes)"),
        get_op("getJob", _COST_CODE, description="Get a job"),
        Operation(
            "createJob",
            "POST",
            _COST_CODES,
            body=create_body("cost_code", "name", "code"),
            description="Create a job",
        ),
        Operation(
            "updateJob", "PATCH", _COST_CODE, body=update_body("cost_code"), description="Update a job"
        ),
        list_op(
            "getJobCosts",
            _BUDGET_LINE_ITEMS,
            query=_cost_code_query,
            description="Get budget line items booked against a job",
        ),
        get_op(
            "getJobBudget",
            _BUDGET_LINE_ITEMS,
            query=_cost_code_query,
            description="Get the budget of a job",
        ),
    ),
)


_LINE_ITEMS = "/projects/{project_id}/budget/line_items"

BUDGET = Resource(
    "budget",
    "Budget",
    (
        get_op("getBudget", "/projects/{project_id}/budget", description="Get a project budget"),
        list_op("getBudgetLineItems", _LINE_ITEMS, description="Get budget line items"),
        Operation(
            "createBudgetLineItem",
            "POST",
            _LINE_ITEMS,
            body=create_body("budget_line_item", "cost_code_id", "original_budget_amount"),
            description="Create a budget line item",
        ),
        Operation(
            "updateBudgetLineItem",
            "PATCH",
            _LINE_ITEMS + "/{budget_line_item_id}",
            body=update_body("budget_line_item"),
            description="Update a budget line item",
        ),
        list_op(
            "getBudgetChanges", "/projects/{project_id}/budget/changes", description="Get budget changes"
        ),
    ),
)


_CONTRACTS = "/projects/{project_id}/work_order_contracts"
_CONTRACT = _CONTRACTS + "/{contract_id}"

CONTRACT = Resource(
    "contract",
    "Contract",
    (
        list_op("listContracts", _CONTRACTS, query=filters_query, description="List contracts"),
        get_op("getContract", _CONTRACT, description="Get a contract"),
        Operation(
            "createContract",
            "POST",
            _CONTRACTS,
            body=create_body("work_order_contract", "title", optional=("contract_type",)),
            description="Create a contract",
        ),
        Operation(
            "updateContract",
            "PATCH",
            _CONTRACT,
            body=update_body("work_order_contract"),
            description="Update a contract",
        ),
        list_op("getContractLineItems", _CONTRACT + "/line_items", description="Get contract line items"),
        list_op(
            "getContractPayments",
            _CONTRACT + "/payment_applications",
            description="Get contract payment applications",
        ),
    ),
)


_CHANGE_ORDERS = "/projects/{project_id}/change_order_requests"
_CHANGE_ORDER = _CHANGE_ORDERS + "/{change_order_id}"

CHANGE_ORDER = Resource(
    "changeOrder",
    "Change Order",
    (
        list_op("listChangeOrders", _CHANGE_ORDERS, description="List change orders"),
        get_op("getChangeOrder", _CHANGE_ORDER, description="Get a change order"),
        Operation(
            "createChangeOrder",
            "POST",
            _CHANGE_ORDERS,
            body=create_body("change_order_request", "title"),
            description="Create a change order",
        ),
        Operation(
            "updateChangeOrder",
            "PATCH",
            _CHANGE_ORDER,
            body=update_body("change_order_request"),
            description="Update a change order",
        ),
        Operation(
            "approveChangeOrder",
            "POST",
            _CHANGE_ORDER + "/approve",
            description="Approve a change order",
        ),
    ),
)


_REQUISITIONS = "/projects/{project_id}/requisitions"
_REQUISITION = _REQUISITIONS + "/{invoice_id}"

INVOICE = Resource(
    "invoice",
    "Invoice",
    (
        list_op("listInvoices", _REQUISITIONS, query=filters_query, description="List invoices"),
        get_op("getInvoice", _REQUISITION, description="Get an invoice"),
        Operation(
            "createInvoice",
            "POST",
            _REQUISITIONS,
            body=create_body("requisition", "contract_id", optional=("billing_period_id",)),
            description="Create an invoice",
        ),
        Operation(
            "updateInvoice",
            "PATCH",
            _REQUISITION,
            body=update_body("requisition"),
            description="Update an invoice",
        ),
        Operation(
            "submitInvoice",
            "PATCH",
            _REQUISITION,
            body=fixed_body({"requisition": {"status": "submitted"}}),
            description="Submit an invoice",
        ),
        Operation(
            "approveInvoice",
            "PATCH",
            _REQUISITION,
            body=fixed_body({"requisition": {"status": "approved"}}),
            description="Approve an invoice",
        ),
    ),
)
