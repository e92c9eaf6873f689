"""Company operations.

The company itself is addressed by path, so only the nested listings send
the company scope header.
"""

from procore_sdk.operations import Operation, Resource, get_op, list_op, update_body

COMPANY = Resource(
    "company",
    "Company",
    (
        list_op("listCompanies", "/companies", scoped=False, description="List companies"),
        get_op("getCompany", "/companies/{company_id}", scoped=False, description="Get a company"),
        Operation(
            "updateCompany",
            "PATCH",
            "/companies/{company_id}",
            body=update_body("company"),
            scoped=False,
            description="Update a company",
        ),
        list_op("getCompanyUsers", "/companies/{company_id}/users", description="Get company users"),
        list_op(
            "getCompanyVendors", "/companies/{company_id}/vendors", description="Get company vendors"
        ),
    ),
)
