"""Documents, drawings and photos.

The upload operations send multipart forms whose field names follow
Rails' nested-parameter convention (``document[name]``).
"""

from procore_sdk.helpers import clean_object, validate_required
from procore_sdk.operations import (
    Kind,
    Operation,
    Resource,
    UploadSpec,
    create_body,
    delete_op,
    get_op,
    list_op,
    mapped_filters,
    update_body,
)


def _nested(prefix, values, names):
    values = clean_object(values)
    return {f"{prefix}[{name}]": values[name] for name in names if name in values}


def _positive(params, name):
    value = params.get(name) or 0
    return value if value > 0 else None


_DOCUMENTS = "/projects/{project_id}/documents"
_DOCUMENT = _DOCUMENTS + "/{document_id}"
_FOLDERS = "/projects/{project_id}/folders"


def _documents_query(params):
    folder_id = _positive(params, "folder_id")
    return {"filters[folder_id]": folder_id} if folder_id else {}


def _folders_query(params):
    folder_id = _positive(params, "folder_id")
    return {"filters[parent_id]": folder_id} if folder_id else {}


def _folder_body(params):
    validate_required(params, ["name"])
    folder = {"name": params["name"]}
    parent_id = _positive(params, "parent_id")
    if parent_id:
        folder["parent_id"] = parent_id
    return {"folder": folder}


def _document_fields(params, file):
    fields = {"document[name]": file.filename}
    folder_id = _positive(params, "folder_id")
    if folder_id:
        fields["document[folder_id]"] = folder_id
    fields.update(_nested("document", params.get("additional_fields"), ("description", "private")))
    return fields


def _with_download_url(document, params):
    return {**document, "downloadUrl": document.get("url")}


DOCUMENT = Resource(
    "document",
    "Document",
    (
        list_op("listDocuments", _DOCUMENTS, query=_documents_query, description="List documents"),
        list_op("listFolders", _FOLDERS, query=_folders_query, description="List folders"),
        get_op("getDocument", _DOCUMENT, description="Get a document"),
        Operation("createFolder", "POST", _FOLDERS, body=_folder_body, description="Create a folder"),
        Operation(
            "uploadDocument",
            "POST",
            _DOCUMENTS,
            kind=Kind.UPLOAD,
            upload=UploadSpec("document[data]", _document_fields),
            description="Upload a document",
        ),
        Operation(
            "updateDocument",
            "PATCH",
            _DOCUMENT,
            body=update_body("document"),
            description="Update a document",
        ),
        delete_op("deleteDocument", _DOCUMENT, "document_id", description="Delete a document"),
        get_op(
            "downloadDocument",
            _DOCUMENT,
            result=_with_download_url,
            description="Get a document with its download URL",
        ),
    ),
)


_DRAWINGS = "/projects/{project_id}/drawings"
_DRAWING = _DRAWINGS + "/{drawing_id}"


def _drawing_fields(params, file):
    validate_required(params, ["title", "number"])
    fields = {"drawing[title]": params["title"], "drawing[number]": params["number"]}
    fields.update(
        _nested(
            "drawing",
            params.get("additional_fields"),
            (
                "drawing_area_id",
                "discipline",
                "description",
                "revision",
                "drawing_date",
                "received_date",
            ),
        )
    )
    return fields


DRAWING = Resource(
    "drawing",
    "Drawing",
    (
        list_op(
            "listDrawings",
            _DRAWINGS,
            query=mapped_filters(
                {
                    "drawing_area_id": "filters[drawing_area_id]",
                    "discipline": "filters[discipline]",
                    "search": "filters[search]",
                }
            ),
            description="List drawings",
        ),
        get_op("getDrawing", _DRAWING, description="Get a drawing"),
        Operation(
            "uploadDrawing",
            "POST",
            _DRAWINGS,
            kind=Kind.UPLOAD,
            upload=UploadSpec(
                "drawing[file]",
                _drawing_fields,
                default_filename="drawing.pdf",
                default_content_type="application/pdf",
            ),
            description="Upload a drawing",
        ),
        list_op(
            "listDrawingAreas", "/projects/{project_id}/drawing_areas", description="List drawing areas"
        ),
        list_op(
            "listDrawingRevisions", _DRAWING + "/revisions", description="List drawing revisions"
        ),
    ),
)


_IMAGES = "/projects/{project_id}/images"
_IMAGE = _IMAGES + "/{photo_id}"
_IMAGE_CATEGORIES = "/projects/{project_id}/image_categories"


def _photo_fields(params, file):
    return _nested(
        "image",
        params.get("additional_fields"),
        ("image_category_id", "description", "location_id", "trade_id", "starred", "private"),
    )


PHOTO = Resource(
    "photo",
    "Photo",
    (
        list_op(
            "listPhotos",
            _IMAGES,
            query=mapped_filters(
                {
                    "image_category_id": "filters[image_category_id]",
                    "location_id": "filters[location_id]",
                    "starred": "filters[starred]",
                    "start_date": "filters[start_date]",
                    "end_date": "filters[end_date]",
                }
            ),
            description="List photos",
        ),
        get_op("getPhoto", _IMAGE, description="Get a photo"),
        Operation(
            "uploadPhoto",
            "POST",
            _IMAGES,
            kind=Kind.UPLOAD,
            upload=UploadSpec(
                "image[data]",
                _photo_fields,
                default_filename="photo.jpg",
                default_content_type="image/jpeg",
            ),
            description="Upload a photo",
        ),
        delete_op("deletePhoto", _IMAGE, "photo_id", description="Delete a photo"),
        list_op("listPhotoAlbums", _IMAGE_CATEGORIES, description="List photo albums"),
        Operation(
            "createPhotoAlbum",
            "POST",
            _IMAGE_CATEGORIES,
            body=create_body("image_category", "name"),
            description="Create a photo album",
        ),
    ),
)
