"""Field selectors sent with Google Drive API requests."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "parents,"
    "trashed,"
    "modifiedTime,"
    "createdTime,"
    "size,"
    "md5Checksum,"
    "properties"
)

# Child lookups by name.
LOOKUP_FIELDS: str = f"files({FILE_FIELDS})"

# Intermediate path segments only need the id to descend.
ID_ONLY_LOOKUP_FIELDS: str = "files(id)"

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

# Walking up the parent chain of trashed entries.
ANCESTOR_FIELDS: str = "id,name,parents"


def with_page_token(fields: str) -> str:
    """Make sure a files.list field selector also returns nextPageToken."""
    if "nextPageToken" in fields:
        return fields
    return f"nextPageToken,{fields}"
