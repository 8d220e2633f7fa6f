"""Saved objects API.

Exports are returned as NDJSON and decode to a list; imports take the
NDJSON file as a multipart upload::

    client.saved_objects.import_(files={"file": ("export.ndjson", data)})
"""

from .base import APIGroup, Endpoint


class SavedObjects(APIGroup):
    export = Endpoint("POST", "/api/saved_objects/_export", "Export saved objects.")
    import_ = Endpoint("POST", "/api/saved_objects/_import", "Import saved objects.", name="import")
    resolve_import = Endpoint(
        "POST", "/api/saved_objects/_resolve_import_errors", "Resolve saved object import errors."
    )
    rotate_key = Endpoint(
        "POST", "/api/encrypted_saved_objects/_rotate_key", "Rotate the saved object encryption key."
    )
