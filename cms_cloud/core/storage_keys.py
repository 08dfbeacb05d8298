"""
Storage key derivation and content-type inference.

Objects are addressed as {collection}/{record_id}/{file_name}; there is no
side index, so the derivation must stay stable.

Dependencies: None (pure domain layer)
System role: Addressing scheme shared by storage adapter and hook bindings
"""

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".json": "application/json",
    ".js": "application/javascript",
    ".css": "text/css",
    ".html": "text/html",
    ".txt": "text/plain",
    ".xml": "application/xml",
    ".mp4": "video/mp4",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
}


def storage_key(collection: str, record_id: str, file_name: str) -> str:
    """
    Derive the object key for a record's file.

    Components may not be empty or contain "/", which keeps the mapping
    injective over (collection, record_id, file_name).

    Args:
        collection: Owning collection name
        record_id: Owning record identifier
        file_name: Stored file name

    Returns:
        str: Object key

    Raises:
        ValueError: If a component is empty or contains a slash
    """
    parts = {"collection": collection, "record_id": record_id, "file_name": file_name}
    for name, value in parts.items():
        if not value:
            raise ValueError(f"{name} is required for a storage key")
        if "/" in value:
            raise ValueError(f"{name} may not contain '/': {value!r}")
    return f"{collection}/{record_id}/{file_name}"


def _extension(key: str) -> str:
    """Suffix from the last dot of the final key segment, dot included."""
    name = key.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:].lower() if dot != -1 else ""


def content_type_for(key: str) -> str:
    """Infer MIME type from the key's extension (case-insensitive)."""
    return CONTENT_TYPES.get(_extension(key), DEFAULT_CONTENT_TYPE)
