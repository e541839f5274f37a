from .codec import ObjectId
from .document import (
    ID_FIELD,
    SIMILARITY_FIELD,
    VECTORIZE_FIELD,
    VECTOR_FIELD,
    Document,
)
from .escape import escape_field_names, escape_segment, unescape_field_path
from .paths import (
    PATH_MISSING,
    get_path,
    has_path,
    remove_path,
    set_path,
    split_index_suffix,
)

__all__ = [
    "ID_FIELD",
    "PATH_MISSING",
    "SIMILARITY_FIELD",
    "VECTORIZE_FIELD",
    "VECTOR_FIELD",
    "Document",
    "ObjectId",
    "escape_field_names",
    "escape_segment",
    "get_path",
    "has_path",
    "remove_path",
    "set_path",
    "split_index_suffix",
    "unescape_field_path",
]
