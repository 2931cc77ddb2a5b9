class DocumentError(ValueError):
    """Fatal precondition failure; the split stops before producing output."""

    pass


class NoDocumentError(DocumentError):
    """No usable document: missing file, unreadable JSON, or invalid structure."""

    pass


class EmptySelectionError(DocumentError):
    """The document has nothing selected."""

    pass


class NoTextFramesError(DocumentError):
    """The selection contains no visible, unlocked text objects."""

    pass
