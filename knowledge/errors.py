class KnowledgeStoreError(ValueError):
    """Store constructed from inconsistent entries (e.g. duplicate ids)."""


class KnowledgeLoadError(RuntimeError):
    """Corpus file unreadable or not a list of entry records."""
