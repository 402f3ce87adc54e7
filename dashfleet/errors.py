class DatasetUnavailableError(RuntimeError):
    """The vehicle dataset could not be fetched or parsed."""


class UnknownCatalogKeyError(ValueError):
    """A key does not name any entry of a fixed catalog."""

    def __init__(self, catalog: str, key: object):
        super().__init__(f"Unknown {catalog} key: {key!r}")
        self.catalog = catalog
        self.key = key
