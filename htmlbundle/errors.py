"""Exceptions raised while bundling a document."""


class BundleError(Exception):
    """Base class for every error raised by htmlbundle."""


class ConfigError(BundleError):
    """Invalid or unknown option."""


class MalformedTagError(BundleError):
    """A tag's attribute list does not follow the attribute grammar."""

    def __init__(self, attributes, position):
        self.attributes = attributes
        self.position = position
        super().__init__(f"cannot tokenize attributes at offset {position}: {attributes!r}")


class AssetError(BundleError):
    """Reading or writing a referenced asset failed."""

    action = "access"

    def __init__(self, asset_path, document_path=None, reason=None):
        self.asset_path = asset_path
        self.document_path = document_path
        self.reason = reason
        message = f"cannot {self.action} {asset_path}"
        if document_path:
            message += f" (referenced by {document_path})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AssetLoadError(AssetError):
    action = "read"


class AssetWriteError(AssetError):
    action = "write"
