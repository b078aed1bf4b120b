"""Custom exception hierarchy for the catalog and commerce core."""


class CatalogError(Exception):
    """Base exception for all catalog platform errors."""


# --- Configuration ---
class ConfigError(CatalogError):
    """Invalid or missing configuration."""


# --- Lookup ---
class NotFound(CatalogError):
    """A requested entity does not exist."""


class ProductNotFound(NotFound):
    """No product exists for the given id or slug."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Product not found: {key}")


# --- Content sync ---
class SyncError(CatalogError):
    """Content synchronization error."""


class NoChange(SyncError):
    """Upstream repository has no commit newer than the last synced one."""


class ContentDecodeError(SyncError):
    """A fetched file could not be decoded or parsed."""


class FileSyncFailed(SyncError):
    """Syncing a single file failed. Logged by the orchestrator, never raised to callers."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Sync failed for {path}: {cause}")


# --- Purchase ---
class PurchaseError(CatalogError):
    """Purchase workflow error."""


class Unauthenticated(PurchaseError):
    """A purchase was attempted without an authenticated user."""


class AlreadyPurchased(PurchaseError):
    """The user already owns the product."""

    def __init__(self, user_id: str, product_id: str):
        self.user_id = user_id
        self.product_id = product_id
        super().__init__(
            f"User {user_id} already purchased product {product_id}"
        )


class PaymentFailed(PurchaseError):
    """The payment gateway rejected or failed to capture the charge."""


class InvalidTransition(PurchaseError):
    """Purchase attempt moved to a state not reachable from its current one."""


# --- Catalog editing ---
class CatalogEditError(CatalogError):
    """Product add/edit failure."""


class SlugGenerationError(CatalogEditError):
    """No usable slug could be generated from the product name."""


# --- Notifications ---
class NotificationError(CatalogError):
    """Notification rendering or dispatch error."""


class TemplateNotFound(NotificationError):
    """No email template is registered under the requested name."""
