"""Константы приложения."""

from typing import Final

# ===== HTTP STATUS CODES =====
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_INTERNAL_SERVER_ERROR: Final[int] = 500

# ===== LOCALSTORAGE KEYS =====
LOCALSTORAGE_AUTH_TOKEN_KEY: Final[str] = "authToken"
LOCALSTORAGE_USER_ROLE_KEY: Final[str] = "userRole"

# ===== SESSION STATE KEYS =====
SESSION_STORAGE_MIRROR: Final[str] = "storage_mirror"
SESSION_STORAGE_LOADED: Final[str] = "storage_loaded"
SESSION_STORAGE_LOAD_ATTEMPTS: Final[str] = "storage_load_attempts"
SESSION_API_CLIENT: Final[str] = "api_client"
SESSION_USER_INFO: Final[str] = "user_info"
SESSION_USER_CHECKED: Final[str] = "user_checked"
SESSION_PENDING_REDIRECT: Final[str] = "pending_redirect"
SESSION_PURCHASE_CART: Final[str] = "purchase_cart"
SESSION_SALE_CART: Final[str] = "sale_cart"
SESSION_EDIT_PRODUCT_ID: Final[str] = "edit_product_id"
SESSION_FLASH_MESSAGE: Final[str] = "flash_message"

# ===== RETRY CONFIGURATION =====
MAX_STORAGE_LOAD_ATTEMPTS: Final[int] = 5
STORAGE_LOAD_RETRY_DELAY: Final[float] = 0.3

# ===== PAGES =====
PAGE_LOGIN: Final[str] = "pages/1_login.py"
PAGE_DASHBOARD: Final[str] = "pages/2_dashboard.py"

# ===== API ENDPOINTS =====
ENDPOINT_AUTH_LOGIN: Final[str] = "/auth/login"
ENDPOINT_AUTH_REGISTER: Final[str] = "/auth/register"
ENDPOINT_USERS_CURRENT: Final[str] = "/users/current"
ENDPOINT_USERS_UPDATE: Final[str] = "/users/update"
ENDPOINT_PRODUCTS: Final[str] = "/products"
ENDPOINT_CATEGORIES: Final[str] = "/categories"
ENDPOINT_SUPPLIERS: Final[str] = "/suppliers"
ENDPOINT_TRANSACTIONS: Final[str] = "/transactions"

# ===== PASSWORD VALIDATION =====
MIN_PASSWORD_LENGTH: Final[int] = 6

# ===== ROLES =====
ROLE_ADMIN: Final[str] = "ADMIN"
ROLE_MANAGER: Final[str] = "MANAGER"

# ===== TRANSACTION TYPES =====
TRANSACTION_PURCHASE: Final[str] = "PURCHASE"
TRANSACTION_SALE: Final[str] = "SALE"
TRANSACTION_RETURN: Final[str] = "RETURN"
TRANSACTION_FILTER_ALL: Final[str] = "ALL"
TRANSACTION_TYPES: Final[tuple] = (TRANSACTION_PURCHASE, TRANSACTION_SALE, TRANSACTION_RETURN)

# ===== API MESSAGES =====
MSG_DEFAULT_SUCCESS: Final[str] = "Success"
MSG_NETWORK_ERROR: Final[str] = "Network error. Please try again."

# ===== UI MESSAGES =====
MSG_EMPTY_FIELDS: Final[str] = "❌ Please fill in all required fields"
MSG_LOGIN_ERROR: Final[str] = "❌ Invalid email or password"
MSG_REGISTER_SUCCESS: Final[str] = "✅ Registration successful! Please login with your credentials."
MSG_REGISTER_ERROR: Final[str] = "❌ Registration failed"
MSG_PASSWORDS_MISMATCH: Final[str] = "❌ Passwords do not match"
MSG_PROFILE_UNAVAILABLE: Final[str] = "❌ Signed in, but the user profile could not be loaded. Please try again."
MSG_ADMIN_REQUIRED: Final[str] = "⚠️ This action requires the ADMIN role"
MSG_CART_EMPTY: Final[str] = "Please add at least one item"
MSG_CUSTOMER_REQUIRED: Final[str] = "Please enter customer name"
MSG_SUPPLIER_REQUIRED: Final[str] = "Please select a supplier"
MSG_INVALID_LINE: Final[str] = "Please select a product and enter valid quantity and price"
MSG_PRODUCT_NOT_FOUND: Final[str] = "Selected product not found"
MSG_NOT_ENOUGH_STOCK: Final[str] = "Not enough stock. Available: {available}, Requested: {requested}"
MSG_FANOUT_FAILED: Final[str] = "Failed to create {failed} of {total} transactions"

# ===== UI =====
CURRENCY_SYMBOL: Final[str] = "₹"
