"""Authentication dependencies for use in route handlers."""

from futurely.auth.service import fastapi_users

# Letters, vault stats and delivery logs all require an active account.
# Email verification is not enforced before writing letters.
current_user = fastapi_users.current_user(active=True)
