# Supabase Auth
# Credentials are verified by Supabase's built-in authentication system.
# No custom tables are required for authentication - Supabase Auth handles:
# - User login (auth.sign_in_with_password)
# - Password hashing and security
# - Admin user creation (auth.admin.create_user, service role key)

"""
Session payload persisted by ims.core.session_manager under the
"userSession" key of the session store:

{
    "email": "admin@example.com",
    "name": "Store Admin",
    "role": "admin",                      # super_admin | admin | sales_manager | investor
    "permissions": {
        "dashboard": true,                # flag module
        "products": {"view": true, "add": true, "edit": true, "delete": false},
        ...
    },
    "loginTime": "2026-01-01T09:00:00Z"
}

role and permissions are copied from the active row of the users table at
login; they do not change until the next login.

The Supabase access token returned by /auth/login is stored alongside, under
"userSession.accessToken". Requests send it as "Authorization: Bearer <token>"
to act as the session.
"""
