# Supabase tables: users, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- full_name: text (not null)
- email: text (unique, not null) - stored lower-cased
- phone: text (nullable)
- role: user_role enum ('super_admin', 'admin', 'sales_manager', 'investor')
- permissions: jsonb (not null) - module -> bool | {action: bool}
- assigned_locations: uuid[] (default: '{}')
- profile_picture_url: text (nullable)
- is_active: boolean (default: true)
- last_login: timestamp (nullable)
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

The permissions column is seeded from ims.config.permissions_config at creation
time and becomes the session permission payload at login.
"""
