"""Business rules: errors, access decisions and CRUD services."""
