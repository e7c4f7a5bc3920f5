"""
Job Board web frontend - Flask JSON API over the job board services.

Provides the public job listing with filters and pagination, saved jobs,
profile settings and the admin dashboard.
"""
