"""
Service layer abstraction.

Each service encapsulates business logic for a domain and delegates
persistence to a repository, so API handlers never touch the database.
"""
