"""
Service layer abstraction.

Each service encapsulates business logic for a domain and opens one
unit of work per call.  Services take a connection factory so tests
can point them at a throwaway database.
"""
