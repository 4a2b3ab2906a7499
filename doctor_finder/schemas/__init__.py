"""
Pydantic schemas for API request and response validation.

All FastAPI endpoints use Pydantic models with explicit types. The only
free-form payloads are the decoded recommendation records and the debug
diagnostics, which come from an untrusted model reply.
"""
