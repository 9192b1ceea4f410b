"""Yacht Fleet Operations backend.

Certificate scanning and Document AI field mapping, warranty extraction,
AI assistant functions, and fleet dashboard metrics on top of a hosted
Postgres backend.
"""
