"""
Services module for the redirect decision logic.

- selector: pure weighted destination choice
- link_repository: storage collaborator (SQL and in-memory)
- redirect_service: slug -> RedirectResult orchestration
"""
