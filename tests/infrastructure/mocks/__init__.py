"""Mock collaborators for tracking tests."""
