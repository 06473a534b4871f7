"""ISUCONDITION web service."""
