"""Shared validators package for the application.

This package contains reusable validation functions that can be used
across different features and changesets.

Available validators:
- email.py: Email address format validation
"""
