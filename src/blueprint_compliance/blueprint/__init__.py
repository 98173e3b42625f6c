"""
blueprint-compliance — Blueprint generation and persistence

File: src/blueprint_compliance/blueprint/__init__.py

Purpose
- Turn a structural specification into a Blueprint, and read/write the
  persisted JSON document.
"""
