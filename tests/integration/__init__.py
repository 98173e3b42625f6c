"""
blueprint-compliance — integration test package

File: tests/integration/__init__.py

Purpose
- Test package marker file.
- Keep this file lightweight; tests here touch the real filesystem and spawn the CLI.
"""
