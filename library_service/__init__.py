"""
Package marker for the book record service.
It groups the HTTP layer (`api`) and shared runtime helpers (`common`) under one import path.
Most functionality lives in the sibling packages; this file intentionally stays lightweight.
"""
