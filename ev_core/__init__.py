"""Core (UI-agnostic) EV dashboard logic.

This package contains:
- CSV parsing (delimited text -> pandas) and source loading
- filter normalization
- summary compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
