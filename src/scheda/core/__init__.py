"""
Session-cycle resolution and document-generation engine.

Modules are imported directly (scheda.core.cycle, scheda.core.workflow, ...).
"""
