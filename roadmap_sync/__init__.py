"""
Sincronizacion de un roadmap exportado en CSV hacia las tablas Airtable
de Epics y Tasks.
"""

__version__ = "1.0.0"
