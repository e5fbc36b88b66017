"""
Reports - Plugins de informes

Cada subpaquete contiene la lógica, plantillas y configuración de un tipo
de informe.
"""
