"""
UI - Interfaz de usuario

Interfaz web Streamlit sobre el motor del registro: formulario de alta,
búsqueda, tabla, borrado y exportaciones.
"""
