"""
===============================================================================
APPLICATION LAYER
===============================================================================

Casos de uso (usecases/) + utilidades de desarrollo (dev_seed_demo).
Los casos de uso se importan desde `usecases/` subdirectories.
===============================================================================
"""
