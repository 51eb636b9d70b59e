"""
Use cases de la consola, agrupados por área.
"""
