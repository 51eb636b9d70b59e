"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los puntos de entrada estables de la capa de aplicación:
  - ActivityLogger: registro y consulta del log de actividad
  - export_delimited: exportación CSV del log

Nota:
  - Los casos de uso se importan desde `usecases/` subdirectories.
===============================================================================
"""

from .activity_log import (
    EXPORT_HEADER,
    ActivityLogger,
    ActivityModule,
    export_delimited,
    export_filename,
)

__all__ = [
    "EXPORT_HEADER",
    "ActivityLogger",
    "ActivityModule",
    "export_delimited",
    "export_filename",
]
