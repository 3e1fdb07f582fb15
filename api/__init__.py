"""
API REST para la consulta de CEPs de Banxico.

Este paquete expone endpoints REST para consultar pagos SPEI y el catálogo
de bancos. Las consultas largas pueden encolarse: el worker RQ ejecuta la
sesión de navegador y guarda el resultado del job.
"""

__version__ = "1.0.0"
