"""Excepciones de la consulta de CEP."""


class CEPQueryError(Exception):
    """Error base de la consulta de CEP."""


class FormDataError(CEPQueryError):
    """Los datos del formulario no pasan la validación previa al lanzamiento."""


class SubmitButtonError(CEPQueryError):
    """El botón de consulta no existe o sigue deshabilitado."""


class VisibilityTimeout(CEPQueryError):
    """El modal de resultados no se mostró dentro del tiempo límite."""


class ScriptExecutionError(CEPQueryError):
    """El proceso del script terminó con error o excedió su timeout."""


class OutputContractError(CEPQueryError):
    """La salida del script no cumple el contrato del envelope."""


class EmptyOutputError(OutputContractError):
    pass


class EnvelopeNotFoundError(OutputContractError):
    pass


class MalformedEnvelopeError(OutputContractError):
    pass


class InvalidEnvelopeError(OutputContractError):
    pass


class ScriptFailedError(OutputContractError):
    """El envelope reporta ``success: false``."""
