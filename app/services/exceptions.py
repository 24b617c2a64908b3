# app/services/exceptions.py

class ServiceError(Exception):
    """Clase base para errores de la capa de servicio."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class DomainValidationError(ServiceError):
    """Entrada de dominio inválida (cantidad, precio, email...)."""
    pass


class ResourceNotFoundError(ServiceError):
    """Recurso no encontrado, local o en un servicio colaborador."""
    pass


class ConflictError(ServiceError):
    """Conflicto de estado en la operación."""
    pass


class InvalidStateError(ConflictError):
    """La operación no está permitida en el estado actual del carrito."""
    pass


class ServiceUnavailableError(ServiceError):
    """Un colaborador externo (usuarios, productos, SMTP) no responde o falla."""
    pass
