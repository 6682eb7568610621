class ApiError(Exception):
    def __init__(self, message: str, code: str, http_status: int) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status


class AuthError(ApiError):
    def __init__(self) -> None:
        super().__init__(
            message="Authentication failed",
            code="AUTH_FAILED",
            http_status=401,
        )


class MalformedInputError(ApiError):
    def __init__(self, message: str, code: str = "SCHEMA_INVALID", http_status: int = 400) -> None:
        super().__init__(message=message, code=code, http_status=http_status)


class UnsupportedAlgorithmError(ApiError):
    def __init__(self, algorithm: object) -> None:
        super().__init__(
            message=f"Unsupported hash algorithm: {algorithm}",
            code="UNSUPPORTED_ALGORITHM",
            http_status=400,
        )
        self.algorithm = algorithm


class PrimitiveFailureError(ApiError):
    def __init__(self, message: str = "Cryptographic primitive failed") -> None:
        super().__init__(message=message, code="PRIMITIVE_FAILURE", http_status=502)


class AuditUnavailableError(ApiError):
    def __init__(self) -> None:
        super().__init__(
            message="Audit log is not writable",
            code="AUDIT_UNAVAILABLE",
            http_status=503,
        )


class InternalError(ApiError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message=message, code="INTERNAL_ERROR", http_status=500)
