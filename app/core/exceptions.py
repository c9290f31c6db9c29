class FunctionError(Exception):
    """Error raised by the edge-function style endpoints.

    Rendered as ``{"error": message}`` instead of FastAPI's ``{"detail": ...}``.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
