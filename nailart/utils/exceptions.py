"""
Custom exceptions for the application.
"""

class BackendError(Exception):
    """Exception raised when a Supabase call fails."""
    def __init__(self, operation, message="Backend operation failed", code=None, status_code=None, original_error=None):
        self.operation = operation
        self.code = code
        self.status_code = status_code
        self.original_error = original_error
        self.message = message
        error_msg = f"{message} (operation: {operation})"
        if original_error:
            error_msg += f": {str(original_error)}"
        super().__init__(error_msg)

class GenerationError(Exception):
    """Exception raised when the image generation API fails or answers badly."""
    def __init__(self, message="Image generation failed", status_code=None):
        self.status_code = status_code
        super().__init__(message)

class ConfigurationError(ValueError):
    """Exception raised when a configuration value is missing or invalid."""
    def __init__(self, config_key, message=None):
        self.config_key = config_key
        super().__init__(message or f"Missing or invalid configuration: {config_key}")

class AuthenticationError(Exception):
    """Exception raised when authentication fails."""
    def __init__(self, message="Authentication failed", status_code=401):
        self.status_code = status_code
        super().__init__(message)
