"""
Custom exception hierarchy for music-convert.

Fatal errors (missing FFmpeg, missing target directory) abort the run.
Per-file errors are caught by the batch processor and recorded in the
conversion summary.
"""


class MusicConvertError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message, error_code=None, suggestion=None):
        self.error_code = error_code
        self.suggestion = suggestion
        super().__init__(message)

    def get_user_message(self):
        """Get a user-friendly error message with suggestions."""
        message = str(self)
        if self.suggestion:
            message += f"\n\nSuggestion: {self.suggestion}"
        if self.error_code:
            message += f"\nError Code: {self.error_code}"
        return message


class DependencyError(MusicConvertError):
    """Raised when required external tools are not found or broken."""

    def __init__(self, dependency_name, message=None):
        self.dependency_name = dependency_name

        if not message:
            message = f"Required dependency '{dependency_name}' is not available"

        suggestion = self._get_dependency_suggestion(dependency_name)
        super().__init__(message, error_code="DEP001", suggestion=suggestion)

    def _get_dependency_suggestion(self, dependency_name):
        """Provide installation suggestions for different dependencies."""
        suggestions = {
            "ffmpeg": "Install FFmpeg from https://ffmpeg.org/ and ensure it's in your system PATH",
            "ffprobe": "ffprobe ships with FFmpeg; reinstall FFmpeg and ensure it's in your system PATH",
        }
        return suggestions.get(dependency_name.lower(), f"Please install {dependency_name}")


class FileProcessingError(MusicConvertError):
    """Base class for errors tied to a single input file."""

    def __init__(self, message, filename, operation=None):
        self.filename = filename
        self.operation = operation
        super().__init__(message, error_code="FILE001")


class ConversionError(FileProcessingError):
    """Raised when FFmpeg fails to convert a file.

    The message is FFmpeg's own error text so that it can be shown to the
    user unchanged in the summary.
    """

    def __init__(self, message, filename, returncode=None):
        self.returncode = returncode
        super().__init__(message, filename, "conversion")
        self.suggestion = "Check if the file is corrupted or not a supported media file"
        self.error_code = "CONV001"


class VerificationError(FileProcessingError):
    """Raised when a converted file fails the post-conversion checks."""

    def __init__(self, filename, message="Output verification failed"):
        super().__init__(message, filename, "verification")
        self.suggestion = "The converted file is empty or has no audio stream"
        self.error_code = "VERIFY001"


class ValidationError(MusicConvertError):
    """Raised when user input validation fails."""

    def __init__(self, message, validation_type, value=None):
        self.validation_type = validation_type
        self.value = value

        suggestion = self._get_validation_suggestion(validation_type)
        super().__init__(message, error_code="VAL001", suggestion=suggestion)

    def _get_validation_suggestion(self, validation_type):
        suggestions = {
            "directory": "Ensure the directory exists and you have permission to read it",
        }
        return suggestions.get(validation_type, "Please check the input and try again")


class DirectoryNotFoundError(ValidationError):
    """Raised when the directory to scan does not exist."""

    def __init__(self, directory):
        super().__init__(f"Directory not found: {directory}", "directory", directory)
