"""Zone TypeScript files by maintainability and complexity metrics."""

__version__ = "1.0.0"
