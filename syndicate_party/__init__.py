"""Party management for syndicated lending: companies, borrowers and investors."""

__version__ = "0.1.0"
