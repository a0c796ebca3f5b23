class CaseGenError(Exception):
	"""Base class for every error raised by the generator."""


class InputError(CaseGenError):
	"""The request carries no usable requirement text."""


class FileRejectionError(CaseGenError):
	"""A single reference file failed type, size or decoding checks."""

	def __init__(self, name: str, reason: str) -> None:
		super().__init__(reason)
		self.name = name
		self.reason = reason


class ProviderError(CaseGenError):
	"""The external generation provider could not produce a completion."""
