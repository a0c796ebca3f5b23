from enum import StrEnum, auto


class Priority(StrEnum):
	HIGH = auto()
	MEDIUM = auto()
	LOW = auto()


class PriorityFilter(StrEnum):
	"""
	Values accepted by the result panel filter.
	ALL: passes every test case through.
	"""
	ALL = auto()
	HIGH = auto()
	MEDIUM = auto()
	LOW = auto()
