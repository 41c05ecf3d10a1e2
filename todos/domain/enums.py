from enum import Enum


class Priority(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"

    def __str__(self):
        return self.value


class StatusFilter(str, Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    def __str__(self):
        return self.value


class SortOption(str, Enum):
    NONE = "none"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"

    def __str__(self):
        return self.value


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def __str__(self):
        return self.value
