from enum import Enum


class ApplicationStatus(str, Enum):
    APPLIED = "Applied"
    INTERVIEWING = "Interviewing"
    REJECTED = "Rejected"
    OFFER = "Offer"
    WITHDREW = "Withdrew"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


# Sentinel used by the list view's status filter.
ALL_STATUSES = "All"
